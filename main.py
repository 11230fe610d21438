"""
Main FastAPI application (entrypoint).

Responsibilities:
- Wire the users router under /api/users
- Register centralized exception handlers
- Provide middleware: request-id logging, CORS
- Add health / readiness endpoints
- Initialize DB tables on startup (if the DB is enabled)

Notes:
- Without a DB (USE_DB=false) the app keeps users in an in-memory store that
  lives as long as the process.
- In production create the schema ahead of time instead of relying on create_all.
"""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import uvicorn

from api import routes_users
from config.settings import Settings, settings as default_settings
from core.db import Base, create_db
from core.exception_handlers import register_exception_handlers
from core.logging import configure_logging, request_logging_middleware
from core.response import ok
from models import db_models  # noqa: F401 ensure models are imported so tables are registered
from services.user_store import InMemoryUserStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.API_TITLE, description=settings.API_DESCRIPTION, version=settings.API_VERSION)

    # Read once; every request's UserService gets this value
    app.state.min_age = settings.MIN_AGE
    app.state.user_store = InMemoryUserStore()

    # Engine and sessions come from these settings, not the module-level ones
    engine, session_maker = create_db(settings)
    app.state.engine = engine
    app.state.session_maker = session_maker

    # CORS - adjust origins for production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes_users.router, prefix="/api/users", tags=["users"])

    register_exception_handlers(app)

    # Add request logging middleware (adds X-Request-ID header and logs)
    app.middleware("http")(request_logging_middleware)

    @app.get("/health")
    async def health():
        """Simple health endpoint used by load balancers and orchestrators."""
        return ok({"status": "ok"})

    @app.get("/ready")
    async def ready():
        """Readiness: check DB connectivity if configured."""
        try:
            if engine:
                async with engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            return ok({"ready": True})
        except Exception:
            logger.exception("Readiness check failed")
            return JSONResponse(status_code=503, content={"ok": False, "data": None, "error": {"code": "db_unreachable", "message": "DB unavailable"}})

    @app.on_event("startup")
    async def on_startup():
        """
        On startup:
        - Create DB tables (development convenience).
        """
        if engine is None:
            logger.info("Serving users from the in-memory store (min age %s)", settings.MIN_AGE)
            return
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception:
            # Do not crash the process for missing DB during local dev; log for ops
            logger.exception("DB initialization failed on startup")

    @app.on_event("shutdown")
    async def on_shutdown():
        if engine is not None:
            await engine.dispose()

    return app


app = create_app()

if __name__ == "__main__":
    # Run with: python main.py for local dev. For production use uvicorn/gunicorn with workers.
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

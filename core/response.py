from datetime import datetime
from typing import Any, Dict, Union


def ok(data=None):
    """Standard success envelope (used by health endpoints)."""
    return {"ok": True, "data": data, "error": None}


def message_body(message: str) -> Dict[str, str]:
    """Body for simple not-found / bad-state errors."""
    return {"message": message}


def error_body(status_code: int, details: Union[str, Dict[str, str]]) -> Dict[str, Any]:
    """Body for validation and constraint failures: timestamp, error code and details."""
    return {
        "timestamp": datetime.now().isoformat(),
        "errorCode": status_code,
        "details": details,
    }

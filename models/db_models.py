"""
SQLAlchemy ORM models.

Purpose:
- Define the users table
- Use SQLAlchemy async-compatible models

Production notes:
- email and phone_number carry UNIQUE constraints; they are the last line of
  defence when two requests pass the service's uniqueness checks at once
- NULL phone numbers never collide, so users without a phone are unrestricted
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, UniqueConstraint
from core.db import Base
from datetime import datetime


class User(Base):
    """
    Represents a user.

    Columns:
    - id: surrogate key, assigned on first insert
    - email: unique login/contact address
    - first_name/last_name: required names
    - birth_date: used for the minimum age rule and range search
    - address: optional free text
    - phone_number: optional, "+" followed by 10-15 digits, unique when set
    - created_at/updated_at: audit timestamps
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    birth_date = Column(Date, nullable=False, index=True)
    address = Column(String(500), nullable=True)
    phone_number = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("phone_number", name="uq_users_phone_number"),
    )

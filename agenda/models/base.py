# agenda/models/base.py
"""Shared declarative base and column helpers"""
from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time used for ORM-side timestamp defaults"""
    return datetime.now(timezone.utc)

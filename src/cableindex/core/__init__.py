"""Core modules for database, errors, and dependencies."""

from cableindex.core.database import Base, close_db, get_session, init_db, is_unique_violation
from cableindex.core.errors import (
    CableIndexError,
    DuplicateKey,
    InUse,
    InvalidReference,
    InvalidReplacement,
    NotFound,
    SiteNotFound,
    ValidationFailed,
)

__all__ = [
    "Base",
    "init_db",
    "close_db",
    "get_session",
    "is_unique_violation",
    "CableIndexError",
    "NotFound",
    "SiteNotFound",
    "InvalidReference",
    "InUse",
    "InvalidReplacement",
    "DuplicateKey",
    "ValidationFailed",
]

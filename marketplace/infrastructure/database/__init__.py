"""Database infrastructure helpers (engine, sessions, migrations)."""

from .base import Base
from .session import Database, after_commit

__all__ = ["Base", "Database", "after_commit"]

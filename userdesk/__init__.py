"""User directory service: account storage, JSON API and HTML pages."""

from __future__ import annotations

from typing import Any

from .database import Database, QueryResult, resolve_database_path
from .errors import NotFoundError, UserdeskError, ValidationError
from .models import User
from .users import UserRepository


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the combined web + API application."""

    from .application import create_application

    return create_application(*args, **kwargs)


__all__ = [
    "Database",
    "NotFoundError",
    "QueryResult",
    "User",
    "UserRepository",
    "UserdeskError",
    "ValidationError",
    "create_app",
    "resolve_database_path",
]

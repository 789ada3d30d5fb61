# ridebook/infra/__init__.py
"""
Infrastructure layer: PostgreSQL access, password hashing and bearer tokens.
"""

from ridebook.infra.database import DatabaseManager, get_db
from ridebook.infra.security import PasswordHasher, TokenIssuer, TokenPayload

__all__ = [
    "DatabaseManager",
    "get_db",
    "PasswordHasher",
    "TokenIssuer",
    "TokenPayload",
]

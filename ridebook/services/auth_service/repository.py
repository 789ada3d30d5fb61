from typing import Optional

from asyncpg import Connection

from ridebook.infra.database import DatabaseManager
from ridebook.shared.models.account_dto import AccountRecord
from ridebook.shared.models.enums import AccountRole

ACCOUNT_COLUMNS = """
    user_id AS id, name, email, phone_number, password, role,
    created_at, updated_at
"""


class AccountRepository:
    """Rider/admin accounts stored in ``users``."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    async def get_by_email(self, email: str, conn: Optional[Connection] = None) -> Optional[AccountRecord]:
        """Returns the account registered with ``email`` (case-insensitive)."""
        query = f"SELECT {ACCOUNT_COLUMNS} FROM users WHERE lower(email) = lower($1)"
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(query, email)
            if record:
                return AccountRecord(**dict(record))
            return None

    async def create(
        self,
        name: str,
        email: str,
        phone_number: str,
        password_hash: str,
        role: AccountRole = AccountRole.RIDER,
        conn: Optional[Connection] = None,
    ) -> AccountRecord:
        """Inserts an account. Raises asyncpg.UniqueViolationError on a duplicate email."""
        query = f"""
            INSERT INTO users (name, email, phone_number, password, role)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {ACCOUNT_COLUMNS}
        """
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(query, name, email, phone_number, password_hash, role.value)
            return AccountRecord(**dict(record))


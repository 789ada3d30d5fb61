#!/usr/bin/env python3
# create_admin.py
"""
Creates an admin account. Admins cannot register through the API.

Usage:
    python create_admin.py --email admin@example.com --name "Ops Admin" \
        --phone +15550000000 --password 'long-secret'
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from ridebook.common.logger import log_info, setup_logging
from ridebook.config import settings
from ridebook.infra.database import get_db
from ridebook.infra.security import PasswordHasher
from ridebook.services.auth_service.repository import AccountRepository
from ridebook.shared.errors import conflict
from ridebook.shared.models.account_dto import AccountDTO, RegisterUserRequest
from ridebook.shared.models.enums import AccountRole


async def provision_admin(
    accounts: AccountRepository,
    hasher: PasswordHasher,
    request: RegisterUserRequest,
) -> AccountDTO:
    if await accounts.get_by_email(request.email):
        raise conflict("User with this email already exists")

    account = await accounts.create(
        name=request.name,
        email=request.email,
        phone_number=request.phone_number,
        password_hash=await hasher.hash(request.password),
        role=AccountRole.ADMIN,
    )
    await log_info(f"Admin account created: {account.id}", extra={"user_id": str(account.id)})
    return account.public()


def parse_args(argv: list[str] | None = None) -> RegisterUserRequest:
    parser = argparse.ArgumentParser(description="Create a ridebook admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--phone", required=True)
    parser.add_argument("--password", required=True)
    args = parser.parse_args(argv)
    return RegisterUserRequest(
        name=args.name,
        email=args.email,
        phone_number=args.phone,
        password=args.password,
    )


async def main(argv: list[str] | None = None) -> None:
    request = parse_args(argv)
    setup_logging()

    db = get_db()
    await db.connect(dsn=settings.database.dsn, min_size=1, max_size=1)
    try:
        admin = await provision_admin(AccountRepository(db), PasswordHasher(), request)
        print(f"Admin {admin.email} created with id {admin.id}")
    finally:
        await db.disconnect()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as e:
        print(f"Failed: {e}", file=sys.stderr)
        sys.exit(1)

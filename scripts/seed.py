#!/usr/bin/env python
"""
Seed the registry with a sample super-admin organization for development.
"""

import argparse
import asyncio
import sys

from orgmanager.config import get_settings
from orgmanager.core.auth.backend import PasswordHasher
from orgmanager.core.constants import ROLE_SUPER_ADMIN
from orgmanager.core.database import Database, TenantStore
from orgmanager.core.errors import AppException
from orgmanager.modules.admins.repos import AdminRepository
from orgmanager.modules.organizations.repos import OrganizationRepository
from orgmanager.modules.organizations.services import OrganizationLifecycle


SAMPLE_ORG_NAME = "Sample Org"


async def seed_sample(email: str, password: str) -> None:
    """Create the sample organization and promote its admin to super-admin."""
    settings = get_settings()
    database = Database.from_settings(settings)
    await database.connect()

    try:
        async with database.transaction() as session:
            organizations = OrganizationRepository(session)
            admins = AdminRepository(session)

            existing = await organizations.get_by_name(SAMPLE_ORG_NAME)
            if existing:
                print(f"Sample organization already exists: {existing.namespace}")
                return

            lifecycle = OrganizationLifecycle(
                organizations,
                admins,
                TenantStore(session, prefix=settings.tenant_namespace_prefix),
                PasswordHasher(rounds=settings.bcrypt_rounds),
                min_password_length=settings.min_password_length,
            )
            created = await lifecycle.create(SAMPLE_ORG_NAME, email, password)

            admin = await admins.get_by_email(email)
            if admin is not None:
                admin.role = ROLE_SUPER_ADMIN
                await session.flush()

        print(f"Created organization: {created.organization_name} ({created.id})")
        print(f"Namespace: {created.db_name}")
        print(f"Admin email: {email}")
        print(f"Admin password: {password}")
    finally:
        await database.disconnect()


async def main(email: str, password: str) -> None:
    try:
        await seed_sample(email, password)
    except AppException as exc:
        print(f"Seeding error: {exc.message}")
        sys.exit(1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the registry with a sample organization")
    parser.add_argument("--email", default="admin@sample.com", help="Super-admin email")
    parser.add_argument(
        "--password",
        default="sample_password_123",
        help="Super-admin password",
    )
    args = parser.parse_args()

    asyncio.run(main(args.email, args.password))

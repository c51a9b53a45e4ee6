"""Seed the default permission catalog and role defaults.

Usage:
    python -m scripts.seed_permissions [--create-tables]

--create-tables creates missing tables from the ORM metadata first (local
development). Safe to run repeatedly; existing rows are left untouched.
"""

import asyncio
import sys

from app.core.config import get_settings
from app.domain.exceptions import SqlNotConfiguredException
from app.infrastructure.persistence import database
import app.infrastructure.persistence.models  # noqa: F401  (registers tables on Base.metadata)
from app.infrastructure.services.permission_seed import seed_default_permissions
from app.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Seed permissions, optionally creating tables first."""
    get_settings()
    setup_logging()
    try:
        session_factory = database.get_session_factory()
    except SqlNotConfiguredException:
        print("DATABASE_URL is not configured", file=sys.stderr)
        sys.exit(1)

    if "--create-tables" in sys.argv[1:]:
        async with database.engine.begin() as conn:
            await conn.run_sync(database.Base.metadata.create_all)
        print("Tables created")

    async with session_factory() as session:
        async with session.begin():
            permissions, defaults = await seed_default_permissions(session)
    print(f"Seeded {permissions} permissions and {defaults} role defaults")
    await database.dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())

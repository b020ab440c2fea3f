#!/usr/bin/env python
"""Check that the shop database is reachable and migrated.

Prints the server version, the applied Alembic revision and the row count of
every shop table.

Usage:
    python scripts/check_db.py
"""

import asyncio
import sys

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from app.core.config import get_settings
from app.core.database import dispose_engine, get_engine

EXPECTED_TABLES = ("category", "product", "app_user", "customer_order", "order_item")


async def _present_tables(conn: AsyncConnection) -> set[str]:
    result = await conn.execute(
        text(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = current_schema()"
        )
    )
    return {row[0] for row in result}


async def check_database() -> int:
    """Run the checks; returns the process exit code."""
    settings = get_settings()
    # credentials stay out of the output
    print(f"{settings.app_name} database check: {settings.database_url.split('@')[-1]}")

    try:
        async with get_engine().connect() as conn:
            version = await conn.scalar(text("SELECT version()")) or ""
            print(f"[OK] Connected: {version.split(',')[0]}")

            tables = await _present_tables(conn)
            if "alembic_version" in tables:
                revision = await conn.scalar(text("SELECT version_num FROM alembic_version"))
                print(f"[OK] Alembic revision: {revision}")
            else:
                print("[WARN] No alembic_version table")

            missing = [t for t in EXPECTED_TABLES if t not in tables]
            if missing:
                print(f"[FAIL] Missing tables: {', '.join(missing)} (run: alembic upgrade head)")
                return 1

            for table in EXPECTED_TABLES:
                count = await conn.scalar(text(f'SELECT count(*) FROM "{table}"'))  # noqa: S608
                print(f"       {table:<15} {count:>8} rows")
    except (SQLAlchemyError, OSError) as e:
        print(f"[FAIL] Connection failed: {e}")
        print("       Is PostgreSQL running, and is DATABASE_URL in .env correct?")
        return 1
    finally:
        await dispose_engine()

    return 0


def main() -> None:
    sys.exit(asyncio.run(check_database()))


if __name__ == "__main__":
    main()

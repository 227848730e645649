# scripts/init_db.py
import asyncio

from crm.core.config import get_settings
from crm.core.logging import setup_logging
from crm.db import build_engine, create_db_and_tables


async def create_tables():
    settings = get_settings()
    setup_logging(settings.log_level)
    engine = build_engine(settings)
    try:
        await create_db_and_tables(engine)
    finally:
        await engine.dispose()
    print("✅ All missing tables created.")


if __name__ == "__main__":
    asyncio.run(create_tables())

#!/usr/bin/env python3
"""Create the users and transactions tables if they are missing."""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from helpnet.config.database import create_engine  # noqa: E402
from helpnet.models import Base  # noqa: E402

logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create every indexer table (existing tables are left untouched)."""
    engine = create_engine(echo=False)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    finally:
        await engine.dispose()

    logger.success(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    asyncio.run(init_database())

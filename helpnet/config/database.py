"""
Database engine and session factory.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)

from helpnet.config.settings import settings


def create_engine(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """
    Create async engine.

    Args:
        url: Database URL (defaults to settings)
        echo: Log SQL statements (defaults to settings)

    Returns:
        AsyncEngine instance
    """
    return create_async_engine(
        url or settings.async_database_url,
        echo=settings.database_echo if echo is None else echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


engine = create_engine()

async_session_maker = async_sessionmaker(
    engine,
    expire_on_commit=False,
)

from typing import Optional
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from wordle_bot.config import Config
from wordle_bot.database.models import Base
from wordle_bot.utils.logger import setup_logger
from wordle_bot.utils.wordle_exceptions import StoreUnavailableError

class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = Config.DATABASE_URL if database_url is None else database_url
        self.engine = None
        self.async_session = None

    @property
    def is_configured(self) -> bool:
        return bool(self.database_url)

    @property
    def is_ready(self) -> bool:
        return self.async_session is not None

    @property
    def session_factory(self):
        """Async session factory for the service layer"""
        if not self.is_ready:
            raise StoreUnavailableError("database has not been initialized")
        return self.async_session

    async def initialize(self):
        """Initialize the database connection and create tables"""
        if not self.is_configured:
            self.logger.warning("DATABASE_URL is not set. Wordle features are disabled until it is configured.")
            return

        self.logger.info("Initializing database...")

        # Convert sync driver URLs to their async counterparts
        database_url = self.database_url
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        elif database_url.startswith('postgresql://'):
            database_url = database_url.replace('postgresql://', 'postgresql+asyncpg://')

        self.engine = create_async_engine(
            database_url,
            echo=Config.DEBUG,
            future=True
        )

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.logger.info("Database initialized successfully")

    def ensure_ready(self):
        if not self.is_configured:
            raise StoreUnavailableError()
        if not self.is_ready:
            raise StoreUnavailableError("database has not been initialized")

    @asynccontextmanager
    async def get_session(self):
        """Get a database session"""
        self.ensure_ready()
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    @asynccontextmanager
    async def transaction(self):
        """
        Create a transaction boundary for atomic operations.

        All operations within the context are committed together on success,
        or rolled back together on failure. Exceptions must be allowed to
        propagate out of the context for rollback to occur.
        """
        self.ensure_ready()
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def close(self):
        """Close the database connection"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.async_session = None
            self.logger.info("Database connection closed")

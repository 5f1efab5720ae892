import logging
import ssl
from typing import Any, List

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from flashcards_api.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()

ASYNC_POSTGRES_SCHEME = "postgresql+asyncpg://"


def normalize_database_url(url: str) -> str:
    # libpq style urls (postgres://, postgresql://) go through asyncpg
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return ASYNC_POSTGRES_SCHEME + url[len(scheme):]
    return url


def unverified_ssl_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def engine_options(url: str, settings: Settings) -> dict:
    options: dict = {"echo": settings.SQL_ECHO}
    if url.startswith("sqlite"):
        # one shared connection, an in-memory database lives as long as it does
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
        return options
    options["pool_size"] = settings.DB_POOL_SIZE
    options["max_overflow"] = 0
    if url.startswith("postgresql") and settings.DATABASE_SSL:
        options["connect_args"] = {"ssl": unverified_ssl_context()}
    return options


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Async engine shared by all requests of one application instance.

    Every statement handed to :meth:`execute` is a SQLAlchemy construct, so
    values always travel as bound parameters.
    """

    def __init__(self, url: str, **options: Any):
        self.url = url
        self.engine = create_async_engine(url, **options)
        self.session_maker = async_sessionmaker(self.engine, expire_on_commit=False)
        if url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = normalize_database_url(settings.DATABASE_URL)
        return cls(url, **engine_options(url, settings))

    async def connect(self) -> None:
        logger.info("Attempting to connect to db")
        async with self.engine.connect() as conn:
            await conn.execute(text("select 1"))
        logger.info("Connected to db!")

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def execute(self, statement) -> List[Any]:
        """Run one statement in its own session, commit, return the rows."""
        async with self.session_maker() as session:
            result = await session.execute(statement)
            rows = result.scalars().all()
            await session.commit()
        return rows

    async def dispose(self) -> None:
        await self.engine.dispose()


# Dependency: the application's database
def get_db(request: Request) -> Database:
    return request.app.state.db

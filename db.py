from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
import logging
import sqlite3

from sqlalchemy import event, Engine, Result, CursorResult
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import Session

import config
from models.base import Base
"""
Imports of these models are needed to correctly create tables in the database.
For more information see https://stackoverflow.com/questions/7478403/sqlalchemy-classes-across-files
"""
from models.category import Category
from models.product import Product
from models.cart import Cart
from models.cartItem import CartItem

logger = logging.getLogger(__name__)

# Keep SQL statements out of the logs unless explicitly requested
sql_echo = config.SQL_ECHO

url = config.DB_URL
engine = create_async_engine(url, echo=sql_echo)
session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Note: SQLAlchemy/aiosqlite logger configuration lives in run.py
# This ensures proper initialization order (after root logger setup)

if url.startswith("sqlite") and "/data/" in url:
    data_folder = Path("data")
    if data_folder.exists() is False:
        data_folder.mkdir()


@asynccontextmanager
async def get_db_session() -> AsyncSession:
    async with session_maker() as async_session:
        try:
            yield async_session
        finally:
            await async_session.close()


async def session_execute(stmt, session: AsyncSession | Session) -> Result[Any] | CursorResult[Any]:
    if isinstance(session, AsyncSession):
        query_result = await session.execute(stmt)
        return query_result
    else:
        query_result = session.execute(stmt)
        return query_result


async def session_scalar(stmt, session: AsyncSession | Session) -> Any:
    if isinstance(session, AsyncSession):
        return await session.scalar(stmt)
    else:
        return session.scalar(stmt)


async def session_flush(session: AsyncSession | Session) -> None:
    if isinstance(session, AsyncSession):
        await session.flush()
    else:
        session.flush()


async def session_commit(session: AsyncSession | Session) -> None:
    if isinstance(session, AsyncSession):
        await session.commit()
    else:
        session.commit()


async def session_rollback(session: AsyncSession | Session) -> None:
    if isinstance(session, AsyncSession):
        await session.rollback()
    else:
        session.rollback()


def session_dialect_name(session: AsyncSession | Session) -> str:
    return session.get_bind().dialect.name


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    # Only SQLite needs foreign keys switched on per connection
    if not isinstance(dbapi_connection, sqlite3.Connection) and "aiosqlite" not in type(dbapi_connection).__module__:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"[DB] Tables ensured: {', '.join(sorted(Base.metadata.tables))}")

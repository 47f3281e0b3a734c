from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from app.core.config import settings


class Base(DeclarativeBase):
	pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
	cursor = dbapi_connection.cursor()
	cursor.execute("PRAGMA foreign_keys=ON")
	cursor.close()


def create_engine(url: str | None = None, **kwargs) -> AsyncEngine:
	db_engine = create_async_engine(url or settings.database_url, echo=False, pool_pre_ping=True, **kwargs)
	if db_engine.dialect.name == "sqlite":
		event.listen(db_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
	return db_engine


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
	return async_sessionmaker(bind=bind, expire_on_commit=False)


engine: AsyncEngine = create_engine()
SessionLocal: async_sessionmaker[AsyncSession] = create_session_factory(engine)

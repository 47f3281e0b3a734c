import asyncio

from alembic import context
from sqlalchemy.engine import Connection

from app.core.config import settings
from app.db.session import Base, create_engine
import app.models  # noqa: F401


config = context.config
target_metadata = Base.metadata


def run_migrations_offline() -> None:
	context.configure(url=settings.database_url, target_metadata=target_metadata, literal_binds=True)
	with context.begin_transaction():
		context.run_migrations()


def _run(connection: Connection) -> None:
	context.configure(connection=connection, target_metadata=target_metadata)
	with context.begin_transaction():
		context.run_migrations()


async def run_migrations_online() -> None:
	db_engine = create_engine()
	async with db_engine.connect() as connection:
		await connection.run_sync(_run)
	await db_engine.dispose()


if context.is_offline_mode():
	run_migrations_offline()
else:
	asyncio.run(run_migrations_online())

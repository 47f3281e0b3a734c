import asyncio
import sys
from loguru import logger
from aiogram import Bot, Dispatcher
from aiogram.enums import ParseMode
from aiogram.client.default import DefaultBotProperties

from app.core.config import settings
from app.db.session import engine, Base
from sqlalchemy.ext.asyncio import AsyncEngine
import app.models  # noqa: F401  register mappers on Base.metadata
from app.bot.handlers.admin.dashboard import router as admin_dashboard_router
from app.bot.handlers.admin.orders import router as admin_orders_router
from app.bot.handlers.admin.products import router as admin_products_router
from app.bot.handlers.admin.clients import router as admin_clients_router


def setup_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())


async def main() -> None:
    setup_logging()
    if not settings.bot_token:
        logger.error("BOT_TOKEN is not set")
        sys.exit(1)

    # ensure DB is up and metadata loaded; create tables if not exist
    async def _init_db(db_engine: AsyncEngine) -> None:
        async with db_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    await _init_db(engine)

    async with Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML)
    ) as bot:
        dp = Dispatcher()
        dp.include_routers(admin_dashboard_router, admin_orders_router, admin_products_router, admin_clients_router)
        logger.info("Bot started")
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())


if __name__ == "__main__":
    asyncio.run(main())

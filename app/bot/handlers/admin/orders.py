from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from app.db.session import SessionLocal
from app.bot.keyboards.inline import back_to_menu_keyboard
from app.bot.handlers.admin.common import is_admin
from app.bot.texts import receipt_text
from app.bot.parsing import command_args, parse_order_args
from app.services.errors import ServiceError
from app.services.orders import create_order


router = Router(name="admin_orders")


@router.message(Command("neworder"))
async def new_order(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	try:
		params = parse_order_args(command_args(message.text))
		async with SessionLocal() as session:
			receipt = await create_order(session, **params)
	except ServiceError as exc:
		await message.answer(f"❌ {exc}")
		return
	await message.answer(receipt_text(receipt), reply_markup=back_to_menu_keyboard().as_markup())

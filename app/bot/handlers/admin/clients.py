from decimal import Decimal

from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message, CallbackQuery

from app.db.session import SessionLocal
from app.bot.keyboards.inline import admin_menu_keyboard, back_to_menu_keyboard
from app.bot.handlers.admin.common import is_admin, safe_answer, safe_edit_cb
from app.bot import texts
from app.bot.parsing import command_args, parse_decimal, parse_int, split_fields
from app.services import clients
from app.services.errors import InvalidInput, ServiceError


router = Router(name="admin_clients")


@router.message(Command("addclient"))
async def add_client(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	fields = split_fields(command_args(message.text))
	try:
		if len(fields) < 2:
			raise InvalidInput("Использование: /addclient имя; телефон; [адрес]; [кешбэк]; [комментарий]")
		fields += [""] * (5 - len(fields))
		async with SessionLocal() as session:
			client = await clients.create_client(
				session,
				full_name=fields[0],
				phone=fields[1],
				address=fields[2],
				cashback=parse_decimal(fields[3], "Кешбэк") if fields[3] else Decimal("0"),
				comment=fields[4] or None,
			)
	except ServiceError as exc:
		await message.answer(str(exc))
		return
	await message.answer(f"Клиент добавлен:\n{texts.clients_text([client])}", reply_markup=admin_menu_keyboard().as_markup())


@router.message(Command("editclient"))
async def edit_client(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	fields = split_fields(command_args(message.text))
	try:
		if len(fields) not in (3, 4):
			raise InvalidInput("Использование: /editclient ID; имя; телефон; [адрес]")
		fields += [""] * (4 - len(fields))
		async with SessionLocal() as session:
			client = await clients.update_client(
				session,
				client_id=parse_int(fields[0], "ID клиента"),
				full_name=fields[1],
				phone=fields[2],
				address=fields[3],
			)
	except ServiceError as exc:
		await message.answer(str(exc))
		return
	await message.answer(f"Клиент обновлён:\n{texts.clients_text([client])}", reply_markup=admin_menu_keyboard().as_markup())


@router.message(Command("delclient"))
async def delete_client(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	try:
		client_id = parse_int(command_args(message.text), "ID клиента")
		async with SessionLocal() as session:
			await clients.delete_client(session, client_id)
	except ServiceError as exc:
		await message.answer(str(exc))
		return
	await message.answer(f"Клиент {client_id} удалён", reply_markup=admin_menu_keyboard().as_markup())


@router.message(Command("listclients"))
async def list_clients(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	async with SessionLocal() as session:
		rows = await clients.list_clients(session)
	await message.answer(texts.clients_text(rows), reply_markup=admin_menu_keyboard().as_markup())


@router.callback_query(F.data == "admin:clients")
async def admin_clients(callback: CallbackQuery) -> None:
	await safe_answer(callback)
	if not is_admin(callback.from_user.id):  # type: ignore[union-attr]
		return
	async with SessionLocal() as session:
		rows = await clients.list_clients(session)
	await safe_edit_cb(callback, texts.clients_text(rows), reply_markup=back_to_menu_keyboard().as_markup())

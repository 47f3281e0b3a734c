from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message, CallbackQuery

from app.db.session import SessionLocal
from app.bot.keyboards.inline import admin_menu_keyboard, back_to_menu_keyboard
from app.bot.handlers.admin.common import is_admin, safe_answer, safe_edit_cb
from app.bot import texts
from app.bot.parsing import command_args, parse_decimal, parse_int, split_fields
from app.services import catalog
from app.services.errors import InvalidInput, ServiceError


router = Router(name="admin_products")


@router.message(Command("addcat"))
async def add_category(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	name = command_args(message.text)
	if not name:
		await message.answer("Использование: /addcat НазваниеКатегории", reply_markup=admin_menu_keyboard().as_markup())
		return
	try:
		async with SessionLocal() as session:
			await catalog.create_category(session, name)
	except ServiceError as exc:
		await message.answer(str(exc), reply_markup=admin_menu_keyboard().as_markup())
		return
	await message.answer("Категория добавлена", reply_markup=admin_menu_keyboard().as_markup())


@router.message(Command("listcat"))
async def list_categories(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	async with SessionLocal() as session:
		cats = await catalog.list_categories(session)
	await message.answer(texts.categories_text(cats), reply_markup=admin_menu_keyboard().as_markup())


@router.callback_query(F.data == "admin:category:list")
async def admin_category_list(callback: CallbackQuery) -> None:
	await safe_answer(callback)
	if not is_admin(callback.from_user.id):  # type: ignore[union-attr]
		return
	async with SessionLocal() as session:
		cats = await catalog.list_categories(session)
	await safe_edit_cb(callback, texts.categories_text(cats), reply_markup=back_to_menu_keyboard().as_markup())


@router.message(Command("addproduct"))
async def add_product(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	fields = split_fields(command_args(message.text))
	try:
		if len(fields) != 4:
			raise InvalidInput("Использование: /addproduct название; цена; вес; ID_категории")
		async with SessionLocal() as session:
			product = await catalog.create_product(
				session,
				name=fields[0],
				price=parse_decimal(fields[1], "Цена"),
				weight=parse_decimal(fields[2], "Вес"),
				category_id=parse_int(fields[3], "ID категории"),
			)
	except ServiceError as exc:
		await message.answer(str(exc))
		return
	await message.answer(f"Товар добавлен:\n{texts.products_text([product])}", reply_markup=admin_menu_keyboard().as_markup())


@router.message(Command("editproduct"))
async def edit_product(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	fields = split_fields(command_args(message.text))
	try:
		if len(fields) not in (4, 5):
			raise InvalidInput("Использование: /editproduct ID; название; цена; вес; [ID_категории]")
		category_id = parse_int(fields[4], "ID категории") if len(fields) == 5 and fields[4] else None
		async with SessionLocal() as session:
			product = await catalog.update_product(
				session,
				product_id=parse_int(fields[0], "ID товара"),
				name=fields[1],
				price=parse_decimal(fields[2], "Цена"),
				weight=parse_decimal(fields[3], "Вес"),
				category_id=category_id,
			)
	except ServiceError as exc:
		await message.answer(str(exc))
		return
	await message.answer(f"Товар обновлён:\n{texts.products_text([product])}", reply_markup=admin_menu_keyboard().as_markup())


@router.message(Command("delproduct"))
async def delete_product(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	try:
		product_id = parse_int(command_args(message.text), "ID товара")
		async with SessionLocal() as session:
			await catalog.delete_product(session, product_id)
	except ServiceError as exc:
		await message.answer(str(exc))
		return
	await message.answer(f"Товар {product_id} удалён", reply_markup=admin_menu_keyboard().as_markup())


@router.message(Command("listproducts"))
async def list_products(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	async with SessionLocal() as session:
		products = await catalog.list_products(session)
	await message.answer(texts.products_text(products), reply_markup=admin_menu_keyboard().as_markup())


@router.callback_query(F.data == "admin:products")
async def admin_products(callback: CallbackQuery) -> None:
	await safe_answer(callback)
	if not is_admin(callback.from_user.id):  # type: ignore[union-attr]
		return
	async with SessionLocal() as session:
		products = await catalog.list_products(session)
	await safe_edit_cb(callback, texts.products_text(products), reply_markup=back_to_menu_keyboard().as_markup())

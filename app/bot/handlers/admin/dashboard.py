from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from app.db.session import SessionLocal
from app.bot.keyboards.inline import admin_menu_keyboard, back_to_menu_keyboard
from app.bot.handlers.admin.common import is_admin, safe_answer, safe_edit_cb
from app.bot import texts
from app.bot.parsing import command_args, parse_client_identifier
from app.services import dashboard
from app.services.errors import ServiceError


router = Router(name="admin_dashboard")


async def _report(name: str) -> str:
	async with SessionLocal() as session:
		if name == "stats":
			return texts.mini_stats_text(await dashboard.mini_stats(session))
		if name == "revenue":
			return texts.revenue_chart_text(await dashboard.revenue_chart(session))
		if name == "popular":
			return texts.popular_categories_text(await dashboard.popular_categories(session))
		if name == "recent":
			return texts.recent_sales_text(await dashboard.recent_sales(session))
		if name == "topproducts":
			return texts.top_products_text(await dashboard.top_products(session))
		if name == "topclients":
			return texts.top_clients_text(await dashboard.top_clients(session))
	raise ValueError(f"Unknown report: {name}")


REPORT_COMMANDS = ("stats", "revenue", "popular", "recent", "topproducts", "topclients")


@router.message(Command("admin"))
async def admin_menu(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	await message.answer("Админ меню", reply_markup=admin_menu_keyboard().as_markup())


@router.callback_query(F.data == "admin:open")
async def admin_open(callback: CallbackQuery) -> None:
	await safe_answer(callback)
	if not is_admin(callback.from_user.id):  # type: ignore[union-attr]
		return
	await safe_edit_cb(callback, "Админ меню", reply_markup=admin_menu_keyboard().as_markup())


@router.message(Command(*REPORT_COMMANDS))
async def report_command(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	name = (message.text or "").split(maxsplit=1)[0].lstrip("/").split("@")[0].lower()
	await message.answer(await _report(name), reply_markup=back_to_menu_keyboard().as_markup())


@router.callback_query(F.data.startswith("dash:"))
async def report_callback(callback: CallbackQuery) -> None:
	await safe_answer(callback)
	if not is_admin(callback.from_user.id):  # type: ignore[union-attr]
		return
	name = (callback.data or "").split(":", 1)[1]
	if name not in REPORT_COMMANDS:
		return
	await safe_edit_cb(callback, await _report(name), reply_markup=back_to_menu_keyboard().as_markup())


@router.message(Command("client"))
async def client_card(message: Message) -> None:
	if not is_admin(message.from_user.id):  # type: ignore[union-attr]
		await message.answer("Нет доступа")
		return
	try:
		identifier = parse_client_identifier(command_args(message.text))
		async with SessionLocal() as session:
			details = await dashboard.client_details(session, identifier)
	except ServiceError as exc:
		await message.answer(str(exc))
		return
	await message.answer(texts.client_details_text(details), reply_markup=back_to_menu_keyboard().as_markup())

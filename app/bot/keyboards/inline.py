from aiogram.utils.keyboard import InlineKeyboardBuilder
from aiogram.types import InlineKeyboardButton


def admin_menu_keyboard() -> InlineKeyboardBuilder:
	builder = InlineKeyboardBuilder()
	builder.row(
		InlineKeyboardButton(text="📊 Статистика месяца", callback_data="dash:stats"),
		InlineKeyboardButton(text="📈 Выручка", callback_data="dash:revenue"),
	)
	builder.row(
		InlineKeyboardButton(text="🥧 Категории", callback_data="dash:popular"),
		InlineKeyboardButton(text="🧾 Последние продажи", callback_data="dash:recent"),
	)
	builder.row(
		InlineKeyboardButton(text="🏆 Топ товаров", callback_data="dash:topproducts"),
		InlineKeyboardButton(text="👑 Топ клиентов", callback_data="dash:topclients"),
	)
	builder.row(
		InlineKeyboardButton(text="📋 Категории", callback_data="admin:category:list"),
		InlineKeyboardButton(text="📦 Товары", callback_data="admin:products"),
	)
	builder.row(
		InlineKeyboardButton(text="👥 Клиенты", callback_data="admin:clients"),
	)
	return builder



def back_to_menu_keyboard() -> InlineKeyboardBuilder:
	builder = InlineKeyboardBuilder()
	builder.row(InlineKeyboardButton(text="↩️ Назад", callback_data="admin:open"))
	return builder
from decimal import Decimal

from aiogram.utils.text_decorations import html_decoration

from app.core.config import settings
from app.schemas.catalog import CategoryOut, ClientOut, ProductOut
from app.schemas.dashboard import (
	CategoryShare,
	ClientDetails,
	ClientOrderView,
	MiniStats,
	RecentSale,
	RevenueChart,
	RevenueSeries,
	TopClient,
	TopProduct,
)
from app.schemas.orders import OrderReceipt


EMPTY = "Нет данных"
# Telegram rejects longer messages
MESSAGE_LIMIT = 4096
COMMENT_LIMIT = 500


def _q(text: str) -> str:
	return html_decoration.quote(text)


def money(value: Decimal) -> str:
	return f"{value:.2f}{settings.currency_symbol}"


def thousands(value: Decimal) -> str:
	return f"{value:.1f} тыс.{settings.currency_symbol}"


def mini_stats_text(stats: MiniStats) -> str:
	return "\n".join([
		"📊 <b>Статистика за месяц</b>",
		f"Продано единиц: <b>{stats.total_units_sold}</b>",
		f"Покупателей: <b>{stats.total_buyers}</b>",
		f"Заказов: <b>{stats.total_orders}</b>",
		f"Выручка: <b>{money(stats.total_revenue)}</b>",
	])


def _series_lines(title: str, series: RevenueSeries) -> list[str]:
	lines = [f"<b>{title}</b>: {thousands(series.revenue_k)}"]
	if not series.buckets:
		lines.append(EMPTY)
	for bucket in series.buckets:
		lines.append(f"{bucket.label}: {thousands(bucket.revenue_k)}, продаж {bucket.units}")
	return lines


def revenue_chart_text(chart: RevenueChart) -> str:
	lines = ["📈 <b>Выручка</b>", ""]
	lines += _series_lines("Неделя", chart.week)
	lines.append("")
	lines += _series_lines("Полгода", chart.half_year)
	return "\n".join(lines)


def popular_categories_text(shares: list[CategoryShare]) -> str:
	if not shares:
		return f"🥧 <b>Популярные категории</b>\n{EMPTY}"
	lines = ["🥧 <b>Популярные категории</b>"]
	for share in shares:
		lines.append(f"{_q(share.category)}: {share.percentage:.2f}% ({share.count} шт.)")
	return "\n".join(lines)


def recent_sales_text(sales: list[RecentSale]) -> str:
	if not sales:
		return f"🧾 <b>Последние продажи</b>\n{EMPTY}"
	lines = ["🧾 <b>Последние продажи</b>"]
	for sale in sales:
		lines.append(f"#{sale.id} {sale.date} {_q(sale.client)}: {sale.cost}")
	return "\n".join(lines)


def top_products_text(products: list[TopProduct]) -> str:
	if not products:
		return f"🏆 <b>Топ товаров</b>\n{EMPTY}"
	lines = ["🏆 <b>Топ товаров</b>"]
	for pos, product in enumerate(products, start=1):
		lines.append(f"{pos}. {_q(product.name)}: {product.quantity} шт.")
	return "\n".join(lines)


def top_clients_text(clients: list[TopClient]) -> str:
	if not clients:
		return f"👑 <b>Топ клиентов</b>\n{EMPTY}"
	lines = ["👑 <b>Топ клиентов</b>"]
	for pos, client in enumerate(clients, start=1):
		lines.append(f"{pos}. {_q(client.full_name)} (ID {client.client_id}): {money(client.total)}")
	return "\n".join(lines)


def _order_block(order: ClientOrderView) -> str:
	status = "✅" if order.status else "⏳"
	lines = [
		"",
		f"{status} <b>Заказ #{order.order_id}</b> от {order.date}",
		f"Сумма без скидки: {money(order.total_price_without_discount)}",
		f"Скидка {order.discount_percent.normalize():f}%: {money(order.discount_amount)}",
		f"Кешбэк списан/начислен: {money(order.cashback_used)} / {money(order.cashback_earned)}",
		f"Итого: <b>{money(order.final_total_price)}</b>",
	]
	for line in order.products:
		lines.append(f"• {_q(line.name)} ({_q(line.category)}) {line.quantity} × {money(line.price)} = {money(line.total)}")
	return "\n".join(lines)


def client_details_text(details: ClientDetails, limit: int = MESSAGE_LIMIT) -> str:
	"""Client card with the newest orders that fit into one message."""
	lines = [
		f"👤 <b>{_q(details.full_name)}</b> (ID {details.id})",
		f"Телефон: {_q(details.phone)}",
		f"Адрес: {_q(details.address)}",
		f"Кешбэк: <b>{money(details.cashback)}</b>",
	]
	if details.comment:
		lines.append(f"Комментарий: {_q(details.comment[:COMMENT_LIMIT])}")
	if not details.orders:
		lines += ["", "Заказов нет"]
		return "\n".join(lines)

	text = "\n".join(lines)
	for shown, order in enumerate(details.orders):
		block = _order_block(order)
		rest = len(details.orders) - shown - 1
		footer = f"\n\n… и ещё заказов: {rest}" if rest else ""
		if len(text) + len(block) + len(footer) > limit:
			return text + f"\n\n… и ещё заказов: {len(details.orders) - shown}"
		text += block
	return text


def receipt_text(receipt: OrderReceipt) -> str:
	return "\n".join([
		f"✅ Заказ #{receipt.order_id} создан",
		f"К оплате: <b>{money(receipt.final_price)}</b>",
		f"Начислено кешбэка: {money(receipt.cashback_earned)}",
		f"Баланс кешбэка клиента: {money(receipt.updated_client_cashback)}",
	])


def categories_text(categories: list[CategoryOut]) -> str:
	if not categories:
		return "Категорий нет"
	return "\n".join(f"{c.id}: {_q(c.name)}" for c in categories)


def products_text(products: list[ProductOut]) -> str:
	if not products:
		return "Товаров нет"
	return "\n".join(
		f"{p.id}: {_q(p.name)} ({_q(p.category)}) {money(p.price)}, {p.weight} кг"
		for p in products
	)


def clients_text(clients: list[ClientOut]) -> str:
	if not clients:
		return "Клиентов нет"
	return "\n".join(
		f"{c.id}: {_q(c.full_name)}, {_q(c.phone)}, кешбэк {money(c.cashback)}"
		for c in clients
	)

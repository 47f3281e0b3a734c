import calendar
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from loguru import logger
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.models.client import Client
from app.models.order import Order, OrderItem
from app.models.product import Category, Product
from app.schemas.dashboard import (
	CategoryShare,
	ChartBucket,
	ClientDetails,
	ClientOrderView,
	MiniStats,
	OrderLineView,
	RecentSale,
	RevenueChart,
	RevenueSeries,
	TopClient,
	TopProduct,
)
from app.services.errors import ClientNotFound
from app.services.orders import HUNDRED, quantize_money


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
THOUSAND = Decimal("1000")
DATE_FORMAT = "%d.%m.%Y"


def utc(value: datetime) -> datetime:
	# sqlite hands back naive datetimes, everything is stored in UTC
	if value.tzinfo is None:
		return value.replace(tzinfo=timezone.utc)
	return value.astimezone(timezone.utc)


def _now(now: datetime | None) -> datetime:
	return datetime.now(timezone.utc) if now is None else utc(now)


def month_start(value: datetime) -> datetime:
	return value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def shift_months(value: datetime, months: int) -> datetime:
	"""Move `value` by whole calendar months, clamping the day to the month length."""
	index = value.year * 12 + (value.month - 1) + months
	year, month = divmod(index, 12)
	month += 1
	day = min(value.day, calendar.monthrange(year, month)[1])
	return value.replace(year=year, month=month, day=day)


def _to_decimal(value) -> Decimal:
	if value is None:
		return Decimal("0")
	if isinstance(value, Decimal):
		return value
	return Decimal(str(value))


async def _orders_between(session: AsyncSession, start: datetime, end: datetime) -> list[Order]:
	logger.debug("Loading orders between {} and {}", start, end)
	result = await session.scalars(
		select(Order)
		.options(selectinload(Order.items))
		.where(Order.created_at >= start, Order.created_at <= end)
		.order_by(Order.created_at, Order.id)
	)
	return list(result)


def _units(order: Order) -> int:
	return sum(item.quantity for item in order.items)


async def mini_stats(session: AsyncSession, now: datetime | None = None) -> MiniStats:
	now = _now(now)
	orders = await _orders_between(session, month_start(now), now)
	return MiniStats(
		total_units_sold=sum(_units(o) for o in orders),
		total_buyers=len({o.client_id for o in orders}),
		total_orders=len(orders),
		total_revenue=sum((o.total_price for o in orders), Decimal("0")),
	)


def _series(orders: list[Order], label_of) -> RevenueSeries:
	# orders arrive sorted by date, so insertion order is chronological
	buckets: dict[str, list] = {}
	for order in orders:
		bucket = buckets.setdefault(label_of(utc(order.created_at)), [Decimal("0"), 0])
		bucket[0] += order.total_price
		bucket[1] += _units(order)
	return RevenueSeries(
		revenue_k=sum((o.total_price for o in orders), Decimal("0")) / THOUSAND,
		buckets=[
			ChartBucket(label=label, revenue_k=revenue / THOUSAND, units=units)
			for label, (revenue, units) in buckets.items()
		],
	)


async def revenue_chart(session: AsyncSession, now: datetime | None = None) -> RevenueChart:
	now = _now(now)
	week_orders = await _orders_between(session, now - timedelta(days=7), now)
	half_year_orders = await _orders_between(session, shift_months(month_start(now), -5), now)
	return RevenueChart(
		week=_series(week_orders, lambda ts: WEEKDAYS[ts.weekday()]),
		half_year=_series(half_year_orders, lambda ts: f"{ts.month:02d}.{ts.year}"),
	)


async def popular_categories(session: AsyncSession, now: datetime | None = None) -> list[CategoryShare]:
	"""Share of sold units per category over the last calendar month.

	The leading categories are reported individually, the rest is folded
	into a single bucket that is omitted when empty.
	"""
	now = _now(now)
	start = shift_months(now, -1)
	quantity = func.sum(OrderItem.quantity).label("quantity")
	rows = (await session.execute(
		select(Category.id, Category.name, quantity)
		.select_from(OrderItem)
		.join(Order, OrderItem.order_id == Order.id)
		.join(Product, OrderItem.product_id == Product.id)
		.join(Category, Product.category_id == Category.id)
		.where(Order.created_at >= start, Order.created_at <= now)
		.group_by(Category.id, Category.name)
		.order_by(desc(quantity), Category.id)
	)).all()

	total = sum(int(row.quantity) for row in rows)
	if total == 0:
		return []

	top = rows[:settings.popular_categories_top]
	result = [
		CategoryShare(
			category=row.name,
			percentage=round(int(row.quantity) / total * 100, 2),
			count=int(row.quantity),
		)
		for row in top
	]
	other = total - sum(int(row.quantity) for row in top)
	if other > 0:
		result.append(CategoryShare(
			category=settings.other_category_label,
			percentage=round(other / total * 100, 2),
			count=other,
		))
	return result


async def recent_sales(session: AsyncSession, limit: int | None = None) -> list[RecentSale]:
	result = await session.scalars(
		select(Order)
		.options(selectinload(Order.client))
		.order_by(Order.created_at.desc(), Order.id.desc())
		.limit(settings.recent_sales_limit if limit is None else limit)
	)
	return [
		RecentSale(
			id=str(order.id),
			client=order.client.full_name,
			cost=f"{order.total_price:.0f}{settings.currency_symbol}",
			date=utc(order.created_at).strftime(DATE_FORMAT),
		)
		for order in result
	]


async def top_products(session: AsyncSession, limit: int | None = None) -> list[TopProduct]:
	quantity = func.sum(OrderItem.quantity).label("quantity")
	rows = (await session.execute(
		select(Product.id, Product.name, quantity)
		.select_from(OrderItem)
		.join(Product, OrderItem.product_id == Product.id)
		.group_by(Product.id, Product.name)
		.order_by(desc(quantity), Product.id)
		.limit(settings.top_n if limit is None else limit)
	)).all()
	return [TopProduct(product_id=row.id, name=row.name, quantity=int(row.quantity)) for row in rows]


async def top_clients(session: AsyncSession, limit: int | None = None) -> list[TopClient]:
	total = func.sum(Order.total_price).label("total")
	rows = (await session.execute(
		select(Client.id, Client.full_name, total)
		.select_from(Order)
		.join(Client, Order.client_id == Client.id)
		.group_by(Client.id, Client.full_name)
		.order_by(desc(total), Client.id)
		.limit(settings.top_n if limit is None else limit)
	)).all()
	return [
		TopClient(client_id=row.id, full_name=row.full_name, total=quantize_money(_to_decimal(row.total)))
		for row in rows
	]


def _order_view(order: Order) -> ClientOrderView:
	subtotal = sum((item.total for item in order.items), Decimal("0"))
	return ClientOrderView(
		order_id=order.id,
		date=utc(order.created_at).strftime(DATE_FORMAT),
		delivery_method=order.delivery_method,
		total_price_without_discount=subtotal,
		discount_percent=order.discount_percent,
		discount_amount=quantize_money(subtotal * order.discount_percent / HUNDRED),
		cashback_used=order.cashback_used,
		cashback_earned=order.cashback_earned,
		final_total_price=order.total_price,
		status=order.status,
		products=[
			OrderLineView(
				name=item.product.name,
				category=item.product.category.name,
				quantity=item.quantity,
				price=item.unit_price,
				total=item.total,
			)
			for item in order.items
		],
	)


async def client_details(session: AsyncSession, identifier: int | str) -> ClientDetails:
	"""Client card with the full order history, newest orders first.

	An int is looked up as the client id, a string as the exact full name.
	"""
	stmt = select(Client).options(
		selectinload(Client.orders)
		.selectinload(Order.items)
		.selectinload(OrderItem.product)
		.selectinload(Product.category)
	)
	if isinstance(identifier, int):
		stmt = stmt.where(Client.id == identifier)
	else:
		stmt = stmt.where(Client.full_name == identifier).order_by(Client.id).limit(1)
	client = await session.scalar(stmt)
	if client is None:
		raise ClientNotFound(identifier)

	orders = sorted(client.orders, key=lambda o: (utc(o.created_at), o.id), reverse=True)
	return ClientDetails(
		id=client.id,
		full_name=client.full_name,
		phone=client.phone,
		address=client.address,
		cashback=client.cashback,
		comment=client.comment,
		orders=[_order_view(order) for order in orders],
	)

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.services import dashboard
from app.services.errors import ClientNotFound
from conftest import NOW


def at(*args) -> datetime:
	return datetime(*args, tzinfo=timezone.utc)


def test_shift_months_clamps_day():
	assert dashboard.shift_months(at(2026, 3, 31, 10), -1) == at(2026, 2, 28, 10)
	assert dashboard.shift_months(at(2026, 1, 15), -5) == at(2025, 8, 15)
	assert dashboard.shift_months(at(2026, 10, 1), -5) == at(2026, 5, 1)


@pytest.fixture
async def catalog(factory):
	meat = await factory.category("Мясо")
	milk = await factory.category("Молочное")
	return {
		"meat": meat,
		"milk": milk,
		"mince": await factory.product("Фарш", "500", meat),
		"steak": await factory.product("Стейк", "1000", meat),
		"kefir": await factory.product("Кефир", "100", milk),
	}


async def test_mini_stats_without_orders_is_zero(session_factory, factory, catalog):
	client = await factory.client()
	await factory.order(client, [(catalog["mince"], 1)], created_at=at(2026, 9, 30, 23, 59))

	async with session_factory() as session:
		stats = await dashboard.mini_stats(session, now=NOW)

	assert stats.total_units_sold == 0
	assert stats.total_buyers == 0
	assert stats.total_orders == 0
	assert stats.total_revenue == 0


async def test_mini_stats_month_to_date(session_factory, factory, catalog):
	ivan = await factory.client("Иван")
	olga = await factory.client("Ольга")
	await factory.order(ivan, [(catalog["mince"], 2)], created_at=at(2026, 10, 1), total_price="900")
	await factory.order(ivan, [(catalog["kefir"], 3)], created_at=at(2026, 10, 19, 11))
	await factory.order(olga, [(catalog["steak"], 1), (catalog["kefir"], 1)], created_at=at(2026, 10, 10))
	# outside the window
	await factory.order(olga, [(catalog["steak"], 5)], created_at=at(2026, 9, 30, 23, 59))
	await factory.order(olga, [(catalog["steak"], 5)], created_at=at(2026, 10, 19, 13))

	async with session_factory() as session:
		stats = await dashboard.mini_stats(session, now=NOW)

	assert stats.total_units_sold == 7
	assert stats.total_buyers == 2
	assert stats.total_orders == 3
	assert stats.total_revenue == Decimal("2300")


async def test_revenue_chart_week_and_half_year(session_factory, factory, catalog):
	client = await factory.client()
	# week window is [Oct 12 12:00, Oct 19 12:00]
	await factory.order(client, [(catalog["mince"], 1)], created_at=at(2026, 10, 12, 13))  # Monday
	await factory.order(client, [(catalog["kefir"], 2)], created_at=at(2026, 10, 14, 10))  # Wednesday
	await factory.order(client, [(catalog["kefir"], 3)], created_at=at(2026, 10, 14, 18))  # Wednesday
	await factory.order(client, [(catalog["steak"], 1)], created_at=at(2026, 10, 19, 9))  # Monday
	await factory.order(client, [(catalog["steak"], 1)], created_at=at(2026, 10, 12, 11))  # before window
	# half-year window starts May 1st
	await factory.order(client, [(catalog["steak"], 2)], created_at=at(2026, 5, 5))
	await factory.order(client, [(catalog["kefir"], 4)], created_at=at(2026, 8, 2))
	await factory.order(client, [(catalog["steak"], 9)], created_at=at(2026, 4, 30, 23))

	async with session_factory() as session:
		chart = await dashboard.revenue_chart(session, now=NOW)

	week = chart.week
	assert week.labels == ["Monday", "Wednesday"]
	assert week.buckets[0].revenue_k == Decimal("1.5")
	assert week.buckets[0].units == 2
	assert week.buckets[1].revenue_k == Decimal("0.5")
	assert week.buckets[1].units == 5
	assert week.revenue_k == Decimal("2")

	half_year = chart.half_year
	assert half_year.labels == ["05.2026", "08.2026", "10.2026"]
	assert [b.units for b in half_year.buckets] == [2, 4, 8]
	assert half_year.buckets[2].revenue_k == Decimal("3")
	assert half_year.revenue_k == Decimal("5.4")


async def test_revenue_chart_empty(session_factory):
	async with session_factory() as session:
		chart = await dashboard.revenue_chart(session, now=NOW)
	assert chart.week.buckets == []
	assert chart.week.revenue_k == 0
	assert chart.half_year.buckets == []


async def test_popular_categories_folds_the_rest(session_factory, factory):
	client = await factory.client()
	quantities = {"Мясо": 100, "Молочное": 50, "Овощи": 30, "Хлеб": 20}
	for name, qty in quantities.items():
		product = await factory.product(f"Товар {name}", "10", await factory.category(name))
		await factory.order(client, [(product, qty)], created_at=NOW - timedelta(days=3))
		# older than a month, ignored
		await factory.order(client, [(product, 1000)], created_at=at(2026, 9, 19, 11))

	async with session_factory() as session:
		shares = await dashboard.popular_categories(session, now=NOW)

	assert [(s.category, s.percentage, s.count) for s in shares] == [
		("Мясо", 50.0, 100),
		("Молочное", 25.0, 50),
		("Овощи", 15.0, 30),
		("Другое", 10.0, 20),
	]
	assert sum(s.percentage for s in shares) == pytest.approx(100, abs=0.05)


async def test_popular_categories_ties_break_on_category_id(session_factory, factory):
	client = await factory.client()
	for name in ("А", "Б", "В", "Г"):
		product = await factory.product(f"Товар {name}", "10", await factory.category(name))
		await factory.order(client, [(product, 7)], created_at=NOW - timedelta(days=1))

	async with session_factory() as session:
		shares = await dashboard.popular_categories(session, now=NOW)

	assert [s.category for s in shares] == ["А", "Б", "В", "Другое"]
	assert [s.percentage for s in shares] == [25.0, 25.0, 25.0, 25.0]


async def test_popular_categories_without_other(session_factory, factory, catalog):
	client = await factory.client()
	await factory.order(client, [(catalog["mince"], 1), (catalog["kefir"], 2)], created_at=NOW - timedelta(days=1))

	async with session_factory() as session:
		shares = await dashboard.popular_categories(session, now=NOW)

	assert [s.category for s in shares] == ["Молочное", "Мясо"]
	assert [s.percentage for s in shares] == [66.67, 33.33]


async def test_popular_categories_empty(session_factory, catalog):
	async with session_factory() as session:
		assert await dashboard.popular_categories(session, now=NOW) == []


async def test_recent_sales_latest_ten(session_factory, factory, catalog):
	client = await factory.client("Анна Смирнова")
	orders = []
	for day in range(1, 13):
		orders.append(await factory.order(
			client, [(catalog["kefir"], 1)], created_at=at(2026, 10, day, 9), total_price="129.6",
		))

	async with session_factory() as session:
		sales = await dashboard.recent_sales(session)

	assert len(sales) == 10
	assert [s.id for s in sales] == [str(o.id) for o in reversed(orders)][:10]
	assert sales[0].client == "Анна Смирнова"
	assert sales[0].cost == "130₽"
	assert sales[0].date == "12.10.2026"


async def test_top_products_bounded_and_sorted(session_factory, factory):
	client = await factory.client()
	category = await factory.category("Разное")
	products = []
	for n in range(12):
		product = await factory.product(f"Товар {n}", "10", category)
		products.append(product)
		await factory.order(client, [(product, n + 1)])
	# tie with "Товар 11" on 12 units, the older product wins
	await factory.order(client, [(products[0], 11)])

	async with session_factory() as session:
		top = await dashboard.top_products(session)

	assert len(top) == 10
	assert [t.quantity for t in top] == sorted((t.quantity for t in top), reverse=True)
	assert (top[0].product_id, top[0].quantity) == (products[0].id, 12)
	assert (top[1].product_id, top[1].quantity) == (products[11].id, 12)
	assert top[0].name == "Товар 0"


async def test_top_clients_by_revenue(session_factory, factory, catalog):
	clients = [await factory.client(f"Клиент {n}") for n in range(11)]
	for n, client in enumerate(clients):
		await factory.order(client, [(catalog["kefir"], 1)], total_price=100 * (n + 1))
	await factory.order(clients[0], [(catalog["kefir"], 1)], total_price="50.5")

	async with session_factory() as session:
		top = await dashboard.top_clients(session)

	assert len(top) == 10
	assert top[0].full_name == "Клиент 10"
	assert top[0].total == Decimal("1100")
	assert [t.total for t in top] == sorted((t.total for t in top), reverse=True)
	assert clients[0].id not in {t.client_id for t in top}


async def test_zero_limit_returns_nothing(session_factory, factory, catalog):
	client = await factory.client()
	await factory.order(client, [(catalog["mince"], 1)])

	async with session_factory() as session:
		assert await dashboard.recent_sales(session, limit=0) == []
		assert await dashboard.top_products(session, limit=0) == []
		assert await dashboard.top_clients(session, limit=0) == []
		assert len(await dashboard.top_clients(session, limit=None)) == 1


async def test_reports_are_idempotent(session_factory, factory, catalog):
	client = await factory.client()
	await factory.order(client, [(catalog["mince"], 2), (catalog["kefir"], 1)], created_at=NOW - timedelta(days=2))

	async with session_factory() as session:
		first = (
			await dashboard.mini_stats(session, now=NOW),
			await dashboard.revenue_chart(session, now=NOW),
			await dashboard.popular_categories(session, now=NOW),
			await dashboard.top_products(session),
			await dashboard.top_clients(session),
		)
	async with session_factory() as session:
		second = (
			await dashboard.mini_stats(session, now=NOW),
			await dashboard.revenue_chart(session, now=NOW),
			await dashboard.popular_categories(session, now=NOW),
			await dashboard.top_products(session),
			await dashboard.top_clients(session),
		)
	assert first == second


async def test_client_details_history(session_factory, factory, catalog):
	client = await factory.client("Пётр Иванов", cashback="12.5")
	old = await factory.order(
		client, [(catalog["mince"], 2)], created_at=at(2026, 9, 1),
		discount_percent="10", cashback_used="100", cashback_earned="45", total_price="800",
	)
	new = await factory.order(client, [(catalog["kefir"], 1), (catalog["steak"], 1)], created_at=at(2026, 10, 2))

	async with session_factory() as session:
		by_id = await dashboard.client_details(session, client.id)
	async with session_factory() as session:
		by_name = await dashboard.client_details(session, "Пётр Иванов")

	assert by_id == by_name
	assert by_id.cashback == Decimal("12.5")
	assert [o.order_id for o in by_id.orders] == [new.id, old.id]

	first, second = by_id.orders
	assert first.date == "02.10.2026"
	assert {(p.name, p.category) for p in first.products} == {("Кефир", "Молочное"), ("Стейк", "Мясо")}
	assert second.total_price_without_discount == Decimal("1000")
	assert second.discount_amount == Decimal("100")
	assert second.cashback_used == Decimal("100")
	assert second.cashback_earned == Decimal("45")
	assert second.final_total_price == Decimal("800")


async def test_client_details_unknown_client(session_factory):
	async with session_factory() as session:
		with pytest.raises(ClientNotFound):
			await dashboard.client_details(session, "Никто")
	async with session_factory() as session:
		with pytest.raises(ClientNotFound):
			await dashboard.client_details(session, 42)

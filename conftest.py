import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_IDS", "1")

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.pool import StaticPool

from app.db.session import Base, create_engine, create_session_factory
from app.models import Category, Client, Order, OrderItem, Product


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)  # a Monday


class Factory:
	"""Writes fixture rows directly, bypassing the services."""

	def __init__(self, session_factory) -> None:
		self.session_factory = session_factory

	async def _add(self, obj):
		async with self.session_factory() as session:
			async with session.begin():
				session.add(obj)
		return obj

	async def category(self, name: str) -> Category:
		return await self._add(Category(name=name))

	async def product(self, name: str, price, category: Category, weight="1") -> Product:
		return await self._add(Product(
			name=name,
			price=Decimal(str(price)),
			weight=Decimal(str(weight)),
			category_id=category.id,
		))

	async def client(self, full_name: str = "Иван Петров", cashback="0", phone: str = "+79990000000") -> Client:
		return await self._add(Client(
			full_name=full_name,
			phone=phone,
			address="Москва",
			cashback=Decimal(str(cashback)),
		))

	async def order(
		self,
		client: Client,
		lines: list[tuple[Product, int]],
		created_at: datetime = NOW,
		total_price=None,
		discount_percent="0",
		cashback_used="0",
		cashback_earned="0",
	) -> Order:
		subtotal = sum((p.price * qty for p, qty in lines), Decimal("0"))
		return await self._add(Order(
			client_id=client.id,
			created_at=created_at,
			delivery_method="Курьер",
			discount_percent=Decimal(str(discount_percent)),
			cashback_used=Decimal(str(cashback_used)),
			cashback_earned=Decimal(str(cashback_earned)),
			total_price=subtotal if total_price is None else Decimal(str(total_price)),
			items=[OrderItem(product_id=p.id, quantity=qty, unit_price=p.price) for p, qty in lines],
		))


@pytest.fixture
async def session_factory():
	engine = create_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)
	yield create_session_factory(engine)
	await engine.dispose()


@pytest.fixture
def factory(session_factory) -> Factory:
	return Factory(session_factory)

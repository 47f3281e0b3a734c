from decimal import Decimal

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.order import OrderItem
from app.models.product import Category, Product
from app.schemas.catalog import CategoryOut, ProductOut
from app.services.errors import (
	CategoryNotFound,
	DuplicateCategory,
	InvalidInput,
	ProductNotFound,
	StoreFailure,
)


def _product_out(product: Product) -> ProductOut:
	return ProductOut(
		id=product.id,
		name=product.name,
		category=product.category.name,
		weight=product.weight,
		price=product.price,
	)


def _check_product_fields(name: str, price: Decimal, weight: Decimal) -> str:
	name = (name or "").strip()
	if not name or price <= 0 or weight <= 0:
		raise InvalidInput("Укажите название, цену больше нуля и вес больше нуля")
	return name


async def create_category(session: AsyncSession, name: str) -> CategoryOut:
	name = (name or "").strip()
	if not name:
		raise InvalidInput("Название категории не может быть пустым")
	try:
		async with session.begin():
			existing = await session.scalar(select(Category).where(Category.name == name))
			if existing is not None:
				raise DuplicateCategory(name)
			category = Category(name=name)
			session.add(category)
			await session.flush()
	except IntegrityError as exc:
		# a concurrent creator won the race, the unique constraint caught it
		raise DuplicateCategory(name) from exc
	except SQLAlchemyError as exc:
		raise StoreFailure(f"Не удалось сохранить категорию: {exc}") from exc
	logger.info("Category {} created: {}", category.id, name)
	return CategoryOut(id=category.id, name=category.name)


async def list_categories(session: AsyncSession) -> list[CategoryOut]:
	result = await session.scalars(select(Category).order_by(Category.name))
	return [CategoryOut(id=c.id, name=c.name) for c in result]


async def create_product(
	session: AsyncSession,
	name: str,
	price: Decimal,
	weight: Decimal,
	category_id: int,
) -> ProductOut:
	name = _check_product_fields(name, price, weight)
	try:
		async with session.begin():
			category = await session.get(Category, category_id)
			if category is None:
				raise CategoryNotFound(category_id)
			product = Product(name=name, price=price, weight=weight, category=category)
			session.add(product)
			await session.flush()
	except SQLAlchemyError as exc:
		raise StoreFailure(f"Не удалось сохранить продукт: {exc}") from exc
	logger.info("Product {} created in category {}", product.id, category.name)
	return _product_out(product)


async def update_product(
	session: AsyncSession,
	product_id: int,
	name: str,
	price: Decimal,
	weight: Decimal,
	category_id: int | None = None,
) -> ProductOut:
	"""Overwrite product fields; the category only changes when it exists."""
	name = _check_product_fields(name, price, weight)
	try:
		async with session.begin():
			product = await session.get(Product, product_id, options=[selectinload(Product.category)])
			if product is None:
				raise ProductNotFound([product_id])
			product.name = name
			product.price = price
			product.weight = weight
			if category_id is not None:
				category = await session.get(Category, category_id)
				if category is not None:
					product.category = category
			await session.flush()
	except SQLAlchemyError as exc:
		raise StoreFailure(f"Не удалось обновить продукт: {exc}") from exc
	logger.info("Product {} updated", product_id)
	return _product_out(product)


async def delete_product(session: AsyncSession, product_id: int) -> None:
	try:
		async with session.begin():
			product = await session.get(Product, product_id)
			if product is None:
				raise ProductNotFound([product_id])
			in_orders = await session.scalar(select(OrderItem.id).where(OrderItem.product_id == product_id).limit(1))
			if in_orders is not None:
				raise InvalidInput(f"Продукт {product_id} есть в заказах, удаление невозможно")
			await session.delete(product)
	except SQLAlchemyError as exc:
		raise StoreFailure(f"Не удалось удалить продукт {product_id}: {exc}") from exc
	logger.info("Product {} deleted", product_id)


async def list_products(session: AsyncSession) -> list[ProductOut]:
	result = await session.scalars(
		select(Product).options(selectinload(Product.category)).order_by(Product.id)
	)
	return [_product_out(p) for p in result]

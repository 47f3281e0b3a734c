from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, NamedTuple

from loguru import logger
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.client import Client
from app.models.order import Order, OrderItem
from app.models.product import Product
from app.schemas.orders import OrderCreate, OrderReceipt
from app.services.errors import (
	ClientNotFound,
	InsufficientCashback,
	InvalidInput,
	ProductNotFound,
	ServiceError,
	StoreFailure,
)


CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def quantize_money(value: Decimal) -> Decimal:
	return value.quantize(CENT, rounding=ROUND_HALF_UP)


class PriceBreakdown(NamedTuple):
	subtotal: Decimal
	discount: Decimal
	final_price: Decimal
	cashback_earned: Decimal


def calculate_price(
	subtotal: Decimal,
	discount_percent: Decimal,
	cashback_used: Decimal,
	cashback_rate: Decimal | None = None,
) -> PriceBreakdown:
	"""Apply discount and cashback to an order subtotal.

	The payable price is clamped at zero; cashback accrues on the
	discounted subtotal regardless of how much cashback was spent.
	"""
	rate = settings.cashback_rate if cashback_rate is None else cashback_rate
	discount = quantize_money(subtotal * discount_percent / HUNDRED)
	discounted = subtotal - discount
	final_price = max(Decimal("0"), quantize_money(discounted - cashback_used))
	cashback_earned = quantize_money(discounted * rate)
	return PriceBreakdown(quantize_money(subtotal), discount, final_price, cashback_earned)


def _validation_message(exc: ValidationError) -> str:
	parts = []
	for err in exc.errors():
		loc = ".".join(str(p) for p in err["loc"])
		parts.append(f"{loc}: {err['msg']}")
	return "; ".join(parts)


async def create_order(
	session: AsyncSession,
	*,
	client_id: int,
	delivery_method: str = "",
	discount_percent: Decimal | int | str = 0,
	discount_reason: str | None = None,
	cashback_used: Decimal | int | str = 0,
	lines: Iterable[Any],
) -> OrderReceipt:
	"""Price an order, persist it and settle the client's cashback.

	`session` must not have an open transaction: the whole read-check-write
	sequence runs inside one `session.begin()` block with the client row
	locked, so concurrent orders of the same client are serialized.
	"""
	try:
		data = OrderCreate(
			client_id=client_id,
			delivery_method=delivery_method,
			discount_percent=discount_percent,
			discount_reason=discount_reason,
			cashback_used=cashback_used,
			lines=list(lines),
		)
	except ValidationError as exc:
		logger.warning("Rejected order for client {}: {}", client_id, exc.error_count())
		raise InvalidInput(_validation_message(exc)) from exc

	try:
		async with session.begin():
			client = await session.scalar(
				select(Client)
				.where(Client.id == data.client_id)
				.with_for_update()
				.execution_options(populate_existing=True)
			)
			if client is None:
				raise ClientNotFound(data.client_id)
			if data.cashback_used > client.cashback:
				raise InsufficientCashback(data.cashback_used, client.cashback)

			product_ids = {line.product_id for line in data.lines}
			result = await session.scalars(select(Product).where(Product.id.in_(sorted(product_ids))))
			products = {p.id: p for p in result}
			missing = sorted(product_ids - products.keys())
			if missing:
				raise ProductNotFound(missing)

			subtotal = sum(
				(products[line.product_id].price * line.quantity for line in data.lines),
				Decimal("0"),
			)
			price = calculate_price(subtotal, data.discount_percent, data.cashback_used)

			order = Order(
				client_id=client.id,
				delivery_method=data.delivery_method,
				discount_percent=data.discount_percent,
				discount_reason=data.discount_reason,
				cashback_used=data.cashback_used,
				cashback_earned=price.cashback_earned,
				total_price=price.final_price,
				status=False,
				items=[
					OrderItem(
						product_id=line.product_id,
						quantity=line.quantity,
						unit_price=products[line.product_id].price,
					)
					for line in data.lines
				],
			)
			session.add(order)
			client.cashback = client.cashback - data.cashback_used + price.cashback_earned
			await session.flush()
	except ServiceError as exc:
		logger.warning("Rejected order for client {}: {}", data.client_id, exc)
		raise
	except SQLAlchemyError as exc:
		logger.exception("Failed to store order for client {}", data.client_id)
		raise StoreFailure(f"Не удалось сохранить заказ: {exc}") from exc

	logger.info(
		"Order {} created for client {}: total={} cashback_earned={}",
		order.id, client.id, order.total_price, order.cashback_earned,
	)
	return OrderReceipt(
		order_id=order.id,
		final_price=order.total_price,
		cashback_earned=order.cashback_earned,
		updated_client_cashback=client.cashback,
	)

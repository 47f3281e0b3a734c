from decimal import Decimal

from pydantic import BaseModel, Field


class OrderLineIn(BaseModel):
	"""One requested order line."""
	product_id: int = Field(description="Product identifier")
	quantity: int = Field(gt=0, description="Units ordered")


class OrderCreate(BaseModel):
	"""Validated input of the settlement engine."""
	client_id: int
	delivery_method: str = ""
	discount_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100, decimal_places=2)
	discount_reason: str | None = None
	cashback_used: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
	lines: list[OrderLineIn] = Field(min_length=1)


class OrderReceipt(BaseModel):
	order_id: int
	final_price: Decimal
	cashback_earned: Decimal
	updated_client_cashback: Decimal

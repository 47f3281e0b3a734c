from decimal import Decimal

from pydantic import BaseModel


class CategoryOut(BaseModel):
	id: int
	name: str


class ProductOut(BaseModel):
	id: int
	name: str
	category: str
	weight: Decimal
	price: Decimal


class ClientOut(BaseModel):
	id: int
	full_name: str
	phone: str
	address: str
	cashback: Decimal
	comment: str | None = None

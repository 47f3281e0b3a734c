from decimal import Decimal

from pydantic import BaseModel, Field


class MiniStats(BaseModel):
	"""Month-to-date summary."""
	total_units_sold: int = 0
	total_buyers: int = 0
	total_orders: int = 0
	total_revenue: Decimal = Decimal("0")


class ChartBucket(BaseModel):
	label: str
	revenue_k: Decimal = Field(description="Revenue in thousands")
	units: int


class RevenueSeries(BaseModel):
	revenue_k: Decimal = Field(default=Decimal("0"), description="Total revenue of the window in thousands")
	buckets: list[ChartBucket] = Field(default_factory=list)

	@property
	def labels(self) -> list[str]:
		return [b.label for b in self.buckets]


class RevenueChart(BaseModel):
	week: RevenueSeries
	half_year: RevenueSeries


class CategoryShare(BaseModel):
	category: str
	percentage: float
	count: int


class RecentSale(BaseModel):
	id: str
	client: str
	cost: str
	date: str


class TopProduct(BaseModel):
	product_id: int
	name: str
	quantity: int


class TopClient(BaseModel):
	client_id: int
	full_name: str
	total: Decimal


class OrderLineView(BaseModel):
	name: str
	category: str
	quantity: int
	price: Decimal
	total: Decimal


class ClientOrderView(BaseModel):
	order_id: int
	date: str
	delivery_method: str
	total_price_without_discount: Decimal
	discount_percent: Decimal
	discount_amount: Decimal
	cashback_used: Decimal
	cashback_earned: Decimal
	final_total_price: Decimal
	status: bool
	products: list[OrderLineView]


class ClientDetails(BaseModel):
	id: int
	full_name: str
	phone: str
	address: str
	cashback: Decimal
	comment: str | None = None
	orders: list[ClientOrderView]

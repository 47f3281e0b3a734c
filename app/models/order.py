from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


class Order(Base):
	__tablename__ = "orders"

	id: Mapped[int] = mapped_column(primary_key=True)
	client_id: Mapped[int] = mapped_column(ForeignKey("clients.id"), index=True)
	created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)
	delivery_method: Mapped[str] = mapped_column(String(64), default="")
	discount_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"))
	discount_reason: Mapped[str | None] = mapped_column(Text(), nullable=True)
	cashback_used: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
	cashback_earned: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
	total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
	# False until the order is fulfilled
	status: Mapped[bool] = mapped_column(default=False)

	client: Mapped["Client"] = relationship(back_populates="orders")
	items: Mapped[list["OrderItem"]] = relationship(back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
	__tablename__ = "order_items"

	id: Mapped[int] = mapped_column(primary_key=True)
	order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"))
	product_id: Mapped[int] = mapped_column(ForeignKey("products.id"))
	quantity: Mapped[int]
	unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))

	order: Mapped[Order] = relationship(back_populates="items")
	product: Mapped["Product"] = relationship()

	@property
	def total(self) -> Decimal:
		return self.unit_price * self.quantity

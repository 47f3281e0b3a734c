from decimal import Decimal
from sqlalchemy import CheckConstraint, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base


class Client(Base):
	__tablename__ = "clients"
	__table_args__ = (
		CheckConstraint("cashback >= 0", name="ck_clients_cashback_non_negative"),
	)

	id: Mapped[int] = mapped_column(primary_key=True)
	full_name: Mapped[str] = mapped_column(String(255), index=True)
	phone: Mapped[str] = mapped_column(String(32))
	address: Mapped[str] = mapped_column(String(512), default="")
	cashback: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
	comment: Mapped[str | None] = mapped_column(Text(), nullable=True)
	# bumped on every UPDATE, a stale writer fails instead of overwriting the balance
	version: Mapped[int] = mapped_column(default=1)

	orders: Mapped[list["Order"]] = relationship("Order", back_populates="client")

	__mapper_args__ = {"version_id_col": version}

from decimal import Decimal
from sqlalchemy import ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base


class Category(Base):
	__tablename__ = "categories"
	__table_args__ = (
		UniqueConstraint("name", name="uq_categories_name"),
	)

	id: Mapped[int] = mapped_column(primary_key=True)
	name: Mapped[str] = mapped_column(String(128))
	
	# Relationships
	products: Mapped[list["Product"]] = relationship("Product", back_populates="category")


class Product(Base):
	__tablename__ = "products"

	id: Mapped[int] = mapped_column(primary_key=True)
	name: Mapped[str] = mapped_column(String(255))
	price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
	weight: Mapped[Decimal] = mapped_column(Numeric(10, 3))
	category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"))
	
	# Relationships
	category: Mapped["Category"] = relationship("Category", back_populates="products")

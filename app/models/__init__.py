from .client import Client
from .product import Product, Category
from .order import Order, OrderItem

__all__ = [
	"Client",
	"Product",
	"Category",
	"Order",
	"OrderItem",
]

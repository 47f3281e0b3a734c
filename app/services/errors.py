class ServiceError(Exception):
	"""Base class for errors reported back to the caller."""


class InvalidInput(ServiceError):
	pass


class DuplicateCategory(InvalidInput):
	def __init__(self, name: str) -> None:
		super().__init__(f"Категория «{name}» уже существует")
		self.name = name


class NotFound(ServiceError):
	pass


class ClientNotFound(NotFound):
	def __init__(self, identifier: int | str) -> None:
		super().__init__(f"Клиент {identifier!r} не найден")
		self.identifier = identifier


class ProductNotFound(NotFound):
	def __init__(self, product_ids: list[int]) -> None:
		ids = ", ".join(str(pid) for pid in product_ids)
		super().__init__(f"Продукт(ы) с ID {ids} не найден(ы)")
		self.product_ids = product_ids


class CategoryNotFound(NotFound):
	def __init__(self, category_id: int) -> None:
		super().__init__(f"Категория с ID {category_id} не найдена")
		self.category_id = category_id


class InsufficientCashback(ServiceError):
	def __init__(self, requested, available) -> None:
		super().__init__(f"Недостаточно кешбэка: запрошено {requested}, доступно {available}")
		self.requested = requested
		self.available = available


class StoreFailure(ServiceError):
	"""Persistence error; the transaction has been rolled back."""

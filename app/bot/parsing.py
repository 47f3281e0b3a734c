from decimal import Decimal, InvalidOperation

from app.services.errors import InvalidInput


def command_args(text: str | None) -> str:
	parts = (text or "").split(maxsplit=1)
	return parts[1].strip() if len(parts) > 1 else ""


def split_fields(args: str) -> list[str]:
	return [p.strip() for p in args.split(";")]


def parse_decimal(raw: str, field: str) -> Decimal:
	try:
		value = Decimal((raw or "").strip().replace(",", "."))
	except InvalidOperation:
		raise InvalidInput(f"{field}: ожидается число, получено {raw!r}") from None
	if not value.is_finite():
		raise InvalidInput(f"{field}: ожидается число, получено {raw!r}")
	return value


def parse_int(raw: str, field: str) -> int:
	try:
		return int((raw or "").strip())
	except ValueError:
		raise InvalidInput(f"{field}: ожидается целое число, получено {raw!r}") from None


def parse_lines(raw: str) -> list[dict]:
	"""Parse "3x2, 5x1" into order lines (product id x quantity)."""
	lines = []
	for chunk in raw.replace(" ", "").split(","):
		if not chunk:
			continue
		product, sep, quantity = chunk.lower().replace("х", "x").partition("x")
		if not sep:
			raise InvalidInput(f"Позиция {chunk!r}: ожидается формат ID x количество")
		lines.append({
			"product_id": parse_int(product, "ID товара"),
			"quantity": parse_int(quantity, "Количество"),
		})
	if not lines:
		raise InvalidInput("Заказ должен содержать хотя бы одну позицию")
	return lines


def parse_order_args(args: str) -> dict:
	"""Parse the /neworder arguments.

	Format: client_id; delivery; discount%; cashback; 3x2, 5x1[; reason]
	"""
	fields = split_fields(args)
	if len(fields) < 5:
		raise InvalidInput(
			"Использование: /neworder ID_клиента; доставка; скидка%; кешбэк; ID_товара x кол-во, ...; [причина скидки]"
		)
	reason = fields[5] if len(fields) > 5 and fields[5] else None
	return {
		"client_id": parse_int(fields[0], "ID клиента"),
		"delivery_method": fields[1],
		"discount_percent": parse_decimal(fields[2].rstrip("%") or "0", "Скидка"),
		"cashback_used": parse_decimal(fields[3] or "0", "Кешбэк"),
		"lines": parse_lines(fields[4]),
		"discount_reason": reason,
	}


def parse_client_identifier(args: str) -> int | str:
	args = args.strip()
	if not args:
		raise InvalidInput("Укажите ID или имя клиента")
	return int(args) if args.isdigit() else args

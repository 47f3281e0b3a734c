from decimal import Decimal

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import Client
from app.models.order import Order
from app.schemas.catalog import ClientOut
from app.services.errors import ClientNotFound, InvalidInput, StoreFailure


def _client_out(client: Client) -> ClientOut:
	return ClientOut(
		id=client.id,
		full_name=client.full_name,
		phone=client.phone,
		address=client.address,
		cashback=client.cashback,
		comment=client.comment,
	)


def _check_client_fields(full_name: str, phone: str) -> tuple[str, str]:
	full_name = (full_name or "").strip()
	phone = (phone or "").strip()
	if not full_name or not phone:
		raise InvalidInput("Укажите имя и телефон клиента")
	return full_name, phone


async def create_client(
	session: AsyncSession,
	full_name: str,
	phone: str,
	address: str = "",
	cashback: Decimal = Decimal("0"),
	comment: str | None = None,
) -> ClientOut:
	full_name, phone = _check_client_fields(full_name, phone)
	if cashback < 0:
		raise InvalidInput("Кешбэк не может быть отрицательным")
	try:
		async with session.begin():
			client = Client(
				full_name=full_name,
				phone=phone,
				address=address or "",
				cashback=cashback,
				comment=comment,
			)
			session.add(client)
			await session.flush()
	except SQLAlchemyError as exc:
		raise StoreFailure(f"Не удалось сохранить клиента: {exc}") from exc
	logger.info("Client {} created", client.id)
	return _client_out(client)


async def update_client(
	session: AsyncSession,
	client_id: int,
	full_name: str,
	phone: str,
	address: str = "",
) -> ClientOut:
	"""Edit contact fields. The cashback balance is changed only by order settlement."""
	full_name, phone = _check_client_fields(full_name, phone)
	try:
		async with session.begin():
			client = await session.scalar(
				select(Client)
				.where(Client.id == client_id)
				.with_for_update()
				.execution_options(populate_existing=True)
			)
			if client is None:
				raise ClientNotFound(client_id)
			client.full_name = full_name
			client.phone = phone
			client.address = address or ""
	except SQLAlchemyError as exc:
		raise StoreFailure(f"Не удалось обновить клиента: {exc}") from exc
	logger.info("Client {} updated", client_id)
	return _client_out(client)


async def delete_client(session: AsyncSession, client_id: int) -> None:
	try:
		async with session.begin():
			client = await session.get(Client, client_id)
			if client is None:
				raise ClientNotFound(client_id)
			has_orders = await session.scalar(select(Order.id).where(Order.client_id == client_id).limit(1))
			if has_orders is not None:
				raise InvalidInput(f"У клиента {client_id} есть заказы, удаление невозможно")
			await session.delete(client)
	except SQLAlchemyError as exc:
		raise StoreFailure(f"Не удалось удалить клиента {client_id}: {exc}") from exc
	logger.info("Client {} deleted", client_id)


async def list_clients(session: AsyncSession) -> list[ClientOut]:
	result = await session.scalars(select(Client).order_by(Client.id))
	return [_client_out(c) for c in result]

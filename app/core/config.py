from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

	bot_token: str | None = None
	admin_ids: str | None = None

	database_url: str = "sqlite+aiosqlite:///./orders.db"
	log_level: str = "INFO"

	# settlement
	cashback_rate: Decimal = Decimal("0.05")

	# dashboard
	top_n: int = 10
	recent_sales_limit: int = 10
	popular_categories_top: int = 3
	currency_symbol: str = "₽"
	other_category_label: str = "Другое"


settings = Settings()  # type: ignore[arg-type]

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from decimal import Decimal
from pydantic import field_validator

class Settings(BaseSettings):
    # Database settings
    POSTGRES_USER: str = 'backoffice_user'
    POSTGRES_PASSWORD: str = 'backoffice_pass'
    POSTGRES_DB: str = 'backoffice_db'
    POSTGRES_HOST: str = 'postgres'
    POSTGRES_PORT: int = 5432

    # Full SQLAlchemy URL, overrides the POSTGRES_* settings (e.g. sqlite:// for tests)
    DATABASE_URL: Optional[str] = None

    # CORS
    CORS_ORIGINS: list = ["*"]

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Document defaults
    DEFAULT_CURRENCY: str = 'EUR'
    DEFAULT_TAX_PERCENTAGE: Decimal = Decimal('21')
    DEFAULT_DISCOUNT_PERCENTAGE: Decimal = Decimal('0')
    INVOICE_PAYMENT_TERM_DAYS: int = 30
    ORDER_NUMBER_PREFIX: str = 'ORD-'
    INVOICE_NUMBER_PREFIX: str = 'INV-'

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", mode="before")
    @classmethod
    def parse_debug(cls, v):
        if isinstance(v, str):
            return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
        return bool(v)

    @field_validator("DEFAULT_TAX_PERCENTAGE", "DEFAULT_DISCOUNT_PERCENTAGE")
    @classmethod
    def validate_percentage(cls, v):
        if v < 0 or v > 100:
            raise ValueError("El porcentaje debe estar entre 0 y 100")
        return v

settings = Settings()

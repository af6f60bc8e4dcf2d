"""Application settings read from the environment.

Infrastructure (databases, brokers, event store) is configured by Protean
through ``domain.toml``. The values here are the storefront's own knobs and
are read on every call so that tests can override them with monkeypatch.
"""

import os
from dataclasses import dataclass


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value not in (None, "") else default


@dataclass(frozen=True)
class Settings:
    environment: str
    currency: str
    tax_rate: float
    address_retry_delay: float
    address_retry_attempts: int
    default_page_size: int
    max_page_size: int
    default_country: str

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def get_settings() -> Settings:
    environment = (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()
    return Settings(
        environment=environment,
        currency=_env("STOREFRONT_CURRENCY", "RUB"),
        tax_rate=float(_env("STOREFRONT_TAX_RATE", "0")),
        address_retry_delay=float(_env("STOREFRONT_ADDRESS_RETRY_DELAY", "0.1")),
        address_retry_attempts=int(_env("STOREFRONT_ADDRESS_RETRY_ATTEMPTS", "1")),
        default_page_size=int(_env("STOREFRONT_DEFAULT_PAGE_SIZE", "20")),
        max_page_size=int(_env("STOREFRONT_MAX_PAGE_SIZE", "100")),
        default_country=_env("STOREFRONT_DEFAULT_COUNTRY", "RU"),
    )

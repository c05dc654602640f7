from dataclasses import replace
from datetime import date
from decimal import Decimal

from pydantic_settings import BaseSettings

from memberwise.data.catalog import PricingCatalog, default_catalog


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = True

    # Promotion overrides (unset = catalog values)
    promotion_rate: Decimal | None = None
    promotion_start: date | None = None
    promotion_end: date | None = None

    # Recommendation engine
    max_savings_percentage: int = 90
    eligibility_discount_in_comparison: bool = False

    # CORS
    cors_origins: str = "http://localhost:5173"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()


def build_catalog(settings: Settings, base: PricingCatalog = default_catalog) -> PricingCatalog:
    """Catalog with the promotion overrides from ``settings`` applied."""
    overrides = {}
    if settings.promotion_rate is not None:
        overrides["current_rate"] = settings.promotion_rate
    if settings.promotion_start is not None:
        overrides["start_date"] = settings.promotion_start
    if settings.promotion_end is not None:
        overrides["end_date"] = settings.promotion_end
    if not overrides:
        return base
    return replace(base, promotion=replace(base.promotion, **overrides))

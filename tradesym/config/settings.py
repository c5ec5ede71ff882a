"""
Tradesym configuration - loaded from environment (TRADESYM_*).
"""

from typing import Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Decoder settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="TRADESYM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Lot sizes
    default_lot_size: int = Field(default=1, ge=1)
    lot_size_overrides: Dict[str, int] = Field(
        default_factory=lambda: {"NIFTY": 75, "SENSEX": 20, "BANKNIFTY": 30}
    )

    # Parsing
    default_expiry_weekday: int = Field(default=3, ge=0, le=6)  # Thursday
    min_options_symbol_length: int = Field(default=10, ge=3)
    warn_unknown_stocks: bool = True

    # Cache
    parse_cache_size: int = Field(default=4096, ge=1)

    @field_validator("lot_size_overrides")
    @classmethod
    def _normalize_overrides(cls, value: Dict[str, int]) -> Dict[str, int]:
        normalized = {}
        for ticker, lot_size in value.items():
            if lot_size < 1:
                raise ValueError(f"Lot size for {ticker} must be positive, got {lot_size}")
            normalized[ticker.strip().upper()] = lot_size
        return normalized


settings = Settings()


def get_settings() -> Settings:
    """Return application settings (for dependency injection)."""
    return settings

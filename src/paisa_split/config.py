"""Configuration management for paisa-split."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Display settings
    currency_symbol: str = "₹"
    digit_grouping: Literal["indian", "western"] = "indian"

    # Split/settlement policy
    percentage_tolerance: float = 0.01  # Allowed distance of a percentage sum from 100
    settlement_tolerance_minor: int = 1  # Rounding slack in a balance sum, in paise

    # Ledger file used by the CLI
    ledger_path: Path = Path.home() / ".paisa_split" / "ledger.json"

    def __init__(self, **kwargs):
        """Initialize settings and create the ledger directory if needed."""
        super().__init__(**kwargs)
        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check your environment variables and "
            f".env file.\n"
            f"Error: {e}"
        ) from e

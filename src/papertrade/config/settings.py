"""Application settings and configuration."""

from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory based on platform."""
    return Path.home() / ".papertrade"


def default_benchmarks() -> dict[str, Decimal]:
    # Assumed annual returns (%), used until real index history is wired in
    return {
        "S&P 500": Decimal("8.5"),
        "NASDAQ": Decimal("10.2"),
        "Russell 2000": Decimal("7.8"),
    }


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PAPERTRADE_",
        extra="ignore",
    )

    app_name: str = "Paper Trading Ledger"
    app_version: str = "0.1.0"

    # Data directory (sqlite database lives here unless database_url is set)
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Market data
    price_provider: str = "stub"
    price_timeout_seconds: float = 5.0
    price_cache_ttl_seconds: int = 30

    # Day-trading compliance
    day_trade_limit: int = 3
    day_trade_window_business_days: int = 5
    pattern_day_trader_min_equity: Decimal = Decimal("25000")
    default_initial_cash: Optional[Decimal] = None

    # Analytics
    risk_free_rate: Decimal = Decimal("0.02")
    position_weight_limit: Decimal = Decimal("20")
    sector_weight_limit: Decimal = Decimal("30")
    concentration_risk_threshold: Decimal = Decimal("0.3")
    stop_loss_percent: Optional[Decimal] = None
    max_suggestions: int = 5
    top_holdings_limit: int = 10
    benchmarks: dict[str, Decimal] = Field(default_factory=default_benchmarks)

    # Background maintenance (counter resets, market value refresh)
    maintenance_enabled: bool = False
    maintenance_interval_seconds: float = 30.0

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "papertrade.db"
        return f"sqlite:///{db_path}"


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None

"""Configuration system using pydantic-settings with .env and optional YAML override."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Large-cap reference list scanned by default
DEFAULT_SCANNER_SYMBOLS: list[str] = [
    "AAPL", "MSFT", "GOOGL", "AMZN", "NVDA", "META", "BRK.B", "LLY", "TSLA",
    "UNH", "JPM", "V", "JNJ", "PG", "HD", "MA", "CVX", "ABBV", "PFE", "BAC",
    "KO", "PEP", "AVGO", "TMO", "COST", "MRK", "WMT", "ABT", "ACN", "CRM",
    "DHR", "VZ", "ADBE", "NFLX", "NKE", "PM", "TXN", "INTC", "QCOM", "HON",
    "IBM", "UNP", "CAT", "GS", "AMAT", "MS", "SPGI", "RTX", "ISRG", "PLD",
    "LMT", "BMY", "T", "DE", "AXP", "GILD", "AMGN", "ADI", "C", "MDLZ",
    "GE", "TJX", "SBUX", "CMCSA", "TMUS", "ADP", "DUK", "SO", "BDX", "ITW",
    "CSCO", "BLK", "SCHW", "CI", "USB", "PNC", "TGT", "MO", "UPS", "LOW",
    "INTU", "CB", "ICE", "CME", "ETN", "AON", "MMC", "REGN", "KLAC", "CDNS",
    "SNPS", "MELI", "PANW", "FTNT", "CRWD", "ZS", "OKTA", "TEAM", "SNOW",
    "DDOG", "PLTR", "RBLX", "UBER", "LYFT", "DASH", "ABNB", "COIN", "HOOD",
    "RIVN", "LCID", "NIO", "XPEV", "LI",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables and optional YAML config."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Persistence
    database_url: str = "sqlite+aiosqlite:///data/portfolio.db"
    storage_key: str = "stock-portfolio-data"

    # Price lookups
    price_cache_ttl_seconds: float = Field(default=600.0, gt=0)
    yahoo_chart_url: str = "https://query1.finance.yahoo.com/v8/finance/chart"
    yahoo_summary_url: str = "https://query2.finance.yahoo.com/v10/finance/quoteSummary"
    yahoo_search_url: str = "https://query1.finance.yahoo.com/v1/finance/search"
    yahoo_chart_range: str = "3mo"
    # None keeps the HTTP client's own default timeout
    http_timeout_seconds: float | None = Field(default=None, gt=0)

    # Finnhub (scanner indicator lookups)
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    finnhub_api_key: str = ""
    finnhub_requests_per_second: float = Field(default=1.0, gt=0)
    finnhub_burst_size: int = Field(default=30, ge=1)

    # Scanner
    scanner_symbols: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SCANNER_SYMBOLS)
    )
    scanner_ma_period: int = Field(default=150, ge=1)
    scanner_max_deviation_pct: float = Field(default=5.0, ge=0)
    scanner_min_market_cap: float = Field(default=1e9, ge=0)

    # Live summary refresh
    refresh_interval_seconds: float = Field(default=10.0, gt=0)

    # Logging
    log_level: str = "INFO"

    # Dashboard
    dashboard_host: str = "0.0.0.0"
    dashboard_port: int = Field(default=8000, ge=1, le=65535)
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost", "http://localhost:8000"]
    )

    # Config file path
    config_file: str = ""

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("scanner_symbols")
    @classmethod
    def normalize_symbols(cls, v: list[str]) -> list[str]:
        return [s.strip().upper() for s in v if s and s.strip()]

    @model_validator(mode="after")
    def apply_yaml_overrides(self) -> "Settings":
        """Apply overrides from YAML config file if specified."""
        config_path = Path(self.config_file) if self.config_file else Path("config.yaml")
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f)
            if yaml_config and isinstance(yaml_config, dict):
                for key, value in yaml_config.items():
                    if hasattr(self, key):
                        object.__setattr__(self, key, value)
        return self


def load_settings(**overrides: Any) -> Settings:
    """Create a Settings instance with optional overrides."""
    return Settings(**overrides)

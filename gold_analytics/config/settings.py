"""
Gold Layer Analytics Configuration

pydantic-settings models for the warehouse connection, the analysis
thresholds, report export and logging. Values come from the environment
or a ``.env`` file.
"""

from datetime import date
from functools import lru_cache
from typing import List, Optional, Sequence

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gold_analytics import __version__


class DatabaseSettings(BaseSettings):
    """Warehouse Database Configuration"""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_", populate_by_name=True)

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    db: str = Field(default="data_warehouse", description="Database name")
    user: str = Field(default="analyst", description="Database user")
    password: SecretStr = Field(default="analyst_password", description="Database password")
    schema_name: Optional[str] = Field(default="gold", description="Schema holding the Gold Layer views")
    echo: bool = Field(default=False, description="Echo SQL queries")
    url: Optional[str] = Field(default=None, alias="DATABASE_URL", description="Async database URL (overrides host/port)")

    @property
    def async_url(self) -> str:
        """Async database URL - uses DATABASE_URL if set, otherwise asyncpg"""
        if self.url:
            return self.url
        return f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}@{self.host}:{self.port}/{self.db}"


class AnalyticsSettings(BaseSettings):
    """Segmentation thresholds and ranking sizes"""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    vip_min_lifespan_months: int = Field(default=12, description="Minimum customer lifespan for VIP/Regular")
    vip_spend_threshold: float = Field(default=5000, description="Spend above which a tenured customer is VIP")
    high_performer_sales: float = Field(default=50000, description="Sales above which a product is a high performer")
    mid_range_sales: float = Field(default=10000, description="Sales from which a product is mid-range")

    top_products: int = Field(default=5, description="Best-selling products to report")
    bottom_products: int = Field(default=5, description="Worst-performing products to report")
    top_subcategories: int = Field(default=5, description="Best-selling subcategories to report")
    top_customers: int = Field(default=10, description="Top customers by revenue to report")
    least_active_customers: int = Field(default=3, description="Customers with fewest orders to report")
    sample_rows: int = Field(default=100, description="Rows returned by the fact table sample")

    as_of_date: Optional[date] = Field(default=None, description="Fixed reference date for ages and recency")


def _one_of(value: str, allowed: Sequence[str], what: str) -> str:
    normalized = value.lower()
    if normalized not in allowed:
        raise ValueError(f"{what} must be one of: {list(allowed)}")
    return normalized


class ExportSettings(BaseSettings):
    """Where ``ReportExporter`` writes and in which format"""

    model_config = SettingsConfigDict(env_prefix="EXPORT_")

    output_path: str = Field(default="./data/reports", description="Report output directory")
    file_format: str = Field(default="parquet", description="Output format: parquet or csv")

    @field_validator("file_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        return _one_of(v, ("parquet", "csv"), "Export format")


class MonitoringSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", populate_by_name=True)

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="DEBUG, INFO, WARNING or ERROR")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="json, or text for a console renderer")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        return _one_of(v, ("json", "text"), "Log format")


class Settings(BaseSettings):
    """
    Everything the CLI and the API read from the environment (or ``.env``).

    Nested sections pick up their own prefixes: POSTGRES_*, ANALYTICS_*,
    EXPORT_*, plus DATABASE_URL, LOG_LEVEL and LOG_FORMAT.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="gold-analytics", alias="APP_NAME")
    app_env: str = Field(default="development", alias="APP_ENV", description="development, staging, production or testing")
    version: str = Field(default=__version__)

    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8088"],
        description="Dashboards allowed to call the API from a browser",
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        return _one_of(v, ("development", "staging", "production", "testing"), "Environment")

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """Settings are read from the environment once per process"""
    return Settings()

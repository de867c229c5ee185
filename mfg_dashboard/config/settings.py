"""
Manufacturing Dashboard Service
Configuration

Settings are read from the environment (and an optional .env file) with
pydantic-settings. Each section is its own BaseSettings class with its own
environment prefix:

- POSTGRES_*        data store connection and pool
- RATE_LIMIT_*, CORS_ORIGINS   HTTP surface
- LOG_*, ENABLE_METRICS        observability
- DASHBOARD_*       reporting windows, thresholds and list sizes
"""

from decimal import Decimal
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Data store connection; DATABASE_URL wins over the individual parts"""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_", populate_by_name=True)

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    db: str = Field(default="manufacturing", alias="POSTGRES_DB", description="Database name")
    user: str = Field(default="manufacturing", description="Database user")
    password: SecretStr = Field(default="secure_password", description="Database password")
    url: Optional[str] = Field(default=None, alias="DATABASE_URL", description="Full async SQLAlchemy URL")

    # One request opens a connection per dashboard metric
    pool_size: int = Field(default=20, ge=1, description="Persistent pool connections")
    max_overflow: int = Field(default=10, ge=0, description="Connections allowed above pool_size")
    pool_timeout: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    echo: bool = Field(default=False, description="Log every SQL statement")

    @property
    def async_url(self) -> str:
        if self.url:
            return self.url
        return (
            f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}"
            f"@{self.host}:{self.port}/{self.db}"
        )


class SecuritySettings(BaseSettings):
    """HTTP surface: rate limiting and CORS"""

    model_config = SettingsConfigDict(env_prefix="")

    rate_limit_requests: int = Field(default=100, ge=1, alias="RATE_LIMIT_REQUESTS")
    rate_limit_window_seconds: int = Field(default=60, ge=1, alias="RATE_LIMIT_WINDOW_SECONDS")
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        alias="CORS_ORIGINS",
        description="Origins allowed to read the dashboard",
    )


class MonitoringSettings(BaseSettings):
    """Logging and Prometheus exposition"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["json", "text"] = Field(default="json", alias="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE", description="Extra JSON log file")
    enable_metrics: bool = Field(default=True, alias="ENABLE_METRICS", description="Expose /metrics")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()


class DashboardSettings(BaseSettings):
    """
    Reporting windows and thresholds.

    Window lengths are calendar months counted back from the reference
    instant of a dashboard request.
    """

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    # Stock alerts
    stock_alert_factor: Decimal = Field(
        default=Decimal("1.2"),
        description="Items at or below minimum * factor are reported",
    )
    consumption_window_months: int = Field(default=1, description="Window used for consumption rates")
    consumption_days: int = Field(default=30, description="Days the consumption window is averaged over")

    # Trailing windows
    top_products_months: int = Field(default=3, description="Top products window")
    supplier_window_months: int = Field(default=6, description="Supplier performance window")
    category_window_months: int = Field(default=6, description="Sales by category window")
    customer_window_months: int = Field(default=6, description="Top customers activity window")
    efficiency_window_months: int = Field(default=1, description="Work center efficiency window")
    utilization_window_months: int = Field(default=1, description="Material utilization window")
    quality_window_months: int = Field(default=3, description="Quality metrics window")
    quality_issue_window_months: int = Field(default=1, description="Quality issue alert window")

    # Series and list sizes
    monthly_periods: int = Field(default=12, description="Months in the monthly sales series")
    weekly_periods: int = Field(default=8, description="Weeks in the weekly sales series")
    default_limit: int = Field(default=5, ge=1, description="Default top-N size")
    top_defects: int = Field(default=5, ge=1, description="Defect tags reported")

    @field_validator("consumption_days")
    @classmethod
    def validate_consumption_days(cls, v: int) -> int:
        """Consumption is averaged over a positive number of days"""
        if v <= 0:
            raise ValueError("consumption_days must be positive")
        return v


class Settings(BaseSettings):
    """Application settings; one instance per process via get_settings()"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="mfg-dashboard", alias="APP_NAME")
    app_env: str = Field(default="development", alias="APP_ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    version: str = Field(default="1.0.0", description="Reported by /api/v1/info and /health")

    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    api_workers: int = Field(default=4, ge=1, alias="API_WORKERS")
    api_reload: bool = Field(default=False, alias="API_RELOAD", description="Auto-reload in development")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """Settings loaded once per process"""
    return Settings()

"""
Application configuration settings.
Handles environment variables and application-wide settings.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True
    )

    # Application settings
    app_name: str = Field(default="ShopSmart API")
    app_version: str = Field(default="1.0.0")
    app_description: str = Field(
        default="Multi-role marketplace backend: orders, carts, disputes and refunds"
    )
    debug: bool = Field(default=False)

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=True)

    # Database settings
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    database_name: str = Field(default="shopsmart_db")

    # MongoDB connection settings
    server_selection_timeout_ms: int = Field(default=30000, alias="MONGODB_SERVER_SELECTION_TIMEOUT_MS")
    connect_timeout_ms: int = Field(default=30000, alias="MONGODB_CONNECT_TIMEOUT_MS")
    socket_timeout_ms: int = Field(default=30000, alias="MONGODB_SOCKET_TIMEOUT_MS")
    max_pool_size: int = Field(default=10, alias="MONGODB_MAX_POOL_SIZE")
    min_pool_size: int = Field(default=1, alias="MONGODB_MIN_POOL_SIZE")
    retry_writes: bool = Field(default=True, alias="MONGODB_RETRY_WRITES")
    direct_connection: bool = Field(default=False, alias="MONGODB_DIRECT_CONNECTION")

    # Logging settings
    log_level: str = Field(default="INFO")

    # API settings
    api_v1_prefix: str = Field(default="/api/v1")

    # Pagination defaults
    default_page_size: int = Field(default=10)
    max_page_size: int = Field(default=100)

    # Business logic settings
    max_order_items: int = Field(default=50)
    max_item_quantity: int = Field(default=100)
    sales_report_recent_limit: int = Field(default=10)

    # Authentication settings (HS256 bearer tokens)
    jwt_secret_key: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60)

    # Payment gateway shared secret for callback signatures
    payment_key_secret: str = Field(default="change-me-in-production")


@lru_cache()
def get_settings() -> Settings:
    """Get application settings."""
    return Settings()

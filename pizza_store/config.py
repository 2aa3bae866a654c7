"""
Application Configuration Module

Settings are read from environment variables (prefix ``PIZZA_STORE_``) or a
``.env`` file. The database name, port and user come from the command line;
everything else needed to reach the server lives here.

Usage:
    from pizza_store.config import get_settings

    settings = get_settings()
    url = settings.database_url("pizzastore", "5432", "postgres")
"""

import logging
import sys
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        db_driver: SQLAlchemy dialect+driver used for the store database
        db_host: Host running the database server
        db_password: Password for the database user (empty by default)
        recent_order_limit: How many ids "view recent orders" shows
        debug: Enable verbose logging
        sql_echo: Log every SQL statement the engine runs
    """

    model_config = SettingsConfigDict(
        env_prefix="PIZZA_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # DATABASE
    # ==========================================================================

    db_driver: str = Field(
        default="postgresql+psycopg2",
        description="SQLAlchemy dialect+driver name"
    )
    db_host: str = Field(
        default="localhost",
        description="Database server host"
    )
    db_password: str = Field(
        default="",
        description="Database user password"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    recent_order_limit: int = Field(
        default=5,
        description="Number of order ids shown by 'view recent orders'"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug logging"
    )
    sql_echo: bool = Field(
        default=False,
        description="Echo SQL statements through the sqlalchemy logger"
    )

    @field_validator("recent_order_limit")
    @classmethod
    def validate_recent_order_limit(cls, v: int) -> int:
        """Reject non-positive limits."""
        if v < 1:
            raise ValueError("recent_order_limit must be at least 1")
        return v

    def database_url(self, dbname: str, port: str, user: str) -> URL:
        """
        Build the connection URL from the positional CLI arguments.

        Args:
            dbname: Database name
            port: Server port (validated as an integer)
            user: Database user

        Returns:
            SQLAlchemy URL for the configured driver
        """
        return URL.create(
            self.db_driver,
            username=user,
            password=self.db_password or None,
            host=self.db_host,
            port=int(port),
            database=dbname,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Log records go to stderr so they never mix with the menu output on
    stdout.

    Args:
        level: Logging level used when debug mode is off

    Returns:
        The package logger
    """
    settings = get_settings()
    if settings.debug:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.sql_echo else logging.WARNING
    )
    return logging.getLogger("pizza_store")

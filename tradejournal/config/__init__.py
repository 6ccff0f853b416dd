"""Configuration package for application settings and database connections."""

from tradejournal.config.settings import settings, Settings, get_settings
from tradejournal.config.database import (
    connect_to_mongodb,
    close_mongodb_connection,
    get_client,
    get_database,
)

__all__ = [
    "settings",
    "Settings",
    "get_settings",
    "connect_to_mongodb",
    "close_mongodb_connection",
    "get_client",
    "get_database",
]

"""Core app configuration, database, and domain errors."""

from sweetshop.core.config import get_settings, settings
from sweetshop.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]

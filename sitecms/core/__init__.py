"""Core module - foundational components."""

from sitecms.core.database import get_db
from sitecms.core.exceptions import AppException
from sitecms.core.logging import get_logger

__all__ = ["get_db", "AppException", "get_logger"]

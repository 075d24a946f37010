# Common utilities and shared modules
"""
Shared components used by the story writer:
- Data models (Pydantic schemas)
- SQLite key/value storage
- Logging configuration
- Project configuration
"""

from .config import settings, PROJECT_ROOT, DATA_DIR
from .database import KeyValueStore, get_connection, init_db
from .logging import setup_logging
from .models import AI_ID_PREFIX, Item

__all__ = [
    "settings",
    "PROJECT_ROOT",
    "DATA_DIR",
    "AI_ID_PREFIX",
    "Item",
    "KeyValueStore",
    "get_connection",
    "init_db",
    "setup_logging",
]

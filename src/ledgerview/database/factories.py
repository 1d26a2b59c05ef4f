"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from ledgerview.database.sqlalchemy_db import SQLAlchemyDatabase

LOGGER = logging.getLogger(__name__)

DB_PATH_ENV = "LEDGERVIEW_DB_PATH"
DEFAULT_DB_PATH = Path("~/.ledgerview/ledgerview.db")


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Work out which SQLite file to use and make sure its directory exists.

    Precedence: explicit path, then LEDGERVIEW_DB_PATH, then
    ~/.ledgerview/ledgerview.db. A leading "~" is expanded.
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    path = Path(database_path) if database_path else DEFAULT_DB_PATH
    path = path.expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file; see resolve_database_path
            for how a missing path is filled in

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    LOGGER.debug("Using database %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")

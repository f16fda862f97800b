"""
Database initialization.

Creates all tables.
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

import app.db.base  # noqa: F401
from app.db.session import engine as default_engine

logger = logging.getLogger(__name__)


def init_db(engine: Optional[Engine] = None) -> None:
    """Create every SQLModel table that does not exist yet."""
    engine = engine or default_engine
    logger.info("Creating database tables on %s", engine.url)
    SQLModel.metadata.create_all(engine)
    logger.info("Tables created: %s", sorted(SQLModel.metadata.tables))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()

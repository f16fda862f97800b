"""
Database initialization script.

Run this script to create the database tables.

Usage:
    python scripts/init_db.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.db.init_db import init_db

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    print("=" * 50)
    print("Vigor Database Initialization")
    print("=" * 50)
    print()

    try:
        init_db()
        print()
        print("=" * 50)
        print(f"SUCCESS: Database initialized at {settings.DATABASE_URL}")
        print("=" * 50)
        sys.exit(0)

    except SQLAlchemyError as e:
        print()
        print("=" * 50)
        print("ERROR: Database initialization failed!")
        print(f"Details: {e}")
        print("=" * 50)
        sys.exit(1)

#!/usr/bin/env python3
"""
Database initialization script.
Creates all tables from SQLAlchemy models.
Run this for fresh installations before using Alembic migrations.
"""

import sys

from dotenv import load_dotenv
from sqlalchemy import create_engine, inspect

from playlist_janitor.db.models import Base
from playlist_janitor.db.session import get_db_url


def init_database(drop_existing: bool = False):
    """Initialize database with all tables."""
    load_dotenv()

    db_url = get_db_url()
    print("Connecting to database...")
    print(f"   URL: {db_url.split('@')[-1]}")  # Hide credentials

    engine = create_engine(db_url)

    inspector = inspect(engine)
    existing_tables = inspector.get_table_names()

    if existing_tables:
        print(f"\nFound existing tables: {', '.join(existing_tables)}")
        if not drop_existing:
            response = input("Do you want to drop and recreate all tables? (yes/no): ")
            drop_existing = response.lower() == 'yes'
        if not drop_existing:
            print("Cancelled. No changes made.")
            return

        print("\nDropping all existing tables...")
        Base.metadata.drop_all(bind=engine)

    print("\nCreating all tables from models...")
    Base.metadata.create_all(bind=engine)

    inspector = inspect(engine)
    created_tables = inspector.get_table_names()

    print(f"\nDatabase initialized, {len(created_tables)} tables:")
    for table in sorted(created_tables):
        print(f"   - {table}")

    print("\nStart the API with: uvicorn playlist_janitor.main:app --reload")


if __name__ == "__main__":
    try:
        init_database(drop_existing="--yes" in sys.argv)
    except Exception as e:
        print(f"\nError initializing database: {e}")
        sys.exit(1)

#!/usr/bin/env python
"""Database initialization script for the translation service.

This script creates all database tables based on the SQLAlchemy models.
Use it for local setups; deployed databases are managed with `flask db upgrade`.

Usage:
    python init_db.py
"""

import os
import sys
from translation_service import create_app, db


def init_database():
    """Initialize the database by creating all tables."""
    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)

    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")

    with app.app_context():
        try:
            print("Creating database tables...")
            print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")

            db.create_all()

            tables_info = [
                ("translations", "Key/locale/value translation strings"),
                ("tags", "Tags used to group translations"),
                ("tag_translation", "Translation <-> tag associations"),
                ("users", "API users"),
                ("revoked_tokens", "Tokens revoked by logout"),
            ]

            print("Created tables:")
            for table_name, description in tables_info:
                print(f"  - {table_name:<25} {description}")

            print("\nNext steps:")
            print("  1. Create a user: python scripts/create_user.py admin@example.com <password>")
            print("  2. Seed data:     python scripts/seed_translations.py --count 100000")
            print("  3. Start server:  python wsgi.py\n")
            return True

        except Exception as e:
            print(f"Error creating database: {type(e).__name__}: {e}\n")
            return False


if __name__ == '__main__':
    success = init_database()
    sys.exit(0 if success else 1)

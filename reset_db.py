"""Drop and recreate every table, then empty the cache.

Development only: all translations, tags and users are lost.

Usage:
    python reset_db.py [--yes]
"""

import os
import sys

from translation_service import create_app, db
from translation_service.services.cache import get_cache


def reset_database():
    app = create_app(os.getenv('FLASK_ENV', 'development'))

    with app.app_context():
        print("Dropping all tables...")
        db.drop_all()

        print("Creating all tables with current schema...")
        db.create_all()

        # Tokens would otherwise describe rows that no longer exist
        get_cache().clear()

    print("\nDatabase reset complete. Start the server with: python wsgi.py")


if __name__ == '__main__':
    if '--yes' not in sys.argv:
        print("=" * 60)
        print("WARNING: This will DELETE ALL DATA in the database!")
        print("=" * 60)
        if input("Type 'yes' to confirm: ").lower() != 'yes':
            print("Aborted.")
            sys.exit(0)

    reset_database()

#!/usr/bin/env python3
"""Create (or reset the password of) an API user.

Usage:
    python scripts/create_user.py admin@example.com s3cret --name "Admin"
"""

import argparse
import os
import sys

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from translation_service import create_app, db
from translation_service.models import User


def create_user(email, password, name=None):
    app = create_app(os.getenv('FLASK_ENV', 'development'))

    with app.app_context():
        email = email.strip().lower()
        user = User.query.filter_by(email=email).first()
        created = user is None
        if created:
            user = User(email=email, name=name)
            db.session.add(user)
        elif name:
            user.name = name
        user.set_password(password)

        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            print(f"Failed to save user: {e}")
            return False

        print(f"{'Created' if created else 'Updated'} user {user.email} (ID: {user.id})")
        return True


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Create an API user')
    parser.add_argument('email')
    parser.add_argument('password')
    parser.add_argument('--name')
    args = parser.parse_args()
    sys.exit(0 if create_user(args.email, args.password, args.name) else 1)

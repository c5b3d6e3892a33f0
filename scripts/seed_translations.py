#!/usr/bin/env python3
"""Seed the database with fake translations for load testing the exports.

Every translation gets one of the tags 'mobile', 'web' or 'desktop'.

Usage:
    python scripts/seed_translations.py --count 100000
"""

import argparse
import os
import random
import sys

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from faker import Faker
from sqlalchemy import insert

from translation_service import create_app, db
from translation_service.models import Tag, Translation, tag_translation
from translation_service.services.cache import get_cache
from translation_service.services.invalidation import clear_tag_caches

LOCALES = ['en', 'fr', 'es', 'de', 'fi']
TAG_NAMES = ['mobile', 'web', 'desktop']
BATCH_SIZE = 1000

fake = Faker()


def get_or_create_tags():
    tags = {}
    for name in TAG_NAMES:
        tag = Tag.query.filter_by(name=name).first()
        if not tag:
            tag = Tag(name=name)
            db.session.add(tag)
        tags[name] = tag
    db.session.commit()
    return {name: tag.id for name, tag in tags.items()}


def build_rows(start, size, run_id):
    rows = []
    for i in range(start, start + size):
        words = fake.words(nb=2)
        rows.append({
            # The run id and counter keep keys unique across repeated seeds
            'key': f'{words[0]}.{words[1]}.{run_id}_{i}',
            'locale': random.choice(LOCALES),
            'value': fake.sentence(),
        })
    return rows


def seed_translations(count):
    """Insert ``count`` translations in batches of BATCH_SIZE."""
    app = create_app(os.getenv('FLASK_ENV', 'development'))

    with app.app_context():
        print(f"Seeding {count} translations...")
        tag_ids = list(get_or_create_tags().values())
        run_id = fake.unique.pystr(min_chars=6, max_chars=6).lower()

        inserted = 0
        while inserted < count:
            size = min(BATCH_SIZE, count - inserted)
            rows = build_rows(inserted, size, run_id)
            ids = db.session.scalars(
                insert(Translation).returning(Translation.id), rows
            ).all()
            db.session.execute(
                insert(tag_translation),
                [{'translation_id': tid, 'tag_id': random.choice(tag_ids)} for tid in ids],
            )
            db.session.commit()
            inserted += size
            if inserted % 10000 == 0 or inserted == count:
                print(f"  {inserted}/{count}")

        clear_tag_caches(get_cache())
        print("Seeding complete, export caches cleared.")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--count', type=int, default=100_000, help='number of translations to create')
    args = parser.parse_args()
    seed_translations(args.count)

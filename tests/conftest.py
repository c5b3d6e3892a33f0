"""
Pytest configuration and fixtures for testing the translation API.
"""

import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from translation_service import create_app, db
from translation_service.models import Tag, Translation, User
from translation_service.services.cache import get_cache

fake = Faker()


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty every table and the cache before each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        get_cache().clear()
        yield db.session
        db.session.rollback()


@pytest.fixture
def cache(app, db_session):
    with app.app_context():
        yield get_cache()


def _create_user(password='testpassword123', **overrides):
    """Helper to create a user with sensible defaults."""
    data = {
        'name': fake.name(),
        'email': fake.unique.email().lower(),
    }
    data.update(overrides)
    user = User(**data)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return {
        'id': user.id,
        'email': user.email,
        'password': password,
    }


@pytest.fixture
def test_user(app, db_session):
    """Create a test user."""
    with app.app_context():
        return _create_user()


def _get_token(client, email, password):
    """Login and return the bearer token."""
    resp = client.post('/api/login', json={
        'email': email,
        'password': password,
    })
    data = resp.get_json()
    if resp.status_code != 200 or not data or not data.get('access_token'):
        raise RuntimeError(f"Login failed: status={resp.status_code}, body={resp.data[:200]}")
    return data['access_token']


@pytest.fixture
def auth_headers(client, test_user):
    """Get authentication headers for test user."""
    token = _get_token(client, test_user['email'], test_user['password'])
    return {'Authorization': f'Bearer {token}'}


def make_translation(key, locale, value, tags=()):
    """Insert a translation directly, creating tags as needed. Returns its id."""
    translation = Translation(key=key, locale=locale, value=value)
    for name in tags:
        tag = Tag.query.filter_by(name=name).first() or Tag(name=name)
        translation.tags.append(tag)
    db.session.add(translation)
    db.session.commit()
    return translation.id


@pytest.fixture
def seeded(app, db_session):
    """A small fixed dataset spread over three locales and three tags."""
    with app.app_context():
        ids = {
            ('en', 'app.title'): make_translation('app.title', 'en', 'Title', ['web']),
            ('en', 'button.cancel'): make_translation('button.cancel', 'en', 'Cancel', ['mobile']),
            ('en', 'button.ok'): make_translation('button.ok', 'en', 'OK', ['mobile', 'web']),
            ('fr', 'app.title'): make_translation('app.title', 'fr', 'Titre', ['web']),
            ('fr', 'button.ok'): make_translation('button.ok', 'fr', "D'accord", ['desktop']),
            ('de', 'button.ok'): make_translation('button.ok', 'de', 'OK', ['mobile']),
        }
        return ids


@pytest.fixture
def translation_factory(app, db_session):
    """Insert translations directly, bypassing the API and the cache hooks."""
    def factory(key, locale, value, tags=()):
        with app.app_context():
            return make_translation(key, locale, value, tags)
    return factory

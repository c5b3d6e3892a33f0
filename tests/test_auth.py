"""
Tests for login, logout and token checks.
"""

from datetime import datetime, timedelta, timezone

from translation_service import db
from translation_service.models import RevokedToken, User


class TestLogin:
    def test_login_success(self, client, test_user):
        response = client.post('/api/login', json={
            'email': test_user['email'],
            'password': test_user['password'],
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['access_token']
        assert data['token_type'] == 'Bearer'
        assert data['expires_in'] > 0

    def test_login_email_is_case_insensitive(self, client, test_user):
        response = client.post('/api/login', json={
            'email': test_user['email'].upper(),
            'password': test_user['password'],
        })

        assert response.status_code == 200

    def test_login_wrong_password(self, client, test_user):
        response = client.post('/api/login', json={
            'email': test_user['email'],
            'password': 'not-the-password',
        })

        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid credentials'

    def test_login_unknown_email(self, client, db_session):
        response = client.post('/api/login', json={
            'email': 'nobody@example.com',
            'password': 'whatever123',
        })

        assert response.status_code == 401

    def test_login_missing_fields(self, client, db_session):
        response = client.post('/api/login', json={'email': ''})

        assert response.status_code == 422
        errors = response.get_json()['errors']
        assert 'email' in errors
        assert 'password' in errors

    def test_login_inactive_user(self, client, test_user):
        user = db.session.get(User, test_user['id'])
        user.is_active = False
        db.session.commit()

        response = client.post('/api/login', json={
            'email': test_user['email'],
            'password': test_user['password'],
        })

        assert response.status_code == 403


class TestTokenChecks:
    def test_missing_token(self, client, db_session):
        response = client.get('/api/translations')

        assert response.status_code == 401
        assert response.get_json()['error'] == 'Token is missing'

    def test_garbage_token(self, client, db_session):
        response = client.get('/api/translations', headers={'Authorization': 'Bearer not-a-jwt'})

        assert response.status_code == 401
        assert response.get_json()['error'] == 'Token is invalid'

    def test_raw_token_without_bearer_prefix(self, client, auth_headers):
        token = auth_headers['Authorization'].split(' ', 1)[1]

        response = client.get('/api/translations', headers={'Authorization': token})

        assert response.status_code == 200


class TestLogout:
    def test_logout_revokes_token(self, client, auth_headers):
        response = client.post('/api/logout', headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()['message'] == 'Logged out'
        assert RevokedToken.query.count() == 1

        response = client.get('/api/translations', headers=auth_headers)
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Token has been revoked'

    def test_logout_purges_expired_revocations(self, client, test_user, auth_headers):
        db.session.add(RevokedToken(
            jti='expired-jti',
            user_id=test_user['id'],
            expires_at=datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=1),
        ))
        db.session.commit()

        client.post('/api/logout', headers=auth_headers)

        assert not RevokedToken.is_revoked('expired-jti')
        assert RevokedToken.query.count() == 1

    def test_logout_requires_token(self, client, db_session):
        response = client.post('/api/logout')

        assert response.status_code == 401

    def test_other_tokens_survive_logout(self, client, test_user, auth_headers):
        second = client.post('/api/login', json={
            'email': test_user['email'],
            'password': test_user['password'],
        }).get_json()['access_token']

        client.post('/api/logout', headers=auth_headers)

        response = client.get('/api/translations', headers={'Authorization': f'Bearer {second}'})
        assert response.status_code == 200


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}

"""
Tests for translation CRUD, listing, search and the full dump.
"""

from unittest import mock

import pytest
from faker import Faker

from translation_service.services import translations as translations_module

fake = Faker()


def _etag(client, url, headers):
    """Read the whole streamed body, then return its ETag."""
    response = client.get(url, headers=headers)
    response.get_data()
    return response.headers['ETag']


def _create(client, headers, **overrides):
    payload = {
        'key': f'{fake.word()}.{fake.unique.word()}',
        'locale': 'en',
        'value': fake.sentence(),
    }
    payload.update(overrides)
    return client.post('/api/translations', json=payload, headers=headers)


class TestCreateTranslation:
    def test_create_and_read_back(self, client, auth_headers):
        response = _create(client, auth_headers, key='checkout.pay', value='Pay now',
                           tags=['web', 'mobile'])

        assert response.status_code == 201
        created = response.get_json()
        assert created['key'] == 'checkout.pay'
        assert created['locale'] == 'en'
        assert created['value'] == 'Pay now'
        assert {t['name'] for t in created['tags']} == {'web', 'mobile'}

        response = client.get(f"/api/translations/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        fetched = response.get_json()
        assert fetched['value'] == 'Pay now'
        assert {t['name'] for t in fetched['tags']} == {'web', 'mobile'}

    def test_create_trims_key_and_locale_but_not_value(self, client, auth_headers):
        response = _create(client, auth_headers, key='  app.name ', locale=' fr ', value='  Nom  ')

        assert response.status_code == 201
        data = response.get_json()
        assert data['key'] == 'app.name'
        assert data['locale'] == 'fr'
        assert data['value'] == '  Nom  '

    def test_create_reuses_existing_tags(self, client, auth_headers):
        _create(client, auth_headers, tags=['web'])
        _create(client, auth_headers, tags=['web', ' web '])

        response = client.get('/api/tags/all', headers=auth_headers)
        assert [t['name'] for t in response.get_json()] == ['web']

    def test_duplicate_key_and_locale_conflicts(self, client, auth_headers):
        _create(client, auth_headers, key='dup.key', locale='en')

        response = _create(client, auth_headers, key='dup.key', locale='en')

        assert response.status_code == 409

    def test_same_key_other_locale_is_allowed(self, client, auth_headers):
        _create(client, auth_headers, key='dup.key', locale='en')

        response = _create(client, auth_headers, key='dup.key', locale='de')

        assert response.status_code == 201

    @pytest.mark.parametrize('payload, field', [
        ({'locale': 'en', 'value': 'x'}, 'key'),
        ({'key': 'a.b', 'value': 'x'}, 'locale'),
        ({'key': 'a.b', 'locale': 'en'}, 'value'),
        ({'key': 'a.b', 'locale': 'english!', 'value': 'x'}, 'locale'),
        ({'key': 'k' * 256, 'locale': 'en', 'value': 'x'}, 'key'),
        ({'key': 'a.b', 'locale': 'en', 'value': 'x', 'tags': 'web'}, 'tags'),
        ({'key': 'a.b', 'locale': 'en', 'value': 'x', 'tags': ['ok', '']}, 'tags.1'),
        ({'key': 'a.b', 'locale': 'en', 'value': 'x', 'tags': ['t' * 65]}, 'tags.0'),
    ])
    def test_validation_errors(self, client, auth_headers, payload, field):
        response = client.post('/api/translations', json=payload, headers=auth_headers)

        assert response.status_code == 422
        assert field in response.get_json()['errors']

    def test_empty_value_is_allowed(self, client, auth_headers):
        response = _create(client, auth_headers, value='')

        assert response.status_code == 201
        assert response.get_json()['value'] == ''

    def test_requires_auth(self, client, db_session):
        response = client.post('/api/translations', json={'key': 'a', 'locale': 'en', 'value': 'b'})

        assert response.status_code == 401


class TestReadTranslation:
    def test_missing_translation(self, client, auth_headers):
        response = client.get('/api/translations/999999', headers=auth_headers)

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Translation not found'


class TestUpdateTranslation:
    def test_partial_update_keeps_tags(self, client, auth_headers):
        created = _create(client, auth_headers, value='Old', tags=['web']).get_json()

        response = client.patch(f"/api/translations/{created['id']}",
                                json={'value': 'New'}, headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['value'] == 'New'
        assert data['key'] == created['key']
        assert [t['name'] for t in data['tags']] == ['web']

    def test_tags_list_replaces_tag_set(self, client, auth_headers):
        created = _create(client, auth_headers, tags=['web', 'mobile']).get_json()

        response = client.put(f"/api/translations/{created['id']}",
                              json={'tags': ['desktop']}, headers=auth_headers)

        assert response.status_code == 200
        assert [t['name'] for t in response.get_json()['tags']] == ['desktop']

    def test_empty_tags_list_clears_tags(self, client, auth_headers):
        created = _create(client, auth_headers, tags=['web']).get_json()

        response = client.put(f"/api/translations/{created['id']}",
                              json={'tags': []}, headers=auth_headers)

        assert response.get_json()['tags'] == []

    def test_update_into_existing_pair_conflicts(self, client, auth_headers):
        _create(client, auth_headers, key='a.b', locale='en')
        other = _create(client, auth_headers, key='a.c', locale='en').get_json()

        response = client.put(f"/api/translations/{other['id']}",
                              json={'key': 'a.b'}, headers=auth_headers)

        assert response.status_code == 409

    def test_concurrent_duplicate_with_tags_conflicts(self, client, auth_headers):
        _create(client, auth_headers, key='a.b', locale='en')
        other = _create(client, auth_headers, key='a.c', locale='en').get_json()

        # The pair is taken between the duplicate check and the commit
        with mock.patch.object(translations_module, '_duplicate_exists', return_value=False):
            response = client.put(f"/api/translations/{other['id']}",
                                  json={'key': 'a.b', 'tags': ['web']}, headers=auth_headers)

        assert response.status_code == 409
        fetched = client.get(f"/api/translations/{other['id']}", headers=auth_headers).get_json()
        assert fetched['key'] == 'a.c'
        assert fetched['tags'] == []

    def test_update_missing_translation(self, client, auth_headers):
        response = client.put('/api/translations/999999', json={'value': 'x'}, headers=auth_headers)

        assert response.status_code == 404

    def test_update_rejects_invalid_locale(self, client, auth_headers):
        created = _create(client, auth_headers).get_json()

        response = client.patch(f"/api/translations/{created['id']}",
                                json={'locale': 'not a locale'}, headers=auth_headers)

        assert response.status_code == 422


class TestDeleteTranslation:
    def test_delete(self, client, auth_headers):
        created = _create(client, auth_headers, tags=['web']).get_json()

        response = client.delete(f"/api/translations/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()['message'] == 'Translation deleted successfully'
        assert client.get(f"/api/translations/{created['id']}", headers=auth_headers).status_code == 404

        # The tag outlives the translation
        tags = client.get('/api/tags/all', headers=auth_headers).get_json()
        assert [t['name'] for t in tags] == ['web']

    def test_delete_missing_translation(self, client, auth_headers):
        response = client.delete('/api/translations/999999', headers=auth_headers)

        assert response.status_code == 404


class TestListTranslations:
    def test_list_paginated(self, client, auth_headers, seeded):
        response = client.get('/api/translations?per_page=4', headers=auth_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['total'] == 6
        assert data['per_page'] == 4
        assert data['page'] == 1
        assert data['pages'] == 2
        assert data['has_more'] is True
        assert len(data['data']) == 4

        ids = [t['id'] for t in data['data']]
        assert ids == sorted(ids)

    def test_per_page_is_capped(self, client, auth_headers, seeded):
        response = client.get('/api/translations?per_page=1000', headers=auth_headers)

        assert response.get_json()['per_page'] == 100

    def test_filter_by_locale(self, client, auth_headers, seeded):
        data = client.get('/api/translations?locale=fr', headers=auth_headers).get_json()

        assert {t['locale'] for t in data['data']} == {'fr'}
        assert data['total'] == 2

    def test_filter_by_key_prefix(self, client, auth_headers, seeded):
        data = client.get('/api/translations?key=button.', headers=auth_headers).get_json()

        assert data['total'] == 4
        assert all(t['key'].startswith('button.') for t in data['data'])

    def test_filter_by_value_substring(self, client, auth_headers, seeded):
        data = client.get('/api/translations?q=Tit', headers=auth_headers).get_json()

        assert {t['value'] for t in data['data']} == {'Title', 'Titre'}

    def test_filter_by_tags_is_or(self, client, auth_headers, seeded):
        data = client.get('/api/translations?tag=desktop,web', headers=auth_headers).get_json()

        pairs = {(t['locale'], t['key']) for t in data['data']}
        assert pairs == {
            ('en', 'app.title'),
            ('en', 'button.ok'),
            ('fr', 'app.title'),
            ('fr', 'button.ok'),
        }
        # A row matching two tags is listed once
        assert data['total'] == 4

    def test_key_prefix_treats_wildcards_literally(self, client, auth_headers, seeded):
        data = client.get('/api/translations?key=button_', headers=auth_headers).get_json()

        assert data['total'] == 0


class TestSearchTranslations:
    def test_search_matches_key_or_value(self, client, auth_headers, seeded):
        data = client.get('/api/translations/search?q=title', headers=auth_headers).get_json()

        assert {(t['locale'], t['key']) for t in data['data']} == {('en', 'app.title'), ('fr', 'app.title')}

    def test_search_with_locale(self, client, auth_headers, seeded):
        data = client.get('/api/translations/search?q=ok&locale=de', headers=auth_headers).get_json()

        assert [(t['locale'], t['key']) for t in data['data']] == [('de', 'button.ok')]

    def test_search_requires_two_characters(self, client, auth_headers, seeded):
        response = client.get('/api/translations/search?q=a', headers=auth_headers)

        assert response.status_code == 422
        assert 'q' in response.get_json()['errors']

    def test_search_per_page_is_capped(self, client, auth_headers, seeded):
        data = client.get('/api/translations/search?q=ok&per_page=500', headers=auth_headers).get_json()

        assert data['per_page'] == 50


class TestDumpTranslations:
    def test_dump_streams_every_row_in_id_order(self, client, auth_headers, seeded):
        response = client.get('/api/translations/all', headers=auth_headers)

        assert response.status_code == 200
        assert response.headers['Content-Type'].startswith('application/json')
        assert response.headers.get('ETag')

        rows = response.get_json()
        assert [r['id'] for r in rows] == sorted(seeded.values())
        assert set(rows[0]) == {'id', 'key', 'locale', 'value'}

    def test_dump_empty_store(self, client, auth_headers):
        response = client.get('/api/translations/all', headers=auth_headers)

        assert response.get_json() == []

    def test_dump_conditional(self, client, auth_headers, seeded):
        etag = _etag(client, '/api/translations/all', auth_headers)

        response = client.get('/api/translations/all', headers={**auth_headers, 'If-None-Match': etag})

        assert response.status_code == 304
        assert response.data == b''

"""Request payload validation.

Each validator returns cleaned data or raises ValidationError with
field-level messages.
"""

import re

from flask import current_app

from translation_service.errors import ValidationError

LOCALE_REGEX = re.compile(r'^[A-Za-z]{2,3}([_-][A-Za-z0-9]{2,8})*$')


def _string_field(data, field, errors, max_len, required=True, strip=True):
    if field not in data or data[field] is None:
        if required:
            errors.setdefault(field, []).append(f'The {field} field is required.')
        return None

    value = data[field]
    if not isinstance(value, str):
        errors.setdefault(field, []).append(f'The {field} field must be a string.')
        return None
    if strip:
        value = value.strip()
    if required and not value:
        errors.setdefault(field, []).append(f'The {field} field is required.')
        return None
    if max_len and len(value) > max_len:
        errors.setdefault(field, []).append(f'The {field} field must not be greater than {max_len} characters.')
        return None
    return value


def _tags_field(data, errors):
    tags = data.get('tags')
    if tags is None:
        return None
    if not isinstance(tags, list):
        errors.setdefault('tags', []).append('The tags field must be an array.')
        return None

    max_len = current_app.config['TAG_NAME_MAX_LENGTH']
    for index, name in enumerate(tags):
        if not isinstance(name, str) or not name.strip():
            errors.setdefault(f'tags.{index}', []).append('Each tag must be a non-empty string.')
        elif len(name.strip()) > max_len:
            errors.setdefault(f'tags.{index}', []).append(f'Each tag must not be greater than {max_len} characters.')
    return tags


def is_valid_locale(locale):
    return (
        isinstance(locale, str)
        and len(locale) <= current_app.config['LOCALE_MAX_LENGTH']
        and LOCALE_REGEX.match(locale) is not None
    )


def _check_locale(locale, errors):
    if locale is not None and not is_valid_locale(locale):
        errors.setdefault('locale', []).append('The locale field must be a language code such as "en" or "pt-BR".')


def validate_translation_payload(data, partial=False):
    """Validate a create (``partial=False``) or update payload."""
    if not isinstance(data, dict):
        raise ValidationError({'body': ['A JSON object body is required.']})

    config = current_app.config
    errors = {}
    cleaned = {}

    key = _string_field(data, 'key', errors, config['KEY_MAX_LENGTH'], required=not partial or 'key' in data)
    locale = _string_field(data, 'locale', errors, config['LOCALE_MAX_LENGTH'], required=not partial or 'locale' in data)
    # Values are stored verbatim, surrounding whitespace included
    value = _string_field(data, 'value', errors, None, required=False, strip=False)
    if not partial and value is None and 'value' not in errors:
        errors['value'] = ['The value field is required.']
    tags = _tags_field(data, errors)
    _check_locale(locale, errors)

    if errors:
        raise ValidationError(errors)

    if key is not None:
        cleaned['key'] = key
    if locale is not None:
        cleaned['locale'] = locale
    if value is not None:
        cleaned['value'] = value
    if tags is not None:
        cleaned['tags'] = tags
    return cleaned


def validate_tag_payload(data):
    if not isinstance(data, dict):
        raise ValidationError({'body': ['A JSON object body is required.']})

    errors = {}
    name = _string_field(data, 'name', errors, current_app.config['TAG_NAME_MAX_LENGTH'])
    if errors:
        raise ValidationError(errors)
    return {'name': name}


def validate_locale_param(locale, field='locale'):
    if not is_valid_locale(locale):
        raise ValidationError({field: ['The locale must be a language code such as "en" or "pt-BR".']})
    return locale

"""Database models for the translation service."""

from .tag import Tag
from .translation import Translation, tag_translation
from .user import User
from .revoked_token import RevokedToken

__all__ = ['Tag', 'Translation', 'tag_translation', 'User', 'RevokedToken']

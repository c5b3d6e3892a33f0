"""Shared utilities for the translation service.

This package contains reusable utilities that are shared across
multiple route files to reduce code duplication.
"""

from translation_service.utils.auth import (
    token_required,
    authenticate_request,
    issue_token,
)
from translation_service.utils.api import api_operation, page_args, paginated_response

__all__ = [
    'token_required',
    'authenticate_request',
    'issue_token',
    'api_operation',
    'page_args',
    'paginated_response',
]

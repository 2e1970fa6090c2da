"""Shared utilities for the contacts backend.

This package contains reusable utilities that are shared across
multiple route files to reduce code duplication.
"""

from contacts_api.utils.auth import (
    token_required,
    verified_required,
    get_request_token,
    set_session_cookie,
    clear_session_cookie,
)
from contacts_api.utils.phone import normalize_phone_number
from contacts_api.utils.request_data import get_request_data

__all__ = [
    'token_required',
    'verified_required',
    'get_request_token',
    'set_session_cookie',
    'clear_session_cookie',
    'normalize_phone_number',
    'get_request_data',
]

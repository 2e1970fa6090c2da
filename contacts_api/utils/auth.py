"""Shared authentication utilities.

This module provides the decorators that gate protected routes, plus the
helpers that hand a session token back to the client as a cookie.
"""

from functools import wraps
from flask import request, current_app, g

from contacts_api.errors import AuthorizationError, ForbiddenError
from contacts_api.services.credentials import CredentialStore
from contacts_api.services.session import get_session_issuer


def get_request_token():
    """
    Return the session token presented with the current request, or None.

    The ``Authorization`` header (raw token or ``Bearer <token>``) takes
    precedence over the session cookie when both are sent.
    """
    auth_header = request.headers.get('Authorization')
    if auth_header:
        parts = auth_header.split(' ')
        if len(parts) == 2 and parts[0].lower() == 'bearer':
            return parts[1]
        return auth_header

    return request.cookies.get(current_app.config['SESSION_COOKIE_NAME'])


def load_current_user():
    """
    Validate the request's session token and load its user.

    Sets g.current_user.

    Raises:
        AuthorizationError: If the token is missing, invalid, expired, or
            its user no longer exists
    """
    claims = get_session_issuer().validate(get_request_token())

    user = CredentialStore().find_by_email(claims.get('email'))
    if user is None:
        raise AuthorizationError()

    g.current_user = user
    return user


def token_required(f):
    """
    Decorator to require a valid session token.

    Passes the authenticated User as the first argument to the decorated
    function.

    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route(current_user):
            return jsonify(current_user.to_dict())
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user = load_current_user()
        return f(current_user, *args, **kwargs)
    return decorated


def verified_required(f):
    """
    Like token_required, but the user's mobile must also be verified.

    Verification state is read from the stored user, not from the token
    snapshot, so a token minted before verification starts working as soon
    as the mobile is verified.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user = load_current_user()
        if not current_user.verified_mobile:
            raise ForbiddenError()
        return f(current_user, *args, **kwargs)
    return decorated


def set_session_cookie(response, token, expires_at):
    """Attach the session token to ``response`` as an HTTP-only cookie."""
    response.set_cookie(
        current_app.config['SESSION_COOKIE_NAME'],
        token,
        expires=expires_at,
        httponly=True,
        secure=current_app.config['SESSION_COOKIE_SECURE'],
        samesite='Lax',
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(
        current_app.config['SESSION_COOKIE_NAME'],
        httponly=True,
        secure=current_app.config['SESSION_COOKIE_SECURE'],
        samesite='Lax',
    )
    return response

"""Session tokens.

Tokens are HS256-signed JWTs carrying the user's identity claims. Nothing is
stored server side: a token is valid if its signature, audience and expiry
check out.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from contacts_api.errors import AuthorizationError

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ['email', 'mobile', 'verifiedMobile', 'aud', 'roles', 'iat', 'exp']


class SessionIssuer:
    """Mints and validates session tokens with a fixed secret and TTL."""

    def __init__(self, secret, audience, ttl, algorithm='HS256'):
        if not secret:
            raise ValueError("Session signing secret must not be empty")
        if int(ttl) <= 0:
            raise ValueError("Session token TTL must be positive")
        self._secret = secret
        self.audience = audience
        self.ttl = timedelta(seconds=int(ttl))
        self.algorithm = algorithm

    def issue(self, user):
        """Create a token for ``user``.

        Returns:
            Tuple of (token, expires_at) where expires_at is an aware UTC
            datetime, used for the cookie expiry as well
        """
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        expires_at = issued_at + self.ttl

        payload = {
            'email': user.email,
            'mobile': user.mobile,
            'verifiedMobile': bool(user.verified_mobile),
            'aud': self.audience,
            'roles': list(user.roles or []),
            'iat': issued_at,
            'exp': expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        return token, expires_at

    def validate(self, token) -> dict:
        """Verify ``token`` and return its claims.

        Raises:
            AuthorizationError: On any invalid, expired or malformed token
        """
        if not token or not isinstance(token, str):
            raise AuthorizationError()

        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={'require': REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired session token")
            raise AuthorizationError()
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected invalid session token: {type(e).__name__}")
            raise AuthorizationError()


def init_session_issuer(app):
    app.extensions['session_issuer'] = SessionIssuer(
        app.config['JWT_SECRET_KEY'],
        app.config['SESSION_AUDIENCE'],
        app.config['SESSION_TOKEN_TTL'],
        algorithm=app.config.get('JWT_ALGORITHM', 'HS256'),
    )


def get_session_issuer(app=None):
    app = app or current_app
    return app.extensions['session_issuer']

"""Error types shared by the services and routes.

Every error raised by the auth and contacts services is an ``APIError``.
The handler registered in ``create_app`` renders it as a bare JSON string
body (not an object) with the error's status code, which is what existing
clients of this API expect.
"""

from flask import jsonify

USER_EXISTS = 'User Already Exists. Please Sign In'
ACCOUNT_NOT_FOUND = 'Account not Found'
VERIFICATION_FAILED = 'Verification Failed'
UNAUTHORIZED = 'Unauthorized'
MOBILE_NOT_VERIFIED = 'Mobile Not Verified'
MOBILE_ALREADY_VERIFIED = 'Mobile Already Verified'
INVALID_MOBILE = 'Invalid Mobile Number'


class APIError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code = 500
    message = 'Internal Server Error'

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(APIError):
    """Malformed or missing input."""
    status_code = 400
    message = 'Bad Request'


class InvalidPhoneNumber(ValidationError):
    message = INVALID_MOBILE


class AuthenticationError(APIError):
    """Bad credentials.

    Deliberately does not say whether the account is missing or the secret
    is wrong.
    """
    status_code = 400
    message = ACCOUNT_NOT_FOUND


class VerificationError(APIError):
    status_code = 400
    message = VERIFICATION_FAILED


class AuthorizationError(APIError):
    """Missing, malformed, expired or forged session token."""
    status_code = 401
    message = UNAUTHORIZED


class ForbiddenError(APIError):
    status_code = 403
    message = MOBILE_NOT_VERIFIED


class ConflictError(APIError):
    status_code = 409
    message = USER_EXISTS


class DuplicateEmail(ConflictError):
    pass


class DuplicateMobile(ConflictError):
    pass


def handle_api_error(error):
    return jsonify(error.message), error.status_code


def register_error_handlers(app):
    """Attach the APIError handler to the Flask app."""
    app.register_error_handler(APIError, handle_api_error)

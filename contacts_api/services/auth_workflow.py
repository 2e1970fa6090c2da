"""Signup, phone verification and signin.

A user starts out registered with an unverified mobile. Submitting the
code the verification provider sent marks the mobile verified and returns
a session. Password signin works in either state and the token carries
whichever state the user is in. PIN signin is reserved for verified users.
"""

import logging

from flask import current_app

from contacts_api.errors import (
    AuthenticationError, ConflictError, InvalidPhoneNumber, ValidationError,
    VerificationError, MOBILE_ALREADY_VERIFIED,
)
from contacts_api.services.credentials import CredentialStore, normalize_email
from contacts_api.services.session import get_session_issuer
from contacts_api.services.verification import STATUS_SUCCESS, CHANNELS, get_verification_gateway
from contacts_api.utils.phone import normalize_phone_number, DEFAULT_COUNTRY_CODE

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128
MIN_PIN_LENGTH = 4
MAX_PIN_LENGTH = 8
MAX_EMAIL_LENGTH = 254


def _required(data, field, label=None):
    value = data.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{label or field.capitalize()} is required")
    return value


def _require_string(value, field):
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value


class AuthWorkflow:
    """Orchestrates the credential store, verification gateway and session issuer."""

    def __init__(self, store, gateway, issuer, country_code=DEFAULT_COUNTRY_CODE):
        self.store = store
        self.gateway = gateway
        self.issuer = issuer
        self.country_code = country_code

    def normalize_mobile(self, mobile):
        return normalize_phone_number(mobile, self.country_code)

    def signup(self, data):
        """Register an unverified user and send the verification code.

        The user row is kept even when the provider cannot send the code;
        the client recovers through ``resend_verification``.
        """
        email = _require_string(_required(data, 'email'), 'email')
        mobile = _required(data, 'mobile')
        password = _require_string(_required(data, 'password'), 'password')
        pin = data.get('pin')

        email = normalize_email(email)

        # A taken email is always a conflict, whatever else is wrong with the request
        if self.store.find_by_email(email):
            raise ConflictError()

        if len(email) > MAX_EMAIL_LENGTH or '@' not in email:
            raise ValidationError("Invalid email format")
        if not MIN_PASSWORD_LENGTH <= len(password) <= MAX_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be between {MIN_PASSWORD_LENGTH} and {MAX_PASSWORD_LENGTH} characters")
        if pin is not None:
            pin = str(pin)
            if not pin.isdigit() or not MIN_PIN_LENGTH <= len(pin) <= MAX_PIN_LENGTH:
                raise ValidationError(f"PIN must be {MIN_PIN_LENGTH} to {MAX_PIN_LENGTH} digits")

        mobile = self.normalize_mobile(mobile)

        user = self.store.create(email, mobile, password, pin=pin)

        result = self.gateway.start_verification(user.mobile)
        if result.get('status') != STATUS_SUCCESS:
            logger.warning(f"Could not start verification for user {user.id}: {result.get('error')}")

        return user

    def verify(self, data):
        """Check a verification code and open a session.

        Returns:
            Tuple of (user, token, expires_at)

        Raises:
            VerificationError: Unknown email, mobile mismatch, or the
                provider rejected the code. No state changes in that case.
        """
        email = _require_string(_required(data, 'email'), 'email')
        mobile = _required(data, 'mobile')
        code = _required(data, 'code')

        try:
            mobile = self.normalize_mobile(mobile)
        except InvalidPhoneNumber:
            raise VerificationError()

        user = self.store.find_by_email(email)
        if user is None or user.mobile != mobile:
            logger.info("Verification rejected: no user with this email and mobile")
            raise VerificationError()

        result = self.gateway.check_verification(mobile, str(code))
        if result.get('status') != STATUS_SUCCESS:
            logger.info(f"Verification failed for user {user.id}: {result.get('status')}")
            raise VerificationError(result.get('error'))

        user = self.store.mark_verified(user.id)
        token, expires_at = self.issuer.issue(user)
        return user, token, expires_at

    def resend_verification(self, data):
        """Start a fresh verification challenge for an unverified user."""
        email = _require_string(_required(data, 'email'), 'email')
        mobile = _required(data, 'mobile')
        channel = data.get('channel') or 'sms'

        if channel not in CHANNELS:
            raise ValidationError(f"channel must be one of: {', '.join(CHANNELS)}")

        try:
            mobile = self.normalize_mobile(mobile)
        except InvalidPhoneNumber:
            raise AuthenticationError()

        user = self.store.find_by_email(email)
        if user is None or user.mobile != mobile:
            raise AuthenticationError()
        if user.verified_mobile:
            raise ConflictError(MOBILE_ALREADY_VERIFIED)

        result = self.gateway.start_verification(mobile, channel=channel)
        if result.get('status') != STATUS_SUCCESS:
            raise VerificationError(result.get('error'))
        return result

    def signin(self, data):
        """Password signin by email.

        Returns:
            Tuple of (user, token, expires_at)
        """
        email = _required(data, 'email')
        password = _required(data, 'password')

        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError()

        user = self.store.verify_password(email, password)
        if user is None:
            logger.info("Password signin failed")
            raise AuthenticationError()

        token, expires_at = self.issuer.issue(user)
        return user, token, expires_at

    def signin_pin(self, data):
        """PIN signin by mobile, for users whose mobile is verified.

        Returns:
            Tuple of (user, token, expires_at)
        """
        mobile = _required(data, 'mobile')
        pin = _required(data, 'pin', 'PIN')

        try:
            mobile = self.normalize_mobile(mobile)
        except InvalidPhoneNumber:
            raise AuthenticationError()

        user = self.store.verify_pin(mobile, str(pin))
        if user is None or not user.verified_mobile:
            logger.info("PIN signin failed")
            raise AuthenticationError()

        token, expires_at = self.issuer.issue(user)
        return user, token, expires_at


def get_auth_workflow():
    """Build the auth workflow for the current request."""
    return AuthWorkflow(
        CredentialStore(),
        get_verification_gateway(),
        get_session_issuer(),
        country_code=current_app.config['DEFAULT_COUNTRY_CODE'],
    )

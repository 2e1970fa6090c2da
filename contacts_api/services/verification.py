"""Phone verification gateways.

A gateway starts an out-of-band challenge (SMS or voice call) for a mobile
number and later checks the code the user typed in. The provider owns the
challenge state; nothing is stored locally.

Both operations return a dict with a ``status`` key:

- ``success``: challenge started / code accepted
- ``failed``: provider answered, but negatively (wrong or expired code,
  undeliverable number, ...)
- ``error``: provider or network failure

Failures carry a short human-readable ``error`` message as well. Gateways
never raise for provider or network problems, so callers can always rely on
the status.
"""

import logging

from flask import current_app
from twilio.rest import Client
from twilio.base.exceptions import TwilioRestException

logger = logging.getLogger(__name__)

STATUS_SUCCESS = 'success'
STATUS_FAILED = 'failed'
STATUS_ERROR = 'error'

CHANNELS = ('sms', 'call')

# Twilio Verify error codes
TWILIO_INVALID_PARAMETER = 60200
TWILIO_NOT_FOUND = 60202  # expired or already approved
TWILIO_MAX_ATTEMPTS = 60203
TWILIO_UNSUPPORTED_CARRIER = 60205


def _success(**extra):
    return {'status': STATUS_SUCCESS, **extra}


def _failure(status, error):
    return {'status': status, 'error': error}


class VerificationGateway:
    """Interface for phone verification providers."""

    def start_verification(self, mobile: str, channel: str = 'sms') -> dict:
        raise NotImplementedError

    def check_verification(self, mobile: str, code: str) -> dict:
        raise NotImplementedError


class TwilioVerificationGateway(VerificationGateway):
    """Verification through the Twilio Verify v2 API."""

    def __init__(self, account_sid, auth_token, service_sid, client=None):
        if not service_sid:
            raise ValueError("Twilio Verify Service SID not configured. Set TWILIO_VERIFY_SERVICE_SID environment variable.")
        if client is None:
            if not account_sid or not auth_token:
                raise ValueError("Twilio credentials not configured. Set TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN environment variables.")
            client = Client(account_sid, auth_token)
        self.client = client
        self.service_sid = service_sid

    def _service(self):
        return self.client.verify.v2.services(self.service_sid)

    def start_verification(self, mobile, channel='sms'):
        if channel not in CHANNELS:
            return _failure(STATUS_FAILED, 'Unsupported verification channel')

        try:
            verification = self._service().verifications.create(to=mobile, channel=channel)
        except TwilioRestException as e:
            logger.error(f"Twilio error starting verification for {mobile}: {e.code} {e.msg}")

            if e.code == TWILIO_INVALID_PARAMETER:
                return _failure(STATUS_FAILED, 'Invalid phone number')
            elif e.code == TWILIO_MAX_ATTEMPTS:
                return _failure(STATUS_FAILED, 'Max verification attempts reached. Try again later.')
            elif e.code == TWILIO_UNSUPPORTED_CARRIER:
                return _failure(STATUS_FAILED, 'SMS not supported for this phone number')
            return _failure(STATUS_ERROR, 'Failed to send verification code. Please try again.')
        except Exception as e:
            logger.error(f"Error starting verification for {mobile}: {e}")
            return _failure(STATUS_ERROR, 'Failed to send verification code')

        logger.info(f"Verification started for {mobile} via {channel}, status: {verification.status}")

        if verification.status != 'pending':
            return _failure(STATUS_FAILED, 'Failed to send verification code')
        return _success()

    def check_verification(self, mobile, code):
        if not code:
            return _failure(STATUS_FAILED, 'Invalid verification code')

        try:
            verification_check = self._service().verification_checks.create(to=mobile, code=str(code))
        except TwilioRestException as e:
            logger.error(f"Twilio error checking verification for {mobile}: {e.code} {e.msg}")

            if e.code == TWILIO_NOT_FOUND:
                return _failure(STATUS_FAILED, 'Verification code expired. Request a new one.')
            elif e.code == TWILIO_INVALID_PARAMETER:
                return _failure(STATUS_FAILED, 'Invalid verification code')
            return _failure(STATUS_ERROR, 'Verification failed. Please try again.')
        except Exception as e:
            logger.error(f"Error checking verification for {mobile}: {e}")
            return _failure(STATUS_ERROR, 'Verification failed')

        logger.info(f"Verification check for {mobile}: {verification_check.status}")

        if verification_check.status == 'approved':
            return _success()
        return _failure(STATUS_FAILED, 'Invalid verification code')


class StaticVerificationGateway(VerificationGateway):
    """Offline gateway that accepts a single fixed code.

    Used for local development and tests. ``next_start`` and ``next_check``
    force the outcome of the following calls, e.g. to simulate a provider
    outage. With ``record_calls`` set, started and checked challenges are
    kept in ``started`` and ``checked``; otherwise nothing accumulates.
    """

    def __init__(self, code='123456', record_calls=False):
        self.code = str(code)
        self.record_calls = record_calls
        self.started = []
        self.checked = []
        self.next_start = None
        self.next_check = None

    def reset(self):
        self.started.clear()
        self.checked.clear()
        self.next_start = None
        self.next_check = None

    def start_verification(self, mobile, channel='sms'):
        if channel not in CHANNELS:
            return _failure(STATUS_FAILED, 'Unsupported verification channel')

        if self.record_calls:
            self.started.append((mobile, channel))
        if self.next_start is not None:
            result, self.next_start = self.next_start, None
            return result

        logger.info(f"Static verification started for {mobile} via {channel}")
        return _success()

    def check_verification(self, mobile, code):
        if self.record_calls:
            self.checked.append(mobile)
        if self.next_check is not None:
            result, self.next_check = self.next_check, None
            return result

        if code is not None and str(code) == self.code:
            return _success()
        return _failure(STATUS_FAILED, 'Invalid verification code')


def build_verification_gateway(config):
    """Create the gateway selected by ``VERIFICATION_BACKEND``."""
    backend = config.get('VERIFICATION_BACKEND', 'static')

    if backend == 'twilio':
        return TwilioVerificationGateway(
            config.get('TWILIO_ACCOUNT_SID'),
            config.get('TWILIO_AUTH_TOKEN'),
            config.get('TWILIO_VERIFY_SERVICE_SID'),
        )
    if backend == 'static':
        return StaticVerificationGateway(
            config.get('STATIC_VERIFICATION_CODE', '123456'),
            record_calls=bool(config.get('TESTING')),
        )

    raise ValueError(f"Unknown VERIFICATION_BACKEND: {backend}")


def init_verification_gateway(app):
    app.extensions['verification_gateway'] = build_verification_gateway(app.config)


def get_verification_gateway(app=None):
    app = app or current_app
    return app.extensions['verification_gateway']

"""Auth routes: signup, phone verification, signin and signout."""

from flask import Blueprint, jsonify, current_app, make_response
from contacts_api import db
from contacts_api.services.auth_workflow import get_auth_workflow
from contacts_api.utils import get_request_data, set_session_cookie, clear_session_cookie

auth_bp = Blueprint('auth', __name__)


def session_response(user, token, expires_at, status=200):
    """Build a response carrying the user profile and the session cookie."""
    response = make_response(jsonify(user.to_dict()), status)
    return set_session_cookie(response, token, expires_at)


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """Register a new account and send the mobile verification code."""
    try:
        user = get_auth_workflow().signup(get_request_data())
        current_app.logger.info(f"Signup: new user {user.id}")
        return jsonify(user.to_dict()), 200
    except Exception:
        db.session.rollback()
        raise


@auth_bp.route('/verify', methods=['POST'])
def verify():
    """Check the verification code and sign the user in."""
    try:
        user, token, expires_at = get_auth_workflow().verify(get_request_data())
        current_app.logger.info(f"Mobile verified for user {user.id}")
        return session_response(user, token, expires_at)
    except Exception:
        db.session.rollback()
        raise


@auth_bp.route('/verify/resend', methods=['POST'])
def resend_verification():
    """Send a new verification code by SMS or voice call."""
    result = get_auth_workflow().resend_verification(get_request_data())
    return jsonify({'status': result['status']}), 200


@auth_bp.route('/signin', methods=['POST'])
def signin():
    """Authenticate with email and password."""
    user, token, expires_at = get_auth_workflow().signin(get_request_data())
    current_app.logger.info(f"Password signin: user {user.id}")
    return session_response(user, token, expires_at)


@auth_bp.route('/signout', methods=['POST'])
def signout():
    """Drop the session cookie. Tokens are stateless, so nothing else to do."""
    response = make_response('', 204)
    return clear_session_cookie(response)

"""User routes: own profile and mobile + PIN signin."""

from flask import Blueprint, jsonify, current_app
from contacts_api.routes.auth import session_response
from contacts_api.services.auth_workflow import get_auth_workflow
from contacts_api.utils import token_required, get_request_data

user_bp = Blueprint('user', __name__)


@user_bp.route('', methods=['GET'])
@token_required
def get_profile(current_user):
    """Get current user profile."""
    return jsonify(current_user.to_dict()), 200


@user_bp.route('/signin', methods=['POST'])
def signin_pin():
    """Authenticate a verified user with mobile number and PIN."""
    user, token, expires_at = get_auth_workflow().signin_pin(get_request_data())
    current_app.logger.info(f"PIN signin: user {user.id}")
    return session_response(user, token, expires_at)

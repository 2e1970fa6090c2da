"""Contact routes: bulk import and listing for the signed-in user."""

from flask import Blueprint, jsonify, current_app
from contacts_api.errors import ValidationError
from contacts_api.services.contacts import ContactRepository
from contacts_api.utils import verified_required, get_request_data

contacts_bp = Blueprint('contacts', __name__)


@contacts_bp.route('', methods=['POST'])
@verified_required
def create_contacts(current_user):
    """Import a batch of contacts.

    Body: {"contacts": [{"firstName", "lastName", "phoneNumbers": [{"number", "type"}]}]}
    """
    data = get_request_data()
    if 'contacts' not in data:
        raise ValidationError("contacts is required")

    contacts = ContactRepository().bulk_create(current_user.id, data['contacts'])
    current_app.logger.info(f"User {current_user.id} imported {len(contacts)} contacts")

    return jsonify([contact.to_dict() for contact in contacts]), 201


@contacts_bp.route('', methods=['GET'])
@verified_required
def list_contacts(current_user):
    """List the signed-in user's contacts, ordered by name."""
    contacts = ContactRepository().list_by_owner(current_user.id)
    return jsonify([contact.to_dict() for contact in contacts]), 200

"""Contact repository: bulk import and per-owner listing."""

import logging

from contacts_api import db
from contacts_api.errors import ValidationError
from contacts_api.models import Contact, ContactPhoneNumber

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MAX_NUMBER_LENGTH = 40
MAX_TYPE_LENGTH = 40


def contact_sort_key(contact):
    """Order contacts by last name, first name, then phone numbers.

    Works on ``Contact`` instances and on their serialized dicts alike.
    """
    if isinstance(contact, dict):
        return (
            contact.get('lastName') or '',
            contact.get('firstName') or '',
            tuple(phone.get('number') or '' for phone in contact.get('phoneNumbers') or []),
        )
    return (
        contact.last_name or '',
        contact.first_name or '',
        tuple(phone.number for phone in contact.phone_numbers),
    )


def _validate_name(entry, field):
    value = entry.get(field)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    if len(value) > MAX_NAME_LENGTH:
        raise ValidationError(f"{field} must be less than {MAX_NAME_LENGTH} characters")
    return value


def _validate_phone_numbers(entry):
    phone_numbers = entry.get('phoneNumbers', [])
    if phone_numbers is None:
        return []
    if not isinstance(phone_numbers, list):
        raise ValidationError("phoneNumbers must be a list")

    validated = []
    for phone in phone_numbers:
        if not isinstance(phone, dict):
            raise ValidationError("Each phone number must be an object")
        number = phone.get('number')
        if not isinstance(number, str) or not number.strip():
            raise ValidationError("Each phone number needs a number")
        if len(number) > MAX_NUMBER_LENGTH:
            raise ValidationError(f"number must be less than {MAX_NUMBER_LENGTH} characters")
        phone_type = phone.get('type')
        if phone_type is not None and not isinstance(phone_type, str):
            raise ValidationError("type must be a string")
        if phone_type and len(phone_type) > MAX_TYPE_LENGTH:
            raise ValidationError(f"type must be less than {MAX_TYPE_LENGTH} characters")
        validated.append({'number': number, 'type': phone_type})
    return validated


def validate_contacts(contacts):
    """Check an import payload and return cleaned contact dicts.

    Raises:
        ValidationError: On the first malformed entry
    """
    if not isinstance(contacts, list):
        raise ValidationError("contacts must be a list")

    cleaned = []
    for entry in contacts:
        if not isinstance(entry, dict):
            raise ValidationError("Each contact must be an object")
        cleaned.append({
            'first_name': _validate_name(entry, 'firstName'),
            'last_name': _validate_name(entry, 'lastName'),
            'phone_numbers': _validate_phone_numbers(entry),
        })
    return cleaned


class ContactRepository:
    """Stores contacts scoped to the user who imported them."""

    def __init__(self, session=None):
        self.session = session or db.session

    def bulk_create(self, owner_id, contacts):
        """Store every contact in ``contacts`` for ``owner_id``.

        Imports are additive: nothing is deduplicated against contacts the
        owner already has. All entries are validated before anything is
        written, and the whole batch commits in one transaction.
        """
        cleaned = validate_contacts(contacts)

        created = []
        try:
            for entry in cleaned:
                contact = Contact(
                    owner_id=owner_id,
                    first_name=entry['first_name'],
                    last_name=entry['last_name'],
                )
                for position, phone in enumerate(entry['phone_numbers']):
                    contact.phone_numbers.append(ContactPhoneNumber(
                        position=position,
                        number=phone['number'],
                        type=phone['type'],
                    ))
                self.session.add(contact)
                created.append(contact)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Imported {len(created)} contacts for user {owner_id}")
        return created

    def list_by_owner(self, owner_id):
        contacts = Contact.query.filter_by(owner_id=owner_id).all()
        return sorted(contacts, key=contact_sort_key)

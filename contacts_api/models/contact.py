"""Address book models: contacts and their phone numbers."""

from datetime import datetime
from contacts_api import db


class Contact(db.Model):
    """A contact imported by, and visible only to, its owner."""

    __tablename__ = 'contacts'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    first_name = db.Column(db.String(100), nullable=False, default='')
    last_name = db.Column(db.String(100), nullable=False, default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    phone_numbers = db.relationship(
        'ContactPhoneNumber',
        backref='contact',
        lazy='selectin',
        order_by='ContactPhoneNumber.position',
        cascade='all, delete-orphan',
    )

    def to_dict(self):
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'phoneNumbers': [phone.to_dict() for phone in self.phone_numbers],
        }

    def __repr__(self):
        return f'<Contact {self.first_name} {self.last_name} owner={self.owner_id}>'


class ContactPhoneNumber(db.Model):
    """One phone number of a contact, kept in the order it was submitted."""

    __tablename__ = 'contact_phone_numbers'

    id = db.Column(db.Integer, primary_key=True)
    contact_id = db.Column(db.Integer, db.ForeignKey('contacts.id'), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)
    number = db.Column(db.String(40), nullable=False)
    type = db.Column(db.String(40), nullable=True)

    def to_dict(self):
        return {
            'number': self.number,
            'type': self.type,
        }

    def __repr__(self):
        return f'<ContactPhoneNumber {self.number} ({self.type})>'

"""User model for authentication and phone verification."""

from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from contacts_api import db

DEFAULT_ROLES = ['user']


class User(db.Model):
    """A registered account, identified by email and by mobile number."""

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    mobile = db.Column(db.String(20), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    pin_hash = db.Column(db.String(255), nullable=True)
    verified_mobile = db.Column(db.Boolean, default=False, nullable=False)
    roles = db.Column(db.JSON, default=lambda: list(DEFAULT_ROLES), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    contacts = db.relationship('Contact', backref='owner', lazy=True)

    def set_password(self, password):
        """Hash and set the user password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check if the provided password matches the hash."""
        return check_password_hash(self.password_hash, password)

    def set_pin(self, pin):
        """Hash and set the numeric sign-in PIN."""
        self.pin_hash = generate_password_hash(pin)

    def check_pin(self, pin):
        if not self.pin_hash:
            return False
        return check_password_hash(self.pin_hash, pin)

    def to_dict(self):
        """Public representation. Never includes password or PIN material."""
        return {
            'id': self.id,
            'email': self.email,
            'mobile': self.mobile,
            'verifiedMobile': self.verified_mobile,
            'roles': list(self.roles or []),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<User {self.email}>'

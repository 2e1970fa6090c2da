"""Credential store: user creation, lookup and secret checks."""

import logging

from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash, check_password_hash

from contacts_api import db
from contacts_api.errors import DuplicateEmail, DuplicateMobile
from contacts_api.models import User
from contacts_api.models.user import DEFAULT_ROLES

logger = logging.getLogger(__name__)

# Checked when no user matches, so a miss costs as much as a wrong secret
_DUMMY_HASH = None


def _dummy_hash():
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = generate_password_hash('not-a-real-password')
    return _DUMMY_HASH


def normalize_email(email):
    return email.strip().lower()


class CredentialStore:
    """Owns user records.

    Emails are lower-cased before every write and lookup; mobiles are
    expected in canonical form (see ``contacts_api.utils.phone``). The
    database unique constraints back up the explicit checks in ``create``
    so concurrent signups cannot both succeed.
    """

    def __init__(self, session=None):
        self.session = session or db.session

    def get(self, user_id):
        return self.session.get(User, user_id)

    def find_by_email(self, email):
        if not email:
            return None
        return User.query.filter_by(email=normalize_email(email)).first()

    def find_by_mobile(self, mobile):
        if not mobile:
            return None
        return User.query.filter_by(mobile=mobile).first()

    def create(self, email, mobile, password, pin=None, verified_mobile=False, roles=None):
        """Create a user and return it.

        Raises:
            DuplicateEmail: If the (lower-cased) email is already registered
            DuplicateMobile: If the canonical mobile is already registered
        """
        email = normalize_email(email)

        if self.find_by_email(email):
            raise DuplicateEmail()
        if self.find_by_mobile(mobile):
            raise DuplicateMobile()

        user = User(
            email=email,
            mobile=mobile,
            verified_mobile=verified_mobile,
            roles=list(roles or DEFAULT_ROLES),
        )
        user.set_password(password)
        if pin is not None:
            user.set_pin(str(pin))

        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent signup
            self.session.rollback()
            if self.find_by_mobile(mobile) and not self.find_by_email(email):
                raise DuplicateMobile()
            raise DuplicateEmail()

        logger.info(f"Created user {user.id}")
        return user

    def mark_verified(self, user_id):
        """Flag the user's mobile as verified. Safe to call repeatedly."""
        user = self.get(user_id)
        if user is None:
            return None
        if not user.verified_mobile:
            user.verified_mobile = True
            self.session.commit()
            logger.info(f"User {user.id} verified mobile")
        return user

    def verify_password(self, email, password):
        """Return the user if ``password`` matches, else None."""
        user = self.find_by_email(email) if email else None
        return self._check(user, password, User.check_password)

    def verify_pin(self, mobile, pin):
        """Return the user if ``pin`` matches, else None."""
        user = self.find_by_mobile(mobile) if mobile else None
        return self._check(user, pin, User.check_pin)

    def _check(self, user, secret, checker):
        if user is None:
            # Burn the same hashing time as a real comparison
            check_password_hash(_dummy_hash(), str(secret or ''))
            return None
        if secret is None or not checker(user, str(secret)):
            return None
        return user

"""Database models for the contacts application."""

from .user import User
from .contact import Contact, ContactPhoneNumber

__all__ = ['User', 'Contact', 'ContactPhoneNumber']

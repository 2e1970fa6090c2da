"""
Pytest configuration and fixtures for testing the Contacts API.
"""

import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from contacts_api import create_app, db
from contacts_api.services.credentials import CredentialStore
from contacts_api.utils.phone import normalize_phone_number

fake = Faker()

VALID_CODE = '123456'


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


@pytest.fixture(scope='function')
def gateway(app):
    """The offline verification gateway, with recorded calls cleared."""
    gateway = app.extensions['verification_gateway']
    gateway.reset()
    yield gateway
    gateway.reset()


def build_user(**overrides):
    """Signup payload with sensible defaults."""
    data = {
        'email': fake.unique.email(),
        'mobile': fake.unique.numerify('(###) ###-####'),
        'password': fake.password(length=12),
        'pin': fake.numerify('####'),
    }
    data.update(overrides)
    return data


def build_contact(phone_count=2):
    return {
        'firstName': fake.first_name(),
        'lastName': fake.last_name(),
        'phoneNumbers': [
            {
                'number': fake.numerify('###-###-####'),
                'type': fake.random_element(['mobile', 'home', 'work']),
            }
            for _ in range(phone_count)
        ],
    }


def _create_user(verified=True, **overrides):
    """Helper to store a user directly, bypassing signup."""
    data = build_user(**overrides)
    user = CredentialStore().create(
        data['email'],
        normalize_phone_number(data['mobile']),
        data['password'],
        pin=data['pin'],
        verified_mobile=verified,
    )
    data['id'] = user.id
    return data


def get_access_token(response):
    """Pull the accessToken value out of a response's Set-Cookie headers."""
    for header in response.headers.getlist('Set-Cookie'):
        if header.startswith('accessToken='):
            return header.split(';', 1)[0].split('=', 1)[1]
    return None


def get_cookie_header(response, name='accessToken'):
    for header in response.headers.getlist('Set-Cookie'):
        if header.startswith(f'{name}='):
            return header
    return None


@pytest.fixture
def verified_user(app, db_session):
    """Create a user whose mobile is already verified."""
    return _create_user(verified=True)


@pytest.fixture
def second_verified_user(app, db_session):
    return _create_user(verified=True)


@pytest.fixture
def unverified_user(app, db_session):
    return _create_user(verified=False)


def _signin_pin(client, user):
    resp = client.post('/api/user/signin', json={
        'mobile': user['mobile'],
        'pin': user['pin'],
    })
    token = get_access_token(resp)
    if not token:
        raise RuntimeError(
            f"PIN signin returned no token: status={resp.status_code}, body={resp.get_json()}"
        )
    return token


@pytest.fixture
def auth_headers(client, verified_user):
    """Authorization header for the verified test user."""
    return {'Authorization': _signin_pin(client, verified_user)}


@pytest.fixture
def second_auth_headers(client, second_verified_user):
    return {'Authorization': _signin_pin(client, second_verified_user)}

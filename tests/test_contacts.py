"""
Tests for contact endpoints.
"""

from conftest import build_contact, build_user, get_access_token
from contacts_api.services.contacts import contact_sort_key
from contacts_api.models import Contact


def _without_ids(contacts):
    return [{k: v for k, v in contact.items() if k != 'id'} for contact in contacts]


class TestCreateContacts:
    """Tests for POST /api/contacts"""

    def test_create_contacts(self, client, auth_headers):
        new_contacts = [build_contact()]

        response = client.post('/api/contacts', headers=auth_headers, json={'contacts': new_contacts})

        assert response.status_code == 201
        contacts = response.get_json()
        assert len(contacts) == 1

        contact = contacts[0]
        assert contact['firstName'] == new_contacts[0]['firstName']
        assert contact['lastName'] == new_contacts[0]['lastName']
        assert contact['phoneNumbers'][0]['number'] == new_contacts[0]['phoneNumbers'][0]['number']
        assert contact['phoneNumbers'][1] == new_contacts[0]['phoneNumbers'][1]

    def test_phone_number_order_is_preserved(self, client, auth_headers):
        contact = build_contact(phone_count=4)

        response = client.post('/api/contacts', headers=auth_headers, json={'contacts': [contact]})

        assert response.get_json()[0]['phoneNumbers'] == contact['phoneNumbers']

    def test_imports_are_additive(self, client, auth_headers):
        contact = build_contact()

        client.post('/api/contacts', headers=auth_headers, json={'contacts': [contact]})
        client.post('/api/contacts', headers=auth_headers, json={'contacts': [contact]})

        response = client.get('/api/contacts', headers=auth_headers)
        assert len(response.get_json()) == 2

    def test_missing_type_and_names(self, client, auth_headers):
        response = client.post('/api/contacts', headers=auth_headers, json={
            'contacts': [{'phoneNumbers': [{'number': '555-0100'}]}],
        })

        assert response.status_code == 201
        assert _without_ids(response.get_json()) == [{
            'firstName': '',
            'lastName': '',
            'phoneNumbers': [{'number': '555-0100', 'type': None}],
        }]

    def test_unauthenticated(self, app, db_session):
        response = app.test_client().post('/api/contacts', json={'contacts': [build_contact()]})

        assert response.status_code == 401

    def test_unverified_user_is_forbidden(self, client, db_session, gateway):
        new_user = build_user()
        client.post('/api/auth/signup', json=new_user)
        signin = client.post('/api/auth/signin', json={
            'email': new_user['email'],
            'password': new_user['password'],
        })

        response = client.post(
            '/api/contacts',
            headers={'Authorization': get_access_token(signin)},
            json={'contacts': [build_contact()]},
        )

        assert response.status_code == 403
        assert response.get_json() == 'Mobile Not Verified'

    def test_missing_contacts_field(self, client, auth_headers):
        response = client.post('/api/contacts', headers=auth_headers, json={})

        assert response.status_code == 400
        assert response.get_json() == 'contacts is required'

    def test_contacts_must_be_a_list(self, client, auth_headers):
        response = client.post('/api/contacts', headers=auth_headers, json={'contacts': build_contact()})

        assert response.status_code == 400

    def test_invalid_entry_rejects_whole_batch(self, client, auth_headers, verified_user):
        batch = [build_contact(), {'firstName': 'No', 'phoneNumbers': [{'type': 'home'}]}]

        response = client.post('/api/contacts', headers=auth_headers, json={'contacts': batch})

        assert response.status_code == 400
        assert Contact.query.filter_by(owner_id=verified_user['id']).count() == 0


class TestListContacts:
    """Tests for GET /api/contacts"""

    def test_contacts_are_scoped_to_owner(self, client, auth_headers, second_auth_headers):
        user1_contacts = sorted([build_contact(), build_contact()], key=contact_sort_key)
        user2_contacts = [build_contact(phone_count=1)]

        assert client.post('/api/contacts', headers=auth_headers,
                           json={'contacts': user1_contacts}).status_code == 201
        assert client.post('/api/contacts', headers=second_auth_headers,
                           json={'contacts': user2_contacts}).status_code == 201

        user1_list = client.get('/api/contacts', headers=auth_headers).get_json()
        user2_list = client.get('/api/contacts', headers=second_auth_headers).get_json()

        assert len(user1_list) == 2
        assert len(user2_list) == 1
        assert _without_ids(user1_list) == user1_contacts
        assert _without_ids(user2_list) == user2_contacts

    def test_listing_order(self, client, auth_headers):
        contacts = [
            {'firstName': 'Zed', 'lastName': 'Adams', 'phoneNumbers': [{'number': '2', 'type': 'home'}]},
            {'firstName': 'Amy', 'lastName': 'Brown', 'phoneNumbers': [{'number': '1', 'type': 'home'}]},
            {'firstName': 'Amy', 'lastName': 'Adams', 'phoneNumbers': [{'number': '9', 'type': 'home'}]},
            {'firstName': 'Zed', 'lastName': 'Adams', 'phoneNumbers': [{'number': '1', 'type': 'home'}]},
        ]
        client.post('/api/contacts', headers=auth_headers, json={'contacts': contacts})

        listed = client.get('/api/contacts', headers=auth_headers).get_json()

        assert [(c['lastName'], c['firstName'], c['phoneNumbers'][0]['number']) for c in listed] == [
            ('Adams', 'Amy', '9'),
            ('Adams', 'Zed', '1'),
            ('Adams', 'Zed', '2'),
            ('Brown', 'Amy', '1'),
        ]

    def test_empty_list(self, client, auth_headers):
        response = client.get('/api/contacts', headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json() == []

    def test_unauthenticated(self, app, db_session):
        response = app.test_client().get('/api/contacts', headers={'Authorization': 'sldkfj'})

        assert response.status_code == 401


class TestContactSortKey:

    def test_dicts_and_models_sort_alike(self):
        contact = {'firstName': 'Amy', 'lastName': 'Adams', 'phoneNumbers': [{'number': '1'}, {'number': '2'}]}

        assert contact_sort_key(contact) == ('Adams', 'Amy', ('1', '2'))

"""Shared fixtures. The Supabase API is always faked, tests never hit the network."""
from unittest.mock import MagicMock

import pytest

from auth_gateway import AuthGateway, FormGuard
from supabase_api import SupabaseAPI


def sign_in_payload(user_id='u-1', email='ana@example.com', name='Ana', role='user', token='token-123'):
    metadata = {}
    if name is not None:
        metadata['name'] = name
    if role is not None:
        metadata['role'] = role
    return {
        'user': {'id': user_id, 'email': email, 'user_metadata': metadata},
        'session': {'access_token': token},
    }


@pytest.fixture
def fake_api():
    api = MagicMock(spec=SupabaseAPI)
    api.sign_in_with_password.return_value = sign_in_payload()
    api.sign_up.return_value = (True, {'user': {'id': 'u-1'}})
    api.get_tasks.return_value = []
    api.get_users.return_value = []
    api.create_task.return_value = {'id': 't-new'}
    return api


@pytest.fixture
def gateway(fake_api):
    return AuthGateway(fake_api, guard=FormGuard())


@pytest.fixture
def client(monkeypatch, fake_api):
    import app as app_module

    monkeypatch.setattr(app_module, 'SupabaseAPI', lambda *args, **kwargs: fake_api)
    monkeypatch.setattr(app_module, 'form_guard', FormGuard())
    monkeypatch.setitem(app_module.app.config, 'TESTING', True)
    monkeypatch.setitem(app_module.app.config, 'SECRET_KEY', 'test-secret-key')
    with app_module.app.test_client() as client:
        yield client


@pytest.fixture
def login(client, fake_api):
    """Log the test client in with the given role."""
    def _login(role='user', name='Ana'):
        fake_api.sign_in_with_password.return_value = sign_in_payload(name=name, role=role)
        return client.post('/login', data={'email': 'ana@example.com', 'password': 'secret123'})
    return _login

"""
Shared fixtures.

Every test gets its own MockStore so that registrations / deletions never
leak between tests, and all simulated delays are zero.
"""
from unittest.mock import MagicMock

import pytest

from signaldesk.exceptions import BackendError
from signaldesk.services.admin_service import AdminService
from signaldesk.services.auth_service import AuthService
from signaldesk.services.backend_client import BackendClient
from signaldesk.services.mock_store import build_mock_store
from signaldesk.services.signal_service import SignalService


@pytest.fixture
def store():
    return build_mock_store()


@pytest.fixture
def backend():
    """A backend double; configure return values per test."""
    client = MagicMock(spec=BackendClient)
    client.name = "fake"
    return client


@pytest.fixture
def failing_backend():
    """A backend whose every call raises."""
    client = MagicMock(spec=BackendClient)
    client.name = "fake"
    error = BackendError("connection refused")
    for method in (
        "sign_in",
        "sign_up",
        "send_password_reset",
        "upgrade_user",
        "fetch_signals",
        "fetch_providers",
        "fetch_users",
        "update_user_status",
        "delete_user",
    ):
        getattr(client, method).side_effect = error
    return client


@pytest.fixture
def auth_service(store):
    return AuthService(None, store, delay=0)


@pytest.fixture
def signal_service(store):
    return SignalService(None, store, delay=0)


@pytest.fixture
def admin_service(store):
    return AdminService(None, store, delay=0)

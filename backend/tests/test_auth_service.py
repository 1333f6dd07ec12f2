import pytest

from signaldesk.exceptions import UserNotFoundError
from signaldesk.mock_data import MOCK_ADMIN_USERS, MOCK_USERS
from signaldesk.schemas import DataSource, User, UserRole, UserStatus
from signaldesk.services.auth_service import AuthService


class TestLogin:
    def test_known_email_returns_that_record(self, auth_service):
        for user in MOCK_USERS:
            result = auth_service.login(user.email)
            assert result.data == user
            assert result.source is DataSource.MOCK

    def test_unknown_email_returns_free_guest(self, auth_service):
        result = auth_service.login("stranger@example.com", "secret")
        user = result.data
        assert user.id == "guest"
        assert user.role is UserRole.FREE
        assert user.plan == "Gratuito"
        assert user.email == "stranger@example.com"

    def test_backend_login(self, store, backend):
        remote_user = User(id="uid-1", name="Remote", email="r@example.com", role=UserRole.PREMIUM, plan="Premium")
        backend.sign_in.return_value = remote_user

        result = AuthService(backend, store, delay=0).login("r@example.com", "pw")

        backend.sign_in.assert_called_once_with("r@example.com", "pw")
        assert result.data == remote_user
        assert result.source is DataSource.BACKEND

    def test_backend_skipped_without_password(self, store, backend):
        result = AuthService(backend, store, delay=0).login(MOCK_USERS[0].email)
        backend.sign_in.assert_not_called()
        assert result.data == MOCK_USERS[0]

    def test_missing_profile_falls_back_to_mock(self, store, backend):
        backend.sign_in.return_value = None
        result = AuthService(backend, store, delay=0).login(MOCK_USERS[1].email, "pw")
        assert result.data == MOCK_USERS[1]
        assert result.source is DataSource.MOCK

    def test_backend_failure_degrades(self, store, failing_backend):
        result = AuthService(failing_backend, store, delay=0).login(MOCK_USERS[0].email, "pw")
        assert result.data == MOCK_USERS[0]
        assert result.source is DataSource.DEGRADED
        assert "connection refused" in result.error


class TestRegister:
    def test_mock_register_adds_one_user_and_one_admin_row(self, auth_service, store):
        users_before = len(store.users)
        admins_before = len(store.admin_users)

        user = auth_service.register("new@example.com", "pw", "New Person").data

        assert len(store.users) == users_before + 1
        assert len(store.admin_users) == admins_before + 1
        assert user.id.startswith("new_")
        assert user.role is UserRole.FREE
        assert user.plan == "Gratuito"

        assert store.users.list()[-1] == user
        admin_row = store.admin_users.list()[0]
        assert admin_row.id == user.id
        assert admin_row.status is UserStatus.ACTIVE
        assert admin_row.plan == "Gratuito"

    def test_registered_user_can_log_in(self, auth_service):
        user = auth_service.register("new@example.com", "pw", "New Person").data
        assert auth_service.login("new@example.com").data == user

    def test_ids_are_unique(self, auth_service):
        first = auth_service.register("a@example.com", "pw", "A").data
        second = auth_service.register("b@example.com", "pw", "B").data
        assert first.id != second.id

    def test_backend_register_leaves_mock_untouched(self, store, backend):
        backend.sign_up.return_value = User(id="uid-9", name="N", email="n@example.com")
        result = AuthService(backend, store, delay=0).register("n@example.com", "pw", "N")

        assert result.source is DataSource.BACKEND
        assert len(store.users) == len(MOCK_USERS)
        assert len(store.admin_users) == len(MOCK_ADMIN_USERS)

    def test_backend_failure_registers_in_mock(self, store, failing_backend):
        result = AuthService(failing_backend, store, delay=0).register("n@example.com", "pw", "N")
        assert result.degraded
        assert len(store.users) == len(MOCK_USERS) + 1


class TestRecoverPassword:
    def test_mock(self, auth_service):
        result = auth_service.recover_password("ana@example.com")
        assert result.data is True
        assert result.source is DataSource.MOCK

    def test_backend(self, store, backend):
        result = AuthService(backend, store, delay=0).recover_password("ana@example.com")
        backend.send_password_reset.assert_called_once_with("ana@example.com")
        assert result.source is DataSource.BACKEND


class TestUpgradePlan:
    def test_unknown_user_is_rejected(self, auth_service):
        with pytest.raises(UserNotFoundError, match="User not found"):
            auth_service.upgrade_plan("nobody")

    def test_guest_becomes_premium(self, auth_service):
        user = auth_service.upgrade_plan("guest").data
        assert user.id == "guest"
        assert user.role is UserRole.PREMIUM
        assert user.plan == "Premium"
        assert user.email == "guest@test.com"

    def test_known_user_is_upgraded_and_persisted(self, auth_service, store):
        user = auth_service.upgrade_plan("1").data
        assert user.role is UserRole.PREMIUM
        assert user.plan == "Premium"
        assert store.users.get("1").role is UserRole.PREMIUM
        assert store.admin_users.get("1").plan == "Premium"

    def test_backend_failure_still_rejects_unknown_user(self, store, failing_backend):
        with pytest.raises(UserNotFoundError):
            AuthService(failing_backend, store, delay=0).upgrade_plan("nobody")

    def test_backend_upgrade(self, store, backend):
        backend.upgrade_user.return_value = User(
            id="uid-1", name="R", email="r@example.com", role=UserRole.PREMIUM, plan="Premium"
        )
        result = AuthService(backend, store, delay=0).upgrade_plan("uid-1")
        assert result.source is DataSource.BACKEND
        assert result.data.role is UserRole.PREMIUM

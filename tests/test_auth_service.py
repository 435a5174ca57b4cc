import pytest

from sales_portal.constants import Role
from sales_portal.core.exceptions import InvalidCredentialsError, ValidationError
from sales_portal.data import crud_users
from sales_portal.services.auth_service import AuthService
from tests.conftest import TEST_PASSWORD


def test_valid_credentials_return_identity(db_session, sales_user):
    identity = AuthService.authenticate_user(db_session, "sales001", TEST_PASSWORD)
    assert identity.login_id == "sales001"
    assert identity.role is Role.SALES
    assert identity.last_login is not None


def test_password_is_stored_hashed(db_session, sales_user):
    assert sales_user.password != TEST_PASSWORD
    assert sales_user.password.startswith("$2")


@pytest.mark.parametrize("login_id, password", [("sales001", "wrong-password"), ("nobody", TEST_PASSWORD)])
def test_bad_credentials_share_one_message(db_session, sales_user, login_id, password):
    with pytest.raises(InvalidCredentialsError) as exc_info:
        AuthService.authenticate_user(db_session, login_id, password)
    assert exc_info.value.message == "Invalid login ID or password."


def test_inactive_account_cannot_sign_in(db_session, sales_user):
    crud_users.set_user_active(db_session, sales_user.id, False)
    with pytest.raises(InvalidCredentialsError):
        AuthService.authenticate_user(db_session, "sales001", TEST_PASSWORD)


@pytest.mark.parametrize("login_id, password", [("", TEST_PASSWORD), ("sales001", "")])
def test_empty_credentials_rejected(db_session, login_id, password):
    with pytest.raises(ValidationError):
        AuthService.authenticate_user(db_session, login_id, password)


def test_load_identity_reflects_current_state(db_session, sales_user):
    crud_users.set_user_active(db_session, sales_user.id, False)
    identity = AuthService.load_identity(db_session, "sales001")
    assert identity.is_active is False
    assert AuthService.load_identity(db_session, "ghost") is None

from datetime import timedelta
from unittest.mock import MagicMock

import jwt
import pytest

from storefront.domain.errors import (
    AuthError,
    EmailInUse,
    ForbiddenError,
    UserAlreadyExists,
    UserNotFound,
    ValidationError,
)
from storefront.domain.schemas import UserSignup, UserUpdate
from storefront.repos.user_repo import UserRepo
from storefront.services.user_service import UserService
from storefront.utils.security import generate_token, verify_password, verify_token


@pytest.fixture
def events():
    return MagicMock()


@pytest.fixture
def service(db, events):
    return UserService(UserRepo(db), events=events)


def _signup(service, user_id="alice", email="alice@example.com"):
    return service.signup(UserSignup(user_id=user_id, email=email, password="secret"))


def test_signup_hashes_password(db, service, events):
    user = _signup(service)

    assert user.role == "user"
    stored = UserRepo(db).get_user("alice")
    assert stored.password != "secret"
    assert verify_password("secret", stored.password)
    events.user_event.assert_called_once_with("signup", "alice", "alice@example.com", "user")


def test_signup_duplicates(service):
    _signup(service)

    with pytest.raises(UserAlreadyExists):
        _signup(service, email="other@example.com")
    with pytest.raises(EmailInUse):
        _signup(service, user_id="bob")


def test_login_returns_token(service, events):
    _signup(service)

    token = service.login("alice", "secret").token

    identity = verify_token(token)
    assert identity.user_id == "alice"
    assert identity.role == "user"
    events.user_event.assert_called_with("login", "alice", "alice@example.com", "user")


@pytest.mark.parametrize("user_id,password", [("alice", "wrong"), ("ghost", "secret")])
def test_login_rejects_bad_credentials(service, user_id, password):
    _signup(service)

    with pytest.raises(AuthError) as exc:
        service.login(user_id, password)
    assert exc.value.message == "Invalid credentials"


def test_update_user(db, service):
    _signup(service)

    updated = service.update_user("alice", UserUpdate(email="new@example.com", password="changed"))

    assert updated.email == "new@example.com"
    assert verify_password("changed", UserRepo(db).get_user("alice").password)


def test_update_user_without_fields(service):
    _signup(service)

    with pytest.raises(ValidationError):
        service.update_user("alice", UserUpdate())


def test_admins_cannot_edit_admins(service):
    _signup(service)
    service.update_role("alice", "admin")

    with pytest.raises(ForbiddenError):
        service.update_user("alice", UserUpdate(password="x"))
    with pytest.raises(ForbiddenError):
        service.delete_user("alice")

    service.delete_user_any("alice")
    with pytest.raises(UserNotFound):
        service.delete_user_any("alice")


def test_update_role_rejects_unknown_role(service):
    _signup(service)

    with pytest.raises(ValidationError):
        service.update_role("alice", "superadmin")


def test_expired_token_is_rejected():
    token = generate_token("alice", "user", expires_in=timedelta(seconds=-1))

    with pytest.raises(AuthError):
        verify_token(token)


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"userId": "alice", "role": "admin"}, "not-the-secret", algorithm="HS256")

    with pytest.raises(AuthError):
        verify_token(token)

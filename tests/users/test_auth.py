from datetime import datetime, timedelta, timezone

import pytest

from staffing_backoffice.core.enums import Role
from staffing_backoffice.core.exceptions import AuthenticationError, AuthorizationError
from staffing_backoffice.users.service import AuthenticatedUser, TokenService


def test_login_returns_bearer_token(container, token_service):
    body = container.auth_service.login("admin", "admin123")

    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 300
    user = token_service.verify(body["access_token"])
    assert user.user_id == 1
    assert user.role == Role.ADMIN


@pytest.mark.parametrize("username,password", [("admin", "wrong"), ("nobody", "x"), ("gone", "gone123")])
def test_login_rejects_bad_credentials(container, username, password):
    with pytest.raises(AuthenticationError):
        container.auth_service.login(username, password)


def test_expired_token_is_rejected(token_service):
    user = AuthenticatedUser(user_id=2, full_name="Staff", role=Role.STAFF)
    token = token_service.issue(user, now=datetime.now(timezone.utc) - timedelta(minutes=10))

    with pytest.raises(AuthenticationError):
        token_service.verify(token)


def test_token_signed_with_other_key_is_rejected(token_service):
    user = AuthenticatedUser(user_id=2, full_name="Staff", role=Role.STAFF)
    token = TokenService("another-secret").issue(user)

    with pytest.raises(AuthenticationError):
        token_service.verify(token)


def test_require_admin(container):
    staff = AuthenticatedUser(user_id=2, full_name="Staff", role=Role.STAFF)

    with pytest.raises(AuthorizationError):
        container.auth_service.require_admin(staff)

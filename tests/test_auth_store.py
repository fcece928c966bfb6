from unittest.mock import MagicMock

import pytest

from tikerama.domain.schemas import RegisterIn
from tikerama.services.api_client import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    USER_KEY,
    ApiClient,
    ApiError,
)
from tikerama.services.auth_store import AUTH_STORAGE_KEY, AuthStore

USER = {
    "id": 12,
    "email": "awa.kone@example.ci",
    "username": "awa",
    "first_name": "Awa",
    "last_name": "Koné",
    "role": "organizer",
}

LOGIN_RESPONSE = {"message": "ok", "user": USER, "access": "acc-1", "refresh": "ref-1"}


@pytest.fixture
def api():
    return MagicMock(spec=ApiClient)


@pytest.fixture
def auth(api, local_store):
    return AuthStore(api, local_store)


def test_login_stores_identity_and_tokens(auth, api, local_store):
    api.post.return_value = LOGIN_RESPONSE

    auth.login("awa.kone@example.ci", "secret")

    api.post.assert_called_once_with("/auth/login/", {"email": "awa.kone@example.ci", "password": "secret"})
    assert auth.is_authenticated is True
    assert auth.user.first_name == "Awa"
    assert local_store.get_item(ACCESS_TOKEN_KEY) == "acc-1"
    assert local_store.get_item(REFRESH_TOKEN_KEY) == "ref-1"
    assert local_store.get_json(USER_KEY)["email"] == "awa.kone@example.ci"
    assert local_store.get_json(AUTH_STORAGE_KEY)["accessToken"] == "acc-1"
    assert auth.is_loading is False


def test_failed_login_records_error_and_reraises(auth, api):
    api.post.side_effect = ApiError("Identifiants invalides", 401)

    with pytest.raises(ApiError):
        auth.login("awa.kone@example.ci", "wrong")

    assert auth.error == "Identifiants invalides"
    assert auth.is_authenticated is False
    assert auth.is_loading is False


def test_register_defaults_username_and_confirmation(auth, api):
    auth.register(RegisterIn(email="awa.kone@example.ci", password="secret"))

    endpoint, payload = api.post.call_args.args
    assert endpoint == "/auth/register/"
    assert payload["username"] == "awa.kone"
    assert payload["password_confirm"] == "secret"
    assert payload["firstName"] == ""
    assert auth.otp_step is True


def test_failed_register_stays_out_of_otp_step(auth, api):
    api.post.side_effect = ApiError("email: déjà utilisé", 400)

    with pytest.raises(ApiError):
        auth.register(RegisterIn(email="awa.kone@example.ci", password="secret"))

    assert auth.otp_step is False
    assert auth.error == "email: déjà utilisé"


def test_verify_email_otp_signs_in(auth, api):
    auth.otp_step = True
    api.post.return_value = LOGIN_RESPONSE

    auth.verify_email_otp("awa.kone@example.ci", "123456")

    api.post.assert_called_once_with(
        "/auth/verify-otp/", {"email": "awa.kone@example.ci", "otp_code": "123456"}
    )
    assert auth.is_authenticated is True
    assert auth.otp_step is False


def test_request_email_otp(auth, api):
    auth.request_email_otp("awa.kone@example.ci")

    api.post.assert_called_once_with("/auth/send-otp/", {"email": "awa.kone@example.ci"})


def test_logout_clears_state_and_storage(auth, api, local_store):
    api.post.return_value = LOGIN_RESPONSE
    auth.login("awa.kone@example.ci", "secret")

    auth.logout()

    assert auth.user is None
    assert auth.is_authenticated is False
    for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY):
        assert local_store.get_item(key) is None


def test_check_auth_without_token_skips_backend(auth, api):
    auth.check_auth()

    assert auth.is_authenticated is False
    api.get.assert_not_called()


def test_check_auth_fetches_current_user(auth, api, local_store):
    local_store.set_item(ACCESS_TOKEN_KEY, "acc-1")
    api.get.return_value = USER

    auth.check_auth()

    api.get.assert_called_once_with("/auth/me/")
    assert auth.is_authenticated is True
    assert auth.user.role == "organizer"


def test_check_auth_failure_clears_tokens(auth, api, local_store):
    local_store.set_item(ACCESS_TOKEN_KEY, "acc-1")
    local_store.set_item(REFRESH_TOKEN_KEY, "ref-1")
    api.get.side_effect = ApiError("Token invalide", 401)

    auth.check_auth()

    assert auth.is_authenticated is False
    assert local_store.get_item(ACCESS_TOKEN_KEY) is None
    assert local_store.get_item(REFRESH_TOKEN_KEY) is None


def test_has_role(auth, api):
    assert auth.has_role("admin") is False

    api.post.return_value = LOGIN_RESPONSE
    auth.login("awa.kone@example.ci", "secret")

    assert auth.has_role("organizer") is True
    assert auth.has_role("admin") is False
    assert auth.has_role(["admin", "organizer"]) is True
    assert auth.has_role(["buyer"]) is False


def test_identity_rehydrates_without_being_authenticated(api, local_store):
    api.post.return_value = LOGIN_RESPONSE
    AuthStore(api, local_store).login("awa.kone@example.ci", "secret")

    reloaded = AuthStore(api, local_store)

    assert reloaded.user.email == "awa.kone@example.ci"
    assert reloaded.access_token == "acc-1"
    assert reloaded.is_authenticated is False


def test_forced_logout_from_client_clears_identity(auth, api):
    api.post.return_value = LOGIN_RESPONSE
    auth.login("awa.kone@example.ci", "secret")
    listener = api.add_logout_listener.call_args.args[0]

    listener()

    assert auth.user is None
    assert auth.is_authenticated is False

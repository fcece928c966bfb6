# tikerama/services/auth_store.py
import requests
from pydantic import ValidationError

from tikerama.domain.schemas import AuthOut, LoginResponse, RegisterIn, User
from tikerama.services import endpoints
from tikerama.services.api_client import (
    ApiClient,
    ApiError,
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    USER_KEY,
)
from tikerama.services.storage_service import StorageService
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)

AUTH_STORAGE_KEY = "tikerama-auth"


def _error_message(e: Exception, fallback: str) -> str:
    return str(e) or fallback


class AuthStore:
    """
    Identity of one storefront session.
    Tokens live in local storage (read by the ApiClient on every call);
    {user, accessToken, refreshToken} is also kept under tikerama-auth and
    rehydrated on construction. is_authenticated is only set by a login,
    an OTP verification or check_auth.
    """

    def __init__(self, api: ApiClient, storage: StorageService):
        self.api = api
        self.storage = storage

        self.user: User | None = None
        self.access_token: str | None = None
        self.refresh_token: str | None = None
        self.is_authenticated = False
        self.is_loading = False
        self.error: str | None = None
        self.otp_step = False

        self.api.add_logout_listener(self._clear_identity)
        self._hydrate()

    def _hydrate(self):
        saved = self.storage.get_json(AUTH_STORAGE_KEY)
        if not saved:
            return
        try:
            self.user = User.model_validate(saved["user"]) if saved.get("user") else None
        except ValidationError:
            logger.warning(f"Dropping unreadable user of session {self.storage.session_id}")
            self.user = None
        self.access_token = saved.get("accessToken")
        self.refresh_token = saved.get("refreshToken")

    def _persist(self):
        self.storage.set_json(
            AUTH_STORAGE_KEY,
            {
                "user": self.user.model_dump(mode="json", by_alias=True) if self.user else None,
                "accessToken": self.access_token,
                "refreshToken": self.refresh_token,
            },
        )

    def _clear_identity(self):
        self.user = None
        self.access_token = None
        self.refresh_token = None
        self.is_authenticated = False
        self.otp_step = False
        for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY):
            self.storage.remove_item(key)
        self._persist()

    def _apply_login(self, data) -> None:
        response = LoginResponse.model_validate(data)

        self.user = response.user
        self.access_token = response.access
        self.refresh_token = response.refresh
        self.is_authenticated = True
        self.otp_step = False

        self.storage.set_item(ACCESS_TOKEN_KEY, response.access)
        self.storage.set_item(REFRESH_TOKEN_KEY, response.refresh)
        self.storage.set_item(USER_KEY, response.user.model_dump_json(by_alias=True))
        self._persist()

        logger.info(f"User {response.user.id} ({response.user.role}) signed in")

    def _run(self, fallback: str, fn, *args):
        """Wraps a backend call: loading flag, error recorded, exception re-raised."""
        self.is_loading = True
        self.error = None
        try:
            return fn(*args)
        except (ApiError, requests.RequestException, ValidationError) as e:
            self.error = _error_message(e, fallback) if isinstance(e, ApiError) else fallback
            logger.warning(f"Auth operation failed: {e}")
            raise
        finally:
            self.is_loading = False

    #commands
    def register(self, data: RegisterIn) -> None:
        payload = {
            "email": data.email,
            "username": data.username or data.email.split("@")[0],
            "firstName": data.first_name or "",
            "lastName": data.last_name or "",
            "password": data.password,
            "password_confirm": data.password_confirm or data.password,
        }
        if data.phone:
            payload["phone"] = data.phone

        self._run("Erreur lors de l'inscription", self.api.post, endpoints.AUTH_REGISTER, payload)
        # the account is activated by an e-mail OTP
        self.otp_step = True

    def request_email_otp(self, email: str) -> None:
        self._run(
            "Impossible d'envoyer l'OTP par email",
            self.api.post,
            endpoints.AUTH_REQUEST_EMAIL_OTP,
            {"email": email},
        )

    def verify_email_otp(self, email: str, otp_code: str) -> None:
        def verify():
            self._apply_login(
                self.api.post(endpoints.AUTH_VERIFY_EMAIL_OTP, {"email": email, "otp_code": otp_code})
            )

        self._run("OTP invalide ou expiré", verify)

    def login(self, email: str, password: str) -> None:
        def login():
            self._apply_login(self.api.post(endpoints.AUTH_LOGIN, {"email": email, "password": password}))

        self._run("Échec de connexion", login)

    def logout(self) -> None:
        self._clear_identity()
        self.set_error(None)
        logger.info(f"Session {self.storage.session_id} signed out")

    def set_error(self, error: str | None) -> None:
        self.error = error

    def check_auth(self) -> None:
        access_token = self.storage.get_item(ACCESS_TOKEN_KEY)
        if not access_token:
            self.is_authenticated = False
            self.user = None
            return

        try:
            user = User.model_validate(self.api.get(endpoints.AUTH_ME))
        except (ApiError, requests.RequestException, ValidationError) as e:
            logger.info(f"Session {self.storage.session_id} no longer authenticated: {e}")
            self._clear_identity()
            return

        # a 401 may have refreshed the token while fetching /auth/me/
        self.user = user
        self.access_token = self.storage.get_item(ACCESS_TOKEN_KEY)
        self.is_authenticated = True
        self._persist()

    #queries
    def has_role(self, role) -> bool:
        if not self.user:
            return False
        if isinstance(role, (list, tuple, set, frozenset)):
            return self.user.role in role
        return self.user.role == role

    def snapshot(self) -> AuthOut:
        return AuthOut(
            user=self.user,
            is_authenticated=self.is_authenticated,
            otp_step=self.otp_step,
            error=self.error,
        )

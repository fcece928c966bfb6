# tikerama/services/api_client.py
import requests

from tikerama.services import endpoints
from tikerama.services.storage_service import StorageService
from tikerama.utils.retry import http_retry
from tikerama.utils.settings import API_URL, API_TIMEOUT_SECONDS
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"
USER_KEY = "user"

DEFAULT_ERROR_MESSAGE = "Une erreur est survenue"


class ApiError(Exception):
    """Non-2xx answer of the backend, carrying the user-facing message."""

    def __init__(self, message: str, status_code: int, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def extract_error_message(data) -> str:
    if not isinstance(data, dict):
        return DEFAULT_ERROR_MESSAGE

    for field in ("error", "message", "detail"):
        if data.get(field):
            return str(data[field])

    #field validation errors: {"email": ["Invalid"], "phone": "Required"}
    errors = []
    for key, value in data.items():
        if isinstance(value, list):
            errors.append(f"{key}: {', '.join(str(v) for v in value)}")
        elif isinstance(value, str):
            errors.append(f"{key}: {value}")

    return " | ".join(errors) if errors else DEFAULT_ERROR_MESSAGE


def rewind_files(files) -> None:
    """Multipart bodies are consumed by a send; put file objects back at the start."""
    for value in (files or {}).values():
        fileobj = value[1] if isinstance(value, tuple) else value
        if hasattr(fileobj, "seek"):
            fileobj.seek(0)


class ApiClient:
    """
    JSON client of the Tikerama backend for one storefront session.
    - bearer token read from the session's local storage
    - 401 -> a single refresh + retry, otherwise forced logout
    - transport errors retried with backoff, HTTP errors never
    """

    def __init__(
        self,
        storage: StorageService,
        base_url: str | None = None,
        timeout: float = API_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.storage = storage
        self.base_url = (base_url or API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._logout_listeners = []

    def add_logout_listener(self, listener) -> None:
        self._logout_listeners.append(listener)

    @http_retry()
    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        logger.info(f"ApiClient {method} {url}")
        # retried and post-refresh sends upload the files from the start again
        rewind_files(kwargs.get("files"))
        return self.session.request(method, url, timeout=self.timeout, **kwargs)

    def request(self, method: str, endpoint: str, data=None, params=None, files=None):
        if not endpoint:
            raise ValueError("L'endpoint API est manquant !")

        url = f"{self.base_url}{endpoint}"
        kwargs = {"params": params}

        # multipart: requests sets its own content type with the boundary
        if files is not None:
            kwargs["data"] = data
            kwargs["files"] = files
            headers = {}
        else:
            if data is not None:
                kwargs["json"] = data
            headers = {"Content-Type": "application/json"}

        token = self.storage.get_item(ACCESS_TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        response = self._send(method, url, headers=headers, **kwargs)

        if response.status_code == 401:
            refresh_token = self.storage.get_item(REFRESH_TOKEN_KEY)
            if refresh_token and self._refresh_access_token(refresh_token):
                headers["Authorization"] = f"Bearer {self.storage.get_item(ACCESS_TOKEN_KEY)}"
                retry_response = self._send(method, url, headers=headers, **kwargs)
                return self._handle_response(retry_response)

            self._force_logout()

        return self._handle_response(response)

    def _handle_response(self, response: requests.Response):
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                data = response.json()
            except ValueError:
                data = response.text
        else:
            data = response.text

        if not response.ok:
            message = extract_error_message(data)
            logger.error(f"API error ({response.status_code}): {message}")
            raise ApiError(message, response.status_code, data)

        logger.info(f"API success ({response.status_code})")
        return data

    def _refresh_access_token(self, refresh_token: str) -> bool:
        try:
            response = self._send(
                "POST",
                f"{self.base_url}{endpoints.AUTH_REFRESH}",
                headers={"Content-Type": "application/json"},
                json={"refresh": refresh_token},
            )
        except requests.RequestException as e:
            logger.warning(f"Token refresh failed: {e}")
            return False

        if not response.ok:
            logger.warning(f"Token refresh rejected ({response.status_code})")
            return False

        try:
            access = response.json()["access"]
        except (ValueError, KeyError, TypeError):
            logger.warning("Token refresh answered without an access token")
            return False

        self.storage.set_item(ACCESS_TOKEN_KEY, access)
        return True

    def _force_logout(self) -> None:
        logger.info(f"Forced logout of session {self.storage.session_id}")
        for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY):
            self.storage.remove_item(key)
        for listener in self._logout_listeners:
            listener()

    def get(self, endpoint: str, params=None):
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, data=None, files=None):
        return self.request("POST", endpoint, data=data, files=files)

    def patch(self, endpoint: str, data=None, files=None):
        return self.request("PATCH", endpoint, data=data, files=files)

    def put(self, endpoint: str, data=None):
        return self.request("PUT", endpoint, data=data)

    def delete(self, endpoint: str):
        return self.request("DELETE", endpoint)

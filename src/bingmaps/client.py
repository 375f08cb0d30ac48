from __future__ import annotations
import logging
import os
import ssl
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Type, TypeVar, Union

import requests
from pydantic import BaseModel, SecretStr, ValidationError
from requests.adapters import HTTPAdapter

from .encoding import encode_params
from .errors import BingMapsError, RequestError
from .models import ClientConfig

LOGGER = logging.getLogger(__name__)

CANDIDATE_ENV_KEYS = [
    "BING_MAPS_KEY",
    "BINGMAPS_KEY",
    "BING_MAPS_API_KEY",
]

# Set to "1" by Bing Maps when its servers are overloaded
OVERLOAD_HEADER = "X-MS-BM-WS-INFO"
OVERLOAD_VALUE = "1"

M = TypeVar("M", bound=BaseModel)


# HTTP transport protocols
class HTTPResponse(Protocol):
    status_code: int

    def header_values(self, name: str) -> List[str]:
        ...

    def read(self) -> bytes:
        ...

    def close(self) -> None:
        ...


class HTTPClient(Protocol):
    def get(self, url: str, timeout: Optional[float]) -> HTTPResponse:
        ...


class RequestsResponse:
    """Adapts a streamed ``requests.Response`` to ``HTTPResponse``."""

    def __init__(self, response: requests.Response) -> None:
        self._response = response
        self.status_code = response.status_code

    def header_values(self, name: str) -> List[str]:
        # urllib3 keeps repeated headers apart; requests folds them with ", "
        raw_headers = getattr(self._response.raw, "headers", None)
        if raw_headers is not None and hasattr(raw_headers, "getlist"):
            return [str(value) for value in raw_headers.getlist(name)]
        folded = self._response.headers.get(name)
        if folded is None:
            return []
        return [value.strip() for value in folded.split(",")]

    def read(self) -> bytes:
        return self._response.content

    def close(self) -> None:
        self._response.close()


class _SSLContextAdapter(HTTPAdapter):
    """HTTPS adapter that negotiates TLS with a caller-supplied SSLContext."""

    def __init__(self, ssl_context: ssl.SSLContext, **kwargs: Any) -> None:
        self._ssl_context = ssl_context
        super().__init__(**kwargs)

    def init_poolmanager(self, *args: Any, **kwargs: Any) -> None:
        kwargs["ssl_context"] = self._ssl_context
        super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, *args: Any, **kwargs: Any):
        kwargs["ssl_context"] = self._ssl_context
        return super().proxy_manager_for(*args, **kwargs)


class RequestsHTTPClient:
    """``HTTPClient`` backed by one pooled ``requests.Session``.

    Args:
        verify: Verify server certificates (True), skip (False), or use the
            CA bundle at this path.
        cert: Client certificate path.
        ssl_context: Negotiate TLS with this context instead of the default
            one built by urllib3.
    """

    def __init__(
        self,
        *,
        verify: Union[bool, str] = True,
        cert: Optional[str] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self._verify = verify
        self._cert = cert
        self._ssl_context = ssl_context
        self._session: Optional[requests.Session] = None
        self._session_lock = threading.Lock()

    def _get_session(self) -> requests.Session:
        with self._session_lock:
            if self._session is None:
                session = requests.Session()
                session.verify = self._verify
                if self._cert:
                    session.cert = self._cert
                if self._ssl_context is not None:
                    session.mount("https://", _SSLContextAdapter(self._ssl_context))
                self._session = session
            return self._session

    def close(self) -> None:
        with self._session_lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def __enter__(self) -> "RequestsHTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def get(self, url: str, timeout: Optional[float]) -> HTTPResponse:
        # Body is streamed so read failures surface separately from send failures
        response = self._get_session().get(url, timeout=timeout, stream=True)
        return RequestsResponse(response)


# Read environment file
def _read_env_file(env_path: Path) -> Dict[str, str]:
    if not env_path.exists():
        return {}
    values: Dict[str, str] = {}
    text = env_path.read_text(encoding="utf-8-sig")
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def load_api_key(explicit_key: Optional[str] = None) -> str:
    """Resolve the API key from a parameter, the environment, or ``./.env``."""
    if explicit_key:
        return explicit_key
    for key in CANDIDATE_ENV_KEYS:
        value = os.environ.get(key)
        if value:
            return value
    env_values = _read_env_file(Path.cwd() / ".env")
    for key in CANDIDATE_ENV_KEYS:
        value = env_values.get(key)
        if value:
            return value
    raise RuntimeError(
        "Missing API key. Provide via parameter, environment variable, or .env file."
    )


class _Credentials(BaseModel):
    api_key: SecretStr

    model_config = {"frozen": True}


def _redact(query: str) -> str:
    head, sep, _ = query.rpartition("key=")
    return f"{head}{sep}***" if sep else query


def should_wait(response: HTTPResponse) -> bool:
    """True if any value of the overload header is exactly "1"."""
    # Any occurrence counts, not only the last header line
    return any(value == OVERLOAD_VALUE for value in response.header_values(OVERLOAD_HEADER))


class Client:
    """Bing Maps REST client.

    One instance is meant to be created per application and shared between
    threads. The API key is fixed at construction and cannot be reassigned.

    Example:
        >>> client = Client(api_key="your-key")
        >>> envelope = client.get("/Locations", {"q": "Redmond"}, ResponseEnvelope[Location])
    """

    __slots__ = ("_credentials", "_config", "_http_client", "_owns_http_client")

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        self._credentials = _Credentials(api_key=load_api_key(api_key))
        self._config = config if config is not None else ClientConfig()
        # Only close transports created here
        self._owns_http_client = http_client is None
        self._http_client = http_client or RequestsHTTPClient(
            verify=self._config.verify,
            cert=self._config.cert,
            ssl_context=self._config.ssl_context,
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "_credentials" and hasattr(self, "_credentials"):
            raise AttributeError("the API key of a Client cannot be changed")
        super().__setattr__(name, value)

    def close(self) -> None:
        if self._owns_http_client and hasattr(self._http_client, "close"):
            self._http_client.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def api_key(self) -> str:
        return self._credentials.api_key.get_secret_value()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def url(self, path: str, params: Dict[str, Any]) -> str:
        """Build the request URL for a resource path and its parameters."""
        query = encode_params(params)
        return f"{self._config.base_url}/{path.lstrip('/')}?{query}"

    def get(self, path: str, params: Dict[str, Any], response_model: Type[M]) -> M:
        """Fetch one resource and decode it.

        ``params`` is updated in place: ``key`` is set to this client's API
        key, replacing any value the caller put there, and moved last.

        Args:
            path: Resource path below the REST base URL, including any
                path-embedded parameters (e.g. "/Locations/47.64054,-122.12934").
            params: Query parameters; None values are omitted.
            response_model: Pydantic model the success body is decoded into.

        Returns:
            The decoded response body.

        Raises:
            BingMapsError: ``CONVERSION`` if a parameter cannot be encoded
                (before any request is sent) or the body does not match
                ``response_model``; ``TRANSPORT`` if the exchange fails;
                ``BODY_READ`` if the body cannot be read; ``SERVICE`` for any
                status outside 200-299.
        """
        params.pop("key", None)
        params["key"] = self.api_key
        url = self.url(path, params)
        LOGGER.debug("GET %s", _redact(url))
        return self._send(url, response_model)

    def _send(self, url: str, response_model: Type[M]) -> M:
        try:
            response = self._http_client.get(url, timeout=self._config.timeout)
        except requests.RequestException as exc:
            LOGGER.warning("Request to Bing Maps failed: %s", exc)
            raise BingMapsError.transport(exc) from exc

        try:
            try:
                body = response.read()
            except (requests.RequestException, OSError) as exc:
                LOGGER.warning("Failed to read Bing Maps response body: %s", exc)
                raise BingMapsError.body_read(exc) from exc

            status = response.status_code
            if not 200 <= status <= 299:
                error = RequestError(http_status=status, should_wait=should_wait(response))
                LOGGER.warning(
                    "Bing Maps returned HTTP %s (should_wait=%s)", status, error.should_wait
                )
                raise BingMapsError.service(error)
        finally:
            response.close()

        try:
            return response_model.model_validate_json(body)
        except ValidationError as exc:
            LOGGER.error("Unexpected Bing Maps response for %s: %s", response_model.__name__, exc)
            raise BingMapsError.conversion(exc) from exc


__all__ = [
    "Client",
    "HTTPClient",
    "HTTPResponse",
    "RequestsHTTPClient",
    "RequestsResponse",
    "load_api_key",
    "should_wait",
    "CANDIDATE_ENV_KEYS",
    "OVERLOAD_HEADER",
]

"""
HTTP access layer — every remote call goes through ApiClient.request().

Connection pooling is kept; retries are not. The adapter is mounted with
Retry(total=0) so a failed call surfaces immediately and the caller decides
what to do next. Failures are classified into RateLimited / ApiError /
TransportError (see errors.py).
"""

import os
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import API_TIMEOUT_READ, API_TIMEOUT_WRITE
from .config import log
from .errors import ApiError, RateLimited, TransportError

_retry_strategy = Retry(total=0, raise_on_status=False)


def _get_ca_bundle():
    """Get the CA bundle path. Priority: env var → certifi → system default."""
    env_ca = os.environ.get('REQUESTS_CA_BUNDLE') or os.environ.get('SSL_CERT_FILE')
    if env_ca and os.path.isfile(env_ca):
        return env_ca
    try:
        import certifi
        return certifi.where()
    except ImportError:
        return True


def create_session():
    """Create a new requests.Session with connection pooling and SSL, no retries."""
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=1,
        pool_maxsize=4,
        max_retries=_retry_strategy,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = _get_ca_bundle()
    return session


def reset_session(session):
    """Close and recreate the HTTP session (fixes stale connections)."""
    try:
        session.close()
    except Exception as e:
        log.debug("Ignoring error while closing HTTP session: %s", e)
    return create_session()


def _error_message(resp):
    """Server-provided message when the body is JSON with one, else '<status> <reason>'."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"API Error: {resp.status_code} {resp.reason or ''}".rstrip()


class ApiClient:
    """
    Thin wrapper over a requests.Session bound to one API origin.

    token_provider → zero-arg callable returning the bearer token or None
    rate_limit     → object with notify(); called on every 429
    """

    def __init__(self, base_url, token_provider=lambda: None, rate_limit=None, session=None):
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._rate_limit = rate_limit
        self.http = session if session is not None else create_session()

    def reset(self):
        self.http = reset_session(self.http)

    def _headers(self):
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, path, method="GET", body=None, params=None):
        """Perform one call. Returns parsed JSON, or None for 204 / empty bodies."""
        method = method.upper()
        url = f"{self.base_url}{path}"
        timeout = API_TIMEOUT_READ if method == "GET" else API_TIMEOUT_WRITE
        kwargs = {"headers": self._headers(), "timeout": timeout}
        if params:
            kwargs["params"] = params
        if body is not None:
            kwargs["json"] = body

        try:
            resp = self.http.request(method, url, **kwargs)
        except requests.RequestException as e:
            log.warning("API request failed for %s %s: %s", method, path, e)
            raise TransportError(f"Network error calling {method} {path}: {e}") from e

        if resp.status_code == 429:
            log.error("API rate limited (%s %s): Too many requests", method, path)
            if self._rate_limit is not None:
                self._rate_limit.notify()
            raise RateLimited()

        if not 200 <= resp.status_code < 300:
            message = _error_message(resp)
            log.warning("API error (%s %s): HTTP %d — %s", method, path, resp.status_code, message)
            raise ApiError(message, status_code=resp.status_code)

        if resp.status_code == 204 or not resp.content:
            return None

        try:
            return resp.json()
        except ValueError as e:
            log.warning("Unparseable response for %s %s: %s", method, path, resp.text[:200])
            raise TransportError(f"Invalid JSON from {method} {path}") from e

    def get(self, path, params=None):
        return self.request(path, "GET", params=params)

    def post(self, path, body=None):
        return self.request(path, "POST", body=body)

    def put(self, path, body=None):
        return self.request(path, "PUT", body=body)

    def delete(self, path):
        return self.request(path, "DELETE")

    # ─── Health ──────────────────────────────────────────────────

    def health(self):
        return self.get("/health")

    def health_details(self):
        return self.get("/health/details")

"""
Session store: who is logged in, and where that fact is kept.

Credential checking is pluggable (CredentialVerifier). The bundled
StaticCredentialVerifier holds the two demo accounts; a deployment backed by
a real identity provider supplies its own verify().
"""

import json
import secrets
import threading
import time
from datetime import datetime, timezone, timedelta

from .constants import (
    SESSION_TTL_DAYS, TOKEN_KEY, USER_KEY, EXPIRY_KEY, SESSION_KEYS,
    LOGIN_BAD_CREDENTIALS, LOGIN_TRANSIENT_FAILURE,
)
from .config import log
from .models import Identity, Session


# ─── Credential verification ─────────────────────────────────────

class CredentialVerifier:
    def verify(self, identifier, secret):
        """Return the Identity for a matching pair, else None."""
        raise NotImplementedError


DEMO_ACCOUNTS = (
    {"id": 1, "email": "admin@example.com", "password": "admin123", "name": "Admin User", "role": "admin"},
    {"id": 2, "email": "user@example.com", "password": "user123", "name": "Regular User", "role": "user"},
)


class StaticCredentialVerifier(CredentialVerifier):
    def __init__(self, accounts=DEMO_ACCOUNTS):
        self._accounts = list(accounts)

    def verify(self, identifier, secret):
        for account in self._accounts:
            if account["email"] == identifier and secrets.compare_digest(account["password"], secret or ""):
                # Password never leaves this method.
                return Identity(account["id"], account["email"], account["name"], account["role"])
        return None


# ─── Expiry encoding ─────────────────────────────────────────────

def _format_expiry(ts):
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_expiry(raw):
    return datetime.fromisoformat(raw.replace("Z", "+00:00")).timestamp()


# ─── Session store ───────────────────────────────────────────────

class SessionStore:
    """
    Single source of truth for the current session.

    login/logout/restore are serialized; the last caller wins. While
    `is_loading` is True the identity must not be treated as settled.
    """

    def __init__(self, verifier, durable, ephemeral, clock=time.time):
        self._verifier = verifier
        self._durable = durable
        self._ephemeral = ephemeral
        self._clock = clock
        self._lock = threading.RLock()
        self._session = None
        self.is_loading = False
        self.error = None

    # ── Derived state ─────────────────────────────────────────

    @property
    def session(self):
        with self._lock:
            if self._session is not None and self._session.is_expired(self._clock()):
                log.info("Session for %s expired", self._session.identity.email)
                self._clear_storage()
                self._session = None
            return self._session

    @property
    def user(self):
        session = self.session
        return session.identity if session else None

    @property
    def token(self):
        session = self.session
        return session.token if session else None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    # ── Lifecycle ─────────────────────────────────────────────

    def restore(self) -> bool:
        """Load a stored session, if any. Returns True when one is active."""
        with self._lock:
            self.is_loading = True
            try:
                self._session = self._read_stored()
            finally:
                self.is_loading = False
            if self._session:
                log.info("Restored %s session for %s",
                         "durable" if self._session.durable else "ephemeral",
                         self._session.identity.email)
            return self._session is not None

    def login(self, identifier, secret, remember=False) -> bool:
        with self._lock:
            self.is_loading = True
            self.error = None
            try:
                try:
                    identity = self._verifier.verify(identifier, secret)
                except Exception as e:
                    log.error("Login error for %s: %s", identifier, e, exc_info=True)
                    self.error = LOGIN_TRANSIENT_FAILURE
                    return False

                if identity is None:
                    log.info("Login rejected for %s", identifier)
                    self.error = LOGIN_BAD_CREDENTIALS
                    return False

                session = self._mint(identity, remember)
                self._clear_storage()
                self._persist(session)
                self._session = session
                log.info("Logged in %s (%s, remember=%s)", identity.email, identity.role, remember)
                return True
            finally:
                self.is_loading = False

    def logout(self):
        with self._lock:
            if self._session:
                log.info("Logged out %s", self._session.identity.email)
            self._clear_storage()
            self._session = None
            self.error = None

    # ── Internals ─────────────────────────────────────────────

    def _mint(self, identity, remember):
        token = f"demo-token-{secrets.token_hex(16)}"
        if remember:
            expires = self._clock() + timedelta(days=SESSION_TTL_DAYS).total_seconds()
            return Session(identity, token, expires_at=expires, durable=True)
        return Session(identity, token, durable=False)

    def _persist(self, session):
        store = self._durable if session.durable else self._ephemeral
        store.set(TOKEN_KEY, session.token)
        store.set(USER_KEY, json.dumps(session.identity.to_dict()))
        if session.expires_at is not None:
            store.set(EXPIRY_KEY, _format_expiry(session.expires_at))

    def _read_stored(self):
        for store, durable in ((self._durable, True), (self._ephemeral, False)):
            token = store.get(TOKEN_KEY)
            if not token:
                continue
            try:
                identity = Identity.from_dict(json.loads(store.get(USER_KEY) or ""))
                raw_expiry = store.get(EXPIRY_KEY)
                expires_at = _parse_expiry(raw_expiry) if raw_expiry else None
            except (ValueError, KeyError, TypeError) as e:
                log.warning("Discarding malformed stored session: %s", e)
                self._clear_storage()
                return None

            session = Session(identity, token, expires_at=expires_at, durable=durable)
            if session.is_expired(self._clock()):
                log.info("Stored session for %s expired — clearing", identity.email)
                self._clear_storage()
                return None
            return session
        return None

    def _clear_storage(self):
        for store in (self._durable, self._ephemeral):
            for key in SESSION_KEYS:
                store.remove(key)

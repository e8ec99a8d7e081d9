"""OAuth client-credentials token provider for the Camunda Console API.

One ``TokenProvider`` is shared by every reconciliation worker in the process.
Tokens are cached per credential fingerprint and refreshed shortly before they
expire, so handlers can call ``get_or_create`` on every tick without
re-authenticating each time.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Callable

import httpx

from . import metrics
from .constants import DEFAULT_AUDIENCE, DEFAULT_TOKEN_URL
from .errors import AuthenticationError, MalformedCredentialsError
from .utils.errors import sanitize_error_message

logger = logging.getLogger(__name__)

_REFRESH_SKEW_SECONDS = float(os.getenv("CAMUNDA_TOKEN_REFRESH_SKEW_SECONDS", "60"))
_DEFAULT_TTL_SECONDS = float(os.getenv("CAMUNDA_TOKEN_DEFAULT_TTL_SECONDS", "3600"))
_API_TIMEOUT_SECONDS = float(os.getenv("CAMUNDA_API_TIMEOUT_SECONDS", "30"))


@dataclass(frozen=True)
class Credentials:
    """Client credentials parsed from a ProviderConfig credential source."""

    client_id: str
    client_secret: str
    token_url: str = DEFAULT_TOKEN_URL
    audience: str = DEFAULT_AUDIENCE

    def fingerprint(self) -> str:
        raw = "\x00".join((self.client_id, self.client_secret, self.token_url, self.audience))
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def __repr__(self) -> str:
        return (
            f"Credentials(client_id={self.client_id!r}, client_secret='***', "
            f"token_url={self.token_url!r}, audience={self.audience!r})"
        )


@dataclass(frozen=True)
class CachedToken:
    """An issued access token and where it came from."""

    access_token: str
    audience: str
    token_url: str
    issued_at: float
    expires_at: float

    def is_fresh(self, now: float, skew: float) -> bool:
        return now < self.expires_at - skew


def parse_credentials(data: bytes) -> Credentials:
    """Parse a JSON credential document.

    Raises:
        MalformedCredentialsError: If the document is not a JSON object of strings
            or lacks client_id/client_secret
    """
    try:
        doc = json.loads(data)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedCredentialsError("credentials are not valid JSON", cause=e) from e

    if not isinstance(doc, dict) or not all(isinstance(v, str) for v in doc.values()):
        raise MalformedCredentialsError("credentials must be a JSON object of string values")

    client_id = doc.get("client_id")
    client_secret = doc.get("client_secret")
    if not client_id or not client_secret:
        raise MalformedCredentialsError("credentials require client_id and client_secret")

    return Credentials(
        client_id=client_id,
        client_secret=client_secret,
        token_url=doc.get("token_url") or DEFAULT_TOKEN_URL,
        audience=doc.get("audience") or DEFAULT_AUDIENCE,
    )


class TokenProvider:
    """Thread-safe, time-bounded cache of Console API access tokens."""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        refresh_skew: float = _REFRESH_SKEW_SECONDS,
        default_ttl: float = _DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._http_client = http_client
        self.refresh_skew = refresh_skew
        self.default_ttl = default_ttl
        self._clock = clock
        self._tokens: dict[str, CachedToken] = {}
        self._lock = threading.Lock()

    def get_or_create(self, credential_bytes: bytes) -> CachedToken:
        """Return a fresh token for the given credentials, exchanging if needed.

        Raises:
            MalformedCredentialsError: If the credential bytes cannot be parsed
            AuthenticationError: If the token exchange fails
        """
        creds = parse_credentials(credential_bytes)
        key = creds.fingerprint()

        with self._lock:
            cached = self._tokens.get(key)
        if cached is not None and cached.is_fresh(self._clock(), self.refresh_skew):
            return cached

        # The exchange runs unlocked; concurrent first callers may each fetch
        # and whichever finishes last is kept.
        token = self._exchange(creds)
        with self._lock:
            self._tokens[key] = token
        return token

    def invalidate(self, credential_bytes: bytes | None = None) -> None:
        """Forget one cached token, or all of them."""
        with self._lock:
            if credential_bytes is None:
                self._tokens.clear()
                return
            try:
                key = parse_credentials(credential_bytes).fingerprint()
            except MalformedCredentialsError:
                return
            self._tokens.pop(key, None)

    def _exchange(self, creds: Credentials) -> CachedToken:
        form = {
            "grant_type": "client_credentials",
            "client_id": creds.client_id,
            "client_secret": creds.client_secret,
            "audience": creds.audience,
        }
        issued_at = self._clock()
        try:
            if self._http_client is not None:
                response = self._http_client.post(creds.token_url, data=form)
            else:
                with httpx.Client(timeout=httpx.Timeout(_API_TIMEOUT_SECONDS)) as http:
                    response = http.post(creds.token_url, data=form)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            metrics.token_exchange_total.labels(result="rejected").inc()
            logger.error(
                f"Token exchange rejected with status {e.response.status_code}: "
                f"{sanitize_error_message(e.response.text)}"
            )
            raise AuthenticationError(
                f"unable to fetch token: token endpoint returned {e.response.status_code}", cause=e
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            metrics.token_exchange_total.labels(result="error").inc()
            logger.error(f"Token exchange failed: {sanitize_error_message(str(e))}")
            raise AuthenticationError(f"unable to fetch token: {sanitize_error_message(str(e))}", cause=e) from e

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            metrics.token_exchange_total.labels(result="error").inc()
            raise AuthenticationError("unable to fetch token: response has no access_token")

        expires_in = payload.get("expires_in")
        try:
            ttl = float(expires_in) if expires_in is not None else self.default_ttl
        except (TypeError, ValueError):
            ttl = self.default_ttl

        metrics.token_exchange_total.labels(result="success").inc()
        logger.info(f"Fetched access token for audience {creds.audience} (expires in {int(ttl)}s)")
        return CachedToken(
            access_token=access_token,
            audience=creds.audience,
            token_url=creds.token_url,
            issued_at=issued_at,
            expires_at=issued_at + ttl,
        )


_default_provider: TokenProvider | None = None
_default_lock = threading.Lock()


def get_token_provider() -> TokenProvider:
    """Return the process-wide token provider used by the handlers."""
    global _default_provider
    with _default_lock:
        if _default_provider is None:
            _default_provider = TokenProvider()
        return _default_provider

"""OAuth client-credentials token cache for the USPS APIs."""
import threading
import time
from typing import Callable, Optional

import requests

from address_verifier.core.config import DEFAULT_TOKEN_TTL, TOKEN_EXPIRY_SKEW
from address_verifier.core.errors import AuthError
from address_verifier.core.http import fetch_json, new_session
from address_verifier.core.models import BearerToken
from address_verifier.utils.logging import log_structured


class TokenCache:
    """Memoizes a bearer token and refreshes it shortly before expiry."""

    def __init__(
        self,
        oauth_url: str,
        client_id: Optional[str],
        client_secret: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.time,
        skew: float = TOKEN_EXPIRY_SKEW
    ):
        """
        Initialize token cache.

        Args:
            oauth_url: Token endpoint accepting a client-credentials grant
            client_id: OAuth client id
            client_secret: OAuth client secret
            session: requests session (a new one is created if omitted)
            timeout: Per-request timeout in seconds
            clock: Returns the current epoch time; injectable for tests
            skew: Seconds before expiry at which the token is refreshed
        """
        self.oauth_url = oauth_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.session = session or new_session()
        self.timeout = timeout
        self.clock = clock
        self.skew = skew
        self.fetch_count = 0
        self._token: Optional[BearerToken] = None
        self._lock = threading.Lock()

    def acquire(self) -> BearerToken:
        """
        Return a bearer token that is not about to expire.

        Raises:
            AuthError: The token endpoint failed or returned no access_token
        """
        token = self._token
        if token is not None and token.is_fresh(self.clock(), self.skew):
            return token

        with self._lock:
            # Another thread may have refreshed while we waited
            token = self._token
            if token is not None and token.is_fresh(self.clock(), self.skew):
                return token
            self._token = self._fetch()
            return self._token

    def invalidate(self):
        """Drop the cached token so the next acquire() fetches a new one."""
        with self._lock:
            self._token = None

    def _fetch(self) -> BearerToken:
        self.fetch_count += 1
        try:
            payload = fetch_json(
                self.session,
                "POST",
                self.oauth_url,
                AuthError,
                timeout=self.timeout,
                json={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "client_credentials",
                },
            )
        except AuthError as e:
            log_structured("error", "USPS OAuth failed", stage=e.stage, status=e.status, body=e.body)
            raise

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            log_structured("error", "USPS OAuth returned no access_token", stage="oauth")
            raise AuthError(status=None, body="access_token missing from OAuth response", url=self.oauth_url)

        try:
            ttl = float(payload.get("expires_in") or DEFAULT_TOKEN_TTL)
        except (TypeError, ValueError):
            ttl = DEFAULT_TOKEN_TTL

        log_structured("info", "USPS OAuth token refreshed", expires_in=ttl)
        return BearerToken(value=str(access_token), expires_at=self.clock() + ttl)

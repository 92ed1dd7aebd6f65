"""HERE Geocoding & Search v7 client."""
from typing import Any, Dict, Optional

import requests

from address_verifier.core.errors import GeocodeError
from address_verifier.core.http import fetch_json, new_session
from address_verifier.utils.logging import log_structured


class HereGeocoder:
    """Free-text geocoding against the HERE /geocode endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key
        self.url = url
        self.session = session or new_session()
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def search(self, line: str, limit: int = 1) -> Dict[str, Any]:
        """
        Geocode one address line.

        Args:
            line: Freeform address line
            limit: Maximum number of items requested

        Returns:
            Raw HERE response (``items`` list)

        Raises:
            GeocodeError: Missing API key, upstream failure or timeout
        """
        if not self.api_key:
            raise GeocodeError(status=None, body="HERE API key not configured")

        try:
            return fetch_json(
                self.session,
                "GET",
                self.url,
                GeocodeError,
                timeout=self.timeout,
                params={"q": line, "apiKey": self.api_key, "limit": limit, "in": "countryCode:USA"},
            )
        except GeocodeError as e:
            log_structured("error", "HERE geocode failed", stage=e.stage, status=e.status)
            raise


def first_item(raw: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    items = raw.get("items") if isinstance(raw, dict) else None
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None

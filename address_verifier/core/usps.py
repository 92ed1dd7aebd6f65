"""USPS Addresses v3 client: ZIP city/state lookup and address standardization."""
from typing import Any, Dict, Optional

import requests

from address_verifier.core.errors import CityStateError, StandardizationError
from address_verifier.core.http import fetch_json, new_session
from address_verifier.core.models import BearerToken, NormalizedQuery
from address_verifier.utils.logging import log_error, log_structured


class USPSClient:
    """Bearer-authorized calls against the USPS Addresses API."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or new_session()
        self.timeout = timeout

    @staticmethod
    def _auth(token: BearerToken) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def city_state(self, zip_code: str, token: BearerToken) -> Dict[str, Any]:
        """
        Look up the city and state for a ZIP code.

        Raises:
            CityStateError: The lookup failed for any reason
        """
        return fetch_json(
            self.session,
            "GET",
            f"{self.base_url}/city-state",
            CityStateError,
            timeout=self.timeout,
            params={"ZIPCode": zip_code},
            headers=self._auth(token),
        )

    def standardize(self, query: NormalizedQuery, token: BearerToken) -> Dict[str, Any]:
        """
        Standardize an address.

        All four query fields are always sent, empty when unset. The full
        response body is returned so callers can read ``address`` and
        ``additionalInfo`` themselves.

        Args:
            query: Normalized query with a non-empty street address
            token: Bearer token from the TokenCache

        Returns:
            Decoded USPS response

        Raises:
            StandardizationError: Non-2xx response, network failure or timeout
        """
        try:
            return fetch_json(
                self.session,
                "GET",
                f"{self.base_url}/address",
                StandardizationError,
                timeout=self.timeout,
                params=query.to_params(),
                headers=self._auth(token),
            )
        except StandardizationError as e:
            log_structured("error", "USPS standardization failed", stage=e.stage, status=e.status, body=e.body)
            raise


def enrich_query(query: NormalizedQuery, token: BearerToken, client: USPSClient) -> NormalizedQuery:
    """
    Fill a blank city/state from the ZIP code. Best effort.

    Any failure leaves the query unchanged; this step never aborts the
    pipeline.

    Args:
        query: Query from the builder or the retry form
        token: Bearer token
        client: USPS client

    Returns:
        The enriched query, or the original one
    """
    if not query.needs_city_state():
        return query

    try:
        found = client.city_state(query.zip_code, token)
    except CityStateError as e:
        log_structured("warning", "USPS city-state lookup failed", stage=e.stage, status=e.status)
        return query
    except Exception as e:
        log_error(e, {"module": "usps", "function": "enrich_query", "zip_code": query.zip_code})
        return query

    if not isinstance(found, dict):
        return query
    city = found.get("city")
    state = found.get("state")
    return query.with_city_state(
        city if isinstance(city, str) else "",
        state if isinstance(state, str) else "",
    )


def summarize_standardized(result: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Pick the display fields out of a standardization response."""
    result = result or {}
    address = result.get("address") or {}
    info = result.get("additionalInfo") or {}
    zip_code = address.get("ZIPCode") or ""
    if address.get("ZIPPlus4"):
        zip_code = f"{zip_code}-{address['ZIPPlus4']}"
    line1 = ", ".join(
        part for part in (address.get("streetAddress"), address.get("city"), address.get("state")) if part
    )
    return {
        "line1": line1,
        "zip": zip_code,
        "secondaryAddress": address.get("secondaryAddress") or "",
        "dpvConfirmation": info.get("DPVConfirmation"),
        "carrierRoute": info.get("carrierRoute"),
        "business": info.get("business"),
        "vacant": info.get("vacant"),
    }

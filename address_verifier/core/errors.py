"""Error taxonomy for the resolution pipeline, one class per stage."""
from typing import Any, Dict, Optional


class AddressVerifierError(Exception):
    """Base error for the address verifier."""


class UpstreamError(AddressVerifierError):
    """An external call failed; carries the upstream status and raw body."""

    stage = "upstream"

    def __init__(self, status: Optional[int] = None, body: Any = None, url: Optional[str] = None):
        self.status = status
        self.body = body
        self.url = url
        super().__init__(f"[{self.stage}] HTTP {status if status is not None else 'error'}")

    def to_dict(self) -> Dict[str, Any]:
        data = {"stage": self.stage, "status": self.status, "body": self.body}
        if self.url:
            data["url"] = self.url
        return data


class AuthError(UpstreamError):
    """OAuth token exchange failed. Fatal for the line."""

    stage = "oauth"


class CityStateError(UpstreamError):
    """ZIP to city/state lookup failed. Always swallowed by enrichment."""

    stage = "city-state"


class StandardizationError(UpstreamError):
    """Address standardization call failed."""

    stage = "address"


class GeocodeError(UpstreamError):
    """Geocoding search failed."""

    stage = "here-geocode-failed"


class ExtractionError(AddressVerifierError):
    """Language model output could not be turned into address fields."""

    stage = "parse"

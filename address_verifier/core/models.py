"""Data models for address resolution results."""
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from address_verifier.core.config import TOKEN_EXPIRY_SKEW

PARSED_FIELDS = ("number", "prefix", "name", "type", "suffix", "city", "state", "postal")
STREET_FIELDS = ("number", "prefix", "name", "type", "suffix")


@dataclass(frozen=True)
class BearerToken:
    """OAuth bearer credential with its absolute expiry (epoch seconds)."""
    value: str
    expires_at: float

    def is_fresh(self, now: Optional[float] = None, skew: float = TOKEN_EXPIRY_SKEW) -> bool:
        """A token within ``skew`` seconds of expiry counts as stale."""
        now = time.time() if now is None else now
        return bool(self.value) and now < self.expires_at - skew

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ParsedAddress:
    """Structured candidate fields for one address line."""
    number: str = ""
    prefix: str = ""
    name: str = ""
    type: str = ""
    suffix: str = ""
    city: str = ""
    state: str = ""
    postal: str = ""
    # ZIP found by the regex fallback when no model output is available
    zip_code: str = ""
    fallback: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ParsedAddress":
        """
        Coerce language model output to the fixed field set.

        Unknown keys are dropped, ``None`` becomes an empty string and any
        other value is stringified and trimmed.

        Args:
            data: Decoded JSON object from the model

        Returns:
            ParsedAddress with ``fallback`` unset
        """
        values = {}
        for key in PARSED_FIELDS:
            value = data.get(key)
            values[key] = "" if value is None else str(value).strip()
        zip_code = data.get("ZIPCode")
        values["zip_code"] = "" if zip_code is None else str(zip_code).strip()
        return cls(**values)

    def street_fields(self) -> Tuple[str, ...]:
        return tuple(getattr(self, name) for name in STREET_FIELDS)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the display form returned to clients."""
        return {
            "number": self.number,
            "prefix": self.prefix,
            "name": self.name,
            "type": self.type,
            "suffix": self.suffix,
            "city": self.city,
            "state": self.state.upper(),
            "postal": self.postal or self.zip_code,
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class NormalizedQuery:
    """Query sent to the standardization endpoint."""
    street_address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""

    def needs_city_state(self) -> bool:
        return (not self.city or not self.state) and bool(self.zip_code)

    def with_city_state(self, city: str, state: str) -> "NormalizedQuery":
        """Return a copy with only the blank city/state fields filled."""
        return replace(
            self,
            city=self.city or (city or "").upper(),
            state=self.state or (state or "").upper(),
        )

    def to_params(self) -> Dict[str, str]:
        return {
            "streetAddress": self.street_address or "",
            "city": self.city or "",
            "state": self.state or "",
            "ZIPCode": self.zip_code or "",
        }

    def to_dict(self) -> Dict[str, str]:
        return self.to_params()


@dataclass(frozen=True)
class ResolutionResult:
    """Terminal output of one postal resolution run."""
    input_line: str
    parsed: ParsedAddress
    query: NormalizedQuery
    ai_error: Optional[str] = None
    standardization_error: Optional[Dict[str, Any]] = None
    standardized_address: Optional[Dict[str, Any]] = None
    # Set when no street address could be derived; standardization is skipped
    parse_error: Optional[str] = None

    def __post_init__(self):
        if self.standardization_error is not None and self.standardized_address is not None:
            raise ValueError("standardization_error and standardized_address are mutually exclusive")

    @property
    def ok(self) -> bool:
        return self.standardized_address is not None

    @property
    def status_code(self) -> int:
        if self.parse_error:
            return 400
        if self.standardization_error is not None:
            return self.standardization_error.get("status") or 500
        return 200

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "input": {"addressLine": self.input_line},
            "parsed": self.parsed.to_dict(),
            "query": self.query.to_dict(),
            "aiError": self.ai_error,
            "standardizationError": self.standardization_error,
            "standardizedAddress": self.standardized_address,
        }
        if self.parse_error:
            data["stage"] = "parse"
            data["error"] = self.parse_error
        return data


@dataclass(frozen=True)
class RetryResult:
    """Result of the manual-correction path (no extraction)."""
    query: NormalizedQuery
    standardization_error: Optional[Dict[str, Any]] = None
    standardized_address: Optional[Dict[str, Any]] = None

    @property
    def status_code(self) -> int:
        if self.standardization_error is not None:
            return self.standardization_error.get("status") or 500
        return 200

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query.to_dict(),
            "standardizationError": self.standardization_error,
            "standardizedAddress": self.standardized_address,
        }


@dataclass(frozen=True)
class GeocodeVerdict:
    """Three-level verdict for one geocoding result."""
    verdict: str
    reason: str
    match_level: Optional[str] = None
    score: Optional[float] = None
    position: Optional[Dict[str, float]] = None
    label: Optional[str] = None
    address: Dict[str, Any] = field(default_factory=dict)

    @property
    def county_name(self) -> Optional[str]:
        return self.address.get("county") or self.address.get("countyName")

    @property
    def state_code(self) -> Optional[str]:
        return self.address.get("stateCode")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "verdict": self.verdict,
            "reason": self.reason,
            "matchLevel": self.match_level,
            "score": self.score,
            "queryScore": self.score,
            "position": self.position,
            "label": self.label,
            "address": self.address,
        }


@dataclass(frozen=True)
class CountyProviderRecord:
    """Static description of a county map/parcel site."""
    key: str
    label: str
    county_name_match: str
    alias_names: Tuple[str, ...] = ()
    state_codes: Tuple[str, ...] = ()
    can_prefill_address: bool = False
    url_template: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "countyNameMatch": self.county_name_match,
            "aliasNames": list(self.alias_names),
            "stateCodes": list(self.state_codes),
            "canPrefillAddress": self.can_prefill_address,
            "urlTemplate": self.url_template,
        }


@dataclass(frozen=True)
class GeocodeOutcome:
    """Geocode sub-pipeline output for one line."""
    input_line: str
    verdict: GeocodeVerdict
    raw: Dict[str, Any] = field(default_factory=dict)
    county_provider: Optional[CountyProviderRecord] = None
    county_map_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input": {"addressLine": self.input_line},
            "here": self.verdict.to_dict(),
            "raw": self.raw,
            "countyProvider": self.county_provider.to_dict() if self.county_provider else None,
            "countyMapUrl": self.county_map_url,
        }


@dataclass(frozen=True)
class LineVerification:
    """Both sub-pipelines for one line; either side may have failed."""
    input_line: str
    resolution: Optional[ResolutionResult] = None
    resolution_error: Optional[Dict[str, Any]] = None
    geocode: Optional[GeocodeOutcome] = None
    geocode_error: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input": {"addressLine": self.input_line},
            "resolution": self.resolution.to_dict() if self.resolution else None,
            "resolutionError": self.resolution_error,
            "geocode": self.geocode.to_dict() if self.geocode else None,
            "geocodeError": self.geocode_error,
        }

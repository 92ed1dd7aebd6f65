"""County name resolution to a county-specific map provider."""
import re
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import quote

from address_verifier.core.county_providers import COUNTY_PROVIDERS
from address_verifier.core.models import CountyProviderRecord, GeocodeVerdict

SAINT_PATTERN = re.compile(r"\bsaint\b")
TRAILING_COUNTY_PATTERN = re.compile(r"\s*\bcounty$")
COORD_PLACEHOLDERS = ("{lat}", "{lng}")


def normalize_county_name(name: Optional[str]) -> str:
    """
    Normalize a county name for exact lookup.

    Lower-case, strip periods, "saint" -> "st", collapse whitespace and drop
    a trailing "county" token.

    Examples:
        "St. Louis County" -> "st louis"
        "Saint  Louis" -> "st louis"
    """
    if not name:
        return ""
    text = name.lower().replace(".", "")
    text = SAINT_PATTERN.sub("st", text)
    text = " ".join(text.split())
    return TRAILING_COUNTY_PATTERN.sub("", text).strip()


def build_lookup_table(records: Iterable[CountyProviderRecord]) -> Mapping[str, Tuple[CountyProviderRecord, ...]]:
    """Map every normalized name and alias to the providers that claim it."""
    table: Dict[str, List[CountyProviderRecord]] = {}
    for record in records:
        for raw_name in (record.county_name_match, *record.alias_names):
            key = normalize_county_name(raw_name)
            if not key:
                continue
            bucket = table.setdefault(key, [])
            if record not in bucket:
                bucket.append(record)
    return MappingProxyType({key: tuple(bucket) for key, bucket in table.items()})


class CountyResolver:
    """Exact-match resolver over a lookup table built once at construction."""

    def __init__(self, records: Iterable[CountyProviderRecord] = COUNTY_PROVIDERS):
        self.records = tuple(records)
        self.table = build_lookup_table(self.records)

    def candidates(self, county_name: Optional[str]) -> Tuple[CountyProviderRecord, ...]:
        return self.table.get(normalize_county_name(county_name), ())

    def resolve(self, county_name: Optional[str], state_code: Optional[str]) -> Optional[CountyProviderRecord]:
        """
        Find the provider for a county.

        The state code is required: county names repeat across states, and
        without one nothing is returned rather than guessing.

        Args:
            county_name: Free-text county name from the geocoder
            state_code: Two-letter state code

        Returns:
            Matching CountyProviderRecord or None
        """
        candidates = self.candidates(county_name)
        if not candidates or not state_code:
            return None
        state_code = state_code.strip().upper()
        for record in candidates:
            if state_code in (code.upper() for code in record.state_codes):
                return record
        return None


def build_county_url(
    record: CountyProviderRecord,
    address: str = "",
    short_address: str = "",
    position: Optional[Dict[str, float]] = None
) -> str:
    """
    Fill a provider's URL template.

    Address placeholders are only filled for providers that accept a
    prefilled address. A template that needs coordinates falls back to its
    base URL when no position is known.
    """
    template = record.url_template
    if position is None and any(p in template for p in COORD_PLACEHOLDERS):
        return template.split("?", 1)[0]

    values = {
        "address": quote(address or "", safe="") if record.can_prefill_address else "",
        "shortAddress": quote(short_address or "", safe="") if record.can_prefill_address else "",
        "lat": f"{position['lat']:.6f}" if position else "",
        "lng": f"{position['lng']:.6f}" if position else "",
    }
    return template.format_map(values)


def short_address(verdict: GeocodeVerdict, fallback: str = "") -> str:
    """Street-only portion of the geocoded address."""
    parts = [verdict.address.get("houseNumber"), verdict.address.get("street")]
    street = " ".join(p for p in parts if p)
    return street or fallback.split(",")[0].strip()


def county_link(
    verdict: GeocodeVerdict,
    full_address: str,
    resolver: CountyResolver
) -> Tuple[Optional[CountyProviderRecord], Optional[str]]:
    """Provider and URL for the county map action, or (None, None)."""
    record = resolver.resolve(verdict.county_name, verdict.state_code)
    if record is None:
        return None, None
    url = build_county_url(
        record,
        address=verdict.label or full_address,
        short_address=short_address(verdict, full_address),
        position=verdict.position,
    )
    return record, url


_default_resolver: Optional[CountyResolver] = None


def default_resolver() -> CountyResolver:
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = CountyResolver(COUNTY_PROVIDERS)
    return _default_resolver

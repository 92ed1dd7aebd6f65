"""Build the normalized standardization query from parsed fields."""
import re
from typing import Dict, Tuple

from address_verifier.core.models import NormalizedQuery, ParsedAddress

PLUS4_SUFFIX = re.compile(r"-.*$")


def compose_street(parsed: ParsedAddress) -> str:
    """Join the non-empty street fields with single spaces."""
    return " ".join(part for part in parsed.street_fields() if part).strip()


def derive_street_from_line(line: str) -> str:
    """Best guess street: text before the first comma on the first line."""
    first = (line or "").split("\n")[0]
    return first.split(",")[0].strip()


def build_query(parsed: ParsedAddress, raw_line: str) -> NormalizedQuery:
    """
    Merge extracted fields and raw-line heuristics into a query.

    Args:
        parsed: Extractor output (model or fallback)
        raw_line: Original address line

    Returns:
        NormalizedQuery with upper-cased city/state and a 5-digit ZIP
    """
    street_address = compose_street(parsed) or derive_street_from_line(raw_line)
    zip_code = PLUS4_SUFFIX.sub("", parsed.postal or "") or parsed.zip_code or ""
    return NormalizedQuery(
        street_address=street_address,
        city=(parsed.city or "").upper(),
        state=(parsed.state or "").upper(),
        zip_code=zip_code,
    )


def query_from_fields(street_address: str, city: str = "", state: str = "", zip_code: str = "") -> NormalizedQuery:
    """Query for the manual-correction path; fields are taken as given."""
    return NormalizedQuery(
        street_address=(street_address or "").strip(),
        city=(city or "").strip().upper(),
        state=(state or "").strip().upper(),
        zip_code=(zip_code or "").strip(),
    )


def retry_defaults(parsed: ParsedAddress, query: NormalizedQuery) -> Tuple[ParsedAddress, Dict[str, str]]:
    """
    Values to prefill the manual-correction form with.

    A regex fallback parse only knows the ZIP, so every other field starts
    blank; a model parse is offered as-is alongside its query.
    """
    if parsed.fallback:
        return ParsedAddress(), {"ZIPCode": query.zip_code}
    return parsed, query.to_dict()

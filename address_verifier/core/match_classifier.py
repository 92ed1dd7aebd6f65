"""Classify a geocoding result into an exact / partial / none verdict."""
from typing import Any, Dict, Mapping, Optional

from address_verifier.core.models import GeocodeVerdict

EXACT_SCORE_THRESHOLD = 0.9
# Interpolated house numbers are estimated between known points
INTERPOLATED_SCORE_CAP = 0.75

EXACT = "exact"
PARTIAL = "partial"
NONE = "none"

STREET_LEVEL_TYPES = ("street", "intersection")
AREA_LEVEL_TYPES = ("locality", "administrativeArea")


def _score(item: Mapping[str, Any]) -> Optional[float]:
    scoring = item.get("scoring")
    value = scoring.get("queryScore") if isinstance(scoring, dict) else None
    if value is None:
        value = item.get("score")
    try:
        return None if value is None else float(value)
    except (TypeError, ValueError):
        return None


def _position(item: Mapping[str, Any]) -> Optional[Dict[str, float]]:
    position = item.get("position")
    if not isinstance(position, dict):
        access = item.get("access")
        position = access[0] if isinstance(access, list) and access and isinstance(access[0], dict) else None
    if not position or position.get("lat") is None or position.get("lng") is None:
        return None
    return {"lat": float(position["lat"]), "lng": float(position["lng"])}


def _decide(item: Optional[Mapping[str, Any]], score: Optional[float]):
    """Ordered decision table; the first matching rule wins."""
    if item is None:
        return NONE, "no-items"

    result_type = item.get("resultType")
    if item.get("houseNumberType") == "interpolated":
        return PARTIAL, "houseNumber-interpolated"
    if result_type == "houseNumber" and score is not None and score >= EXACT_SCORE_THRESHOLD:
        return EXACT, "houseNumber-high-score"
    if result_type == "houseNumber":
        return PARTIAL, "houseNumber-low-score"
    if result_type in STREET_LEVEL_TYPES:
        return PARTIAL, f"resultType-{result_type}"
    if result_type in AREA_LEVEL_TYPES:
        return PARTIAL, f"only-{result_type}-level"
    return NONE, f"resultType-{result_type or 'unknown'}"


def classify(item: Optional[Mapping[str, Any]]) -> GeocodeVerdict:
    """
    Score one geocoding item.

    Args:
        item: First item of the geocoder response, or None when empty

    Returns:
        GeocodeVerdict; the score is capped at 0.75 for interpolated matches
    """
    if item is None:
        verdict, reason = _decide(None, None)
        return GeocodeVerdict(verdict=verdict, reason=reason)

    score = _score(item)
    verdict, reason = _decide(item, score)

    if item.get("houseNumberType") == "interpolated" and score is not None:
        score = min(score, INTERPOLATED_SCORE_CAP)

    address = item.get("address") if isinstance(item.get("address"), dict) else {}
    return GeocodeVerdict(
        verdict=verdict,
        reason=reason,
        match_level=item.get("resultType"),
        score=score,
        position=_position(item),
        label=address.get("label") or item.get("title"),
        address=dict(address),
    )

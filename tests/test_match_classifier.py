"""Tests for geocode match classification."""
import pytest

from address_verifier.core.match_classifier import classify
from conftest import WHITE_HOUSE_HERE


def test_no_items():
    verdict = classify(None)

    assert verdict.verdict == "none"
    assert verdict.reason == "no-items"
    assert verdict.score is None


def test_house_number_high_score():
    verdict = classify(WHITE_HOUSE_HERE["items"][0])

    assert verdict.verdict == "exact"
    assert verdict.reason == "houseNumber-high-score"
    assert verdict.match_level == "houseNumber"
    assert verdict.score == 1.0
    assert verdict.position == {"lat": 38.89768, "lng": -77.03655}
    assert verdict.label.startswith("1600 Pennsylvania Ave NW")
    assert verdict.county_name == "District of Columbia"
    assert verdict.state_code == "DC"


@pytest.mark.parametrize("item,expected_verdict,expected_reason", [
    ({"resultType": "houseNumber", "scoring": {"queryScore": 0.95}}, "exact", "houseNumber-high-score"),
    ({"resultType": "houseNumber", "scoring": {"queryScore": 0.9}}, "exact", "houseNumber-high-score"),
    ({"resultType": "houseNumber", "scoring": {"queryScore": 0.5}}, "partial", "houseNumber-low-score"),
    ({"resultType": "houseNumber"}, "partial", "houseNumber-low-score"),
    ({"resultType": "street", "scoring": {"queryScore": 0.99}}, "partial", "resultType-street"),
    ({"resultType": "intersection"}, "partial", "resultType-intersection"),
    ({"resultType": "locality"}, "partial", "only-locality-level"),
    ({"resultType": "administrativeArea"}, "partial", "only-administrativeArea-level"),
    ({"resultType": "place"}, "none", "resultType-place"),
    ({}, "none", "resultType-unknown"),
])
def test_decision_table(item, expected_verdict, expected_reason):
    """Test each rule of the ordered decision table."""
    verdict = classify(item)

    assert verdict.verdict == expected_verdict
    assert verdict.reason == expected_reason


def test_interpolated_is_partial_and_capped():
    """Test that interpolation beats a high score and caps it at 0.75."""
    item = {"resultType": "houseNumber", "houseNumberType": "interpolated", "scoring": {"queryScore": 0.97}}

    verdict = classify(item)

    assert verdict.verdict == "partial"
    assert verdict.reason == "houseNumber-interpolated"
    assert verdict.score == 0.75


def test_interpolated_low_score_kept():
    item = {"resultType": "houseNumber", "houseNumberType": "interpolated", "scoring": {"queryScore": 0.4}}
    assert classify(item).score == 0.4


def test_flat_score_key_accepted():
    verdict = classify({"resultType": "houseNumber", "score": 0.95})
    assert verdict.verdict == "exact"
    assert verdict.to_dict()["queryScore"] == 0.95


def test_position_from_access_point():
    item = {"resultType": "houseNumber", "access": [{"lat": 1.5, "lng": 2.5}]}
    assert classify(item).position == {"lat": 1.5, "lng": 2.5}


def test_label_falls_back_to_title():
    assert classify({"resultType": "street", "title": "Main St"}).label == "Main St"

"""Tests for query building."""
from address_verifier.core.models import NormalizedQuery, ParsedAddress
from address_verifier.core.query_builder import (
    build_query,
    compose_street,
    derive_street_from_line,
    query_from_fields,
    retry_defaults,
)


def test_compose_street_skips_empty_fields():
    parsed = ParsedAddress(number="1600", prefix="", name="Pennsylvania", type="Ave", suffix="NW")
    assert compose_street(parsed) == "1600 Pennsylvania Ave NW"


def test_build_query_from_model_fields():
    """Test that city and state are upper-cased and ZIP+4 is trimmed."""
    parsed = ParsedAddress(
        number="123", prefix="N", name="Main", type="St", city="Springfield", state="il", postal="62704-1234"
    )

    query = build_query(parsed, "123 N Main St, Springfield, IL 62704-1234")

    assert query == NormalizedQuery(
        street_address="123 N Main St",
        city="SPRINGFIELD",
        state="IL",
        zip_code="62704",
    )


def test_build_query_derives_street_from_line():
    """Test that a fallback parse uses the text before the first comma."""
    parsed = ParsedAddress(zip_code="20500", fallback=True)

    query = build_query(parsed, "1600 Pennsylvania Ave NW, Washington, DC 20500")

    assert query.street_address == "1600 Pennsylvania Ave NW"
    assert query.zip_code == "20500"
    assert query.city == ""


def test_derive_street_uses_first_line_only():
    assert derive_street_from_line("  10 Downing St  \nLondon") == "10 Downing St"
    assert derive_street_from_line("") == ""
    assert derive_street_from_line(", Washington, DC") == ""


def test_query_params_always_carry_four_keys():
    params = NormalizedQuery(street_address="1 Main St").to_params()
    assert params == {"streetAddress": "1 Main St", "city": "", "state": "", "ZIPCode": ""}


def test_query_from_fields_normalizes_case():
    query = query_from_fields(" 1 Main St ", "springfield", "il", " 62704 ")
    assert query == NormalizedQuery("1 Main St", "SPRINGFIELD", "IL", "62704")


def test_with_city_state_only_fills_blanks():
    query = NormalizedQuery(street_address="1 Main St", city="SPRINGFIELD", zip_code="62704")

    enriched = query.with_city_state("Chicago", "il")

    assert enriched.city == "SPRINGFIELD"
    assert enriched.state == "IL"
    assert query.state == ""


def test_retry_defaults_for_model_parse():
    parsed = ParsedAddress(number="1600", name="Pennsylvania", city="Washington", state="DC")
    query = NormalizedQuery("1600 Pennsylvania", "WASHINGTON", "DC", "20500")

    form_parsed, form_query = retry_defaults(parsed, query)

    assert form_parsed is parsed
    assert form_query["ZIPCode"] == "20500"


def test_retry_defaults_for_fallback_parse():
    """Test that a regex fallback still gets a form, blank apart from the ZIP."""
    parsed = ParsedAddress(zip_code="20500", fallback=True)
    query = NormalizedQuery("1600 Pennsylvania Ave NW", "WASHINGTON", "DC", "20500")

    form_parsed, form_query = retry_defaults(parsed, query)

    assert form_parsed == ParsedAddress()
    assert form_query == {"ZIPCode": "20500"}

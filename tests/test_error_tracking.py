"""Tests for Sentry event scrubbing."""
from address_verifier.utils.error_tracking import REDACTED, filter_sensitive_data, scrub_text


def test_scrub_text_redacts_credentials():
    text = "GET https://geocode.test/v1/geocode?q=x&apiKey=abc123 with Bearer eyJhbGci.xyz"

    scrubbed = scrub_text(text)

    assert "abc123" not in scrubbed
    assert "eyJhbGci" not in scrubbed
    assert f"apiKey={REDACTED}" in scrubbed
    assert "q=x" in scrubbed


def test_filter_sensitive_data():
    event = {
        "request": {
            "headers": {"Authorization": "Bearer tok", "Content-Type": "application/json"},
            "query_string": "q=1&apiKey=secret",
            "data": {"client_secret": "s3cret", "addressLine": "1 Main St"},
        },
        "environment": {"HERE_API_KEY": "k", "PORT": "5501"},
        "message": "token Bearer abc.def",
    }

    filtered = filter_sensitive_data(event, None)

    assert filtered["request"]["headers"]["Authorization"] == REDACTED
    assert filtered["request"]["headers"]["Content-Type"] == "application/json"
    assert "secret" not in filtered["request"]["query_string"]
    assert filtered["request"]["data"]["client_secret"] == REDACTED
    assert filtered["request"]["data"]["addressLine"] == "1 Main St"
    assert filtered["environment"]["HERE_API_KEY"] == REDACTED
    assert filtered["environment"]["PORT"] == "5501"
    assert "abc.def" not in filtered["message"]

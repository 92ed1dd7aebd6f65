"""Pytest configuration and fixtures."""
import json

import pytest
import requests

from address_verifier.core.county import CountyResolver
from address_verifier.core.extractor import AddressExtractor
from address_verifier.core.here import HereGeocoder
from address_verifier.core.pipeline import ResolutionPipeline
from address_verifier.core.token_cache import TokenCache
from address_verifier.core.usps import USPSClient

OAUTH_URL = "https://usps.test/oauth2/v3/token"
USPS_BASE = "https://usps.test/addresses/v3"
HERE_URL = "https://here.test/v1/geocode"

WHITE_HOUSE_LINE = "1600 Pennsylvania Ave NW, Washington, DC 20500"

WHITE_HOUSE_FIELDS = {
    "number": "1600",
    "prefix": "",
    "name": "Pennsylvania",
    "type": "Ave",
    "suffix": "NW",
    "city": "Washington",
    "state": "DC",
    "postal": "20500",
}

WHITE_HOUSE_USPS = {
    "firm": "",
    "address": {
        "streetAddress": "1600 PENNSYLVANIA AVE NW",
        "city": "WASHINGTON",
        "state": "DC",
        "ZIPCode": "20500",
        "ZIPPlus4": "0005",
    },
    "additionalInfo": {
        "DPVConfirmation": "Y",
        "carrierRoute": "C000",
        "business": "Y",
        "vacant": "N",
    },
}

WHITE_HOUSE_HERE = {
    "items": [
        {
            "title": "1600 Pennsylvania Ave NW, Washington, DC 20500-0005, United States",
            "resultType": "houseNumber",
            "houseNumberType": "PA",
            "address": {
                "label": "1600 Pennsylvania Ave NW, Washington, DC 20500-0005, United States",
                "countryCode": "USA",
                "stateCode": "DC",
                "state": "District of Columbia",
                "county": "District of Columbia",
                "city": "Washington",
                "street": "Pennsylvania Ave NW",
                "postalCode": "20500-0005",
                "houseNumber": "1600",
            },
            "position": {"lat": 38.89768, "lng": -77.03655},
            "scoring": {"queryScore": 1.0},
        }
    ]
}


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Routes (method, url) to canned responses and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, url, response):
        """Register a FakeResponse, an exception instance, or a callable(call) -> either."""
        self.routes[(method.upper(), url)] = response

    def count(self, method, url):
        return sum(1 for call in self.calls if call["method"] == method.upper() and call["url"] == url)

    def request(self, method, url, timeout=None, **kwargs):
        call = {"method": method.upper(), "url": url, "timeout": timeout, **kwargs}
        self.calls.append(call)
        handler = self.routes.get((method.upper(), url))
        if handler is None:
            raise requests.exceptions.ConnectionError(f"no route for {method} {url}")
        if callable(handler) and not isinstance(handler, FakeResponse):
            handler = handler(call)
        if isinstance(handler, Exception):
            raise handler
        return handler


class StubModel:
    """Deterministic language model returning canned text."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.lines = []

    def complete(self, line):
        self.lines.append(line)
        if self.error is not None:
            raise self.error
        return self.text


class Clock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def usps_backend(session):
    """Healthy USPS backend: OAuth, city-state and address endpoints."""
    session.add("POST", OAUTH_URL, FakeResponse(200, {"access_token": "tok-1", "expires_in": 3600}))
    session.add("GET", f"{USPS_BASE}/city-state", FakeResponse(200, {"city": "WASHINGTON", "state": "DC", "ZIPCode": "20500"}))
    session.add("GET", f"{USPS_BASE}/address", FakeResponse(200, WHITE_HOUSE_USPS))
    return session


@pytest.fixture
def token_cache(session, clock):
    return TokenCache(OAUTH_URL, "client-id", "client-secret", session=session, clock=clock)


@pytest.fixture
def usps_client(session):
    return USPSClient(USPS_BASE, session=session)


@pytest.fixture
def geocoder(session):
    return HereGeocoder("here-key", HERE_URL, session=session)


@pytest.fixture
def white_house_model():
    return StubModel(json.dumps(WHITE_HOUSE_FIELDS))


@pytest.fixture
def make_pipeline(token_cache, usps_client, geocoder):
    """Factory: pipeline with the given model (None disables the LLM)."""
    def _make(model=None):
        return ResolutionPipeline(
            token_cache=token_cache,
            extractor=AddressExtractor(model),
            usps=usps_client,
            geocoder=geocoder,
            county_resolver=CountyResolver(),
        )
    return _make

"""Tests for the OAuth token cache."""
import threading

import pytest
import requests

from address_verifier.core.errors import AuthError
from address_verifier.core.models import BearerToken
from conftest import OAUTH_URL, FakeResponse


def test_token_reused_within_validity(session, token_cache, clock):
    """Test that a fresh token is served without another fetch."""
    session.add("POST", OAUTH_URL, FakeResponse(200, {"access_token": "tok-1", "expires_in": 3600}))

    first = token_cache.acquire()
    clock.advance(600)
    second = token_cache.acquire()

    assert first.value == "tok-1"
    assert second is first
    assert token_cache.fetch_count == 1
    assert session.count("POST", OAUTH_URL) == 1


def test_token_refreshed_inside_skew_window(session, token_cache, clock):
    """Test that a token within 60s of expiry is replaced."""
    tokens = iter(["tok-1", "tok-2"])
    session.add("POST", OAUTH_URL, lambda call: FakeResponse(200, {"access_token": next(tokens), "expires_in": 3600}))

    assert token_cache.acquire().value == "tok-1"
    clock.advance(3600 - 59)
    assert token_cache.acquire().value == "tok-2"
    assert token_cache.fetch_count == 2


def test_grant_sent_as_json(session, token_cache):
    """Test the client-credentials request body."""
    session.add("POST", OAUTH_URL, FakeResponse(200, {"access_token": "tok-1", "expires_in": 3600}))

    token_cache.acquire()

    call = session.calls[0]
    assert call["json"] == {
        "client_id": "client-id",
        "client_secret": "client-secret",
        "grant_type": "client_credentials",
    }


def test_missing_expires_in_defaults_to_one_hour(session, token_cache, clock):
    """Test that expires_in falls back to 3600 seconds."""
    session.add("POST", OAUTH_URL, FakeResponse(200, {"access_token": "tok-1"}))

    token = token_cache.acquire()

    assert token.expires_at == clock.now + 3600


def test_invalid_expires_in_defaults_to_one_hour(session, token_cache, clock):
    session.add("POST", OAUTH_URL, FakeResponse(200, {"access_token": "tok-1", "expires_in": "soon"}))

    assert token_cache.acquire().expires_at == clock.now + 3600


def test_oauth_http_error_raises_auth_error(session, token_cache):
    """Test that a 500 from the token endpoint is an AuthError."""
    session.add("POST", OAUTH_URL, FakeResponse(500, text="server exploded"))

    with pytest.raises(AuthError) as exc_info:
        token_cache.acquire()

    assert exc_info.value.status == 500
    assert exc_info.value.body == "server exploded"
    assert exc_info.value.stage == "oauth"


def test_missing_access_token_raises_auth_error(session, token_cache):
    session.add("POST", OAUTH_URL, FakeResponse(200, {"token_type": "Bearer"}))

    with pytest.raises(AuthError) as exc_info:
        token_cache.acquire()

    assert exc_info.value.status is None


def test_network_failure_raises_auth_error(session, token_cache):
    session.add("POST", OAUTH_URL, requests.exceptions.ConnectTimeout("timed out"))

    with pytest.raises(AuthError) as exc_info:
        token_cache.acquire()

    assert exc_info.value.status is None
    assert "timeout" in exc_info.value.body


def test_failed_fetch_is_not_cached(session, token_cache):
    """Test that a failure does not poison the cache."""
    session.add("POST", OAUTH_URL, FakeResponse(503, text="busy"))
    with pytest.raises(AuthError):
        token_cache.acquire()

    session.add("POST", OAUTH_URL, FakeResponse(200, {"access_token": "tok-2", "expires_in": 3600}))
    assert token_cache.acquire().value == "tok-2"


def test_invalidate_forces_refetch(session, token_cache):
    session.add("POST", OAUTH_URL, FakeResponse(200, {"access_token": "tok-1", "expires_in": 3600}))

    token_cache.acquire()
    token_cache.invalidate()
    token_cache.acquire()

    assert token_cache.fetch_count == 2


def test_concurrent_acquire_fetches_once(session, token_cache):
    """Test that parallel callers share a single refresh."""
    session.add("POST", OAUTH_URL, FakeResponse(200, {"access_token": "tok-1", "expires_in": 3600}))
    results = []

    def worker():
        results.append(token_cache.acquire().value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results == ["tok-1"] * 8
    assert token_cache.fetch_count == 1


def test_bearer_token_freshness():
    token = BearerToken(value="abc", expires_at=1000.0)

    assert token.is_fresh(now=900.0, skew=60)
    assert not token.is_fresh(now=940.0, skew=60)
    assert not BearerToken(value="", expires_at=1000.0).is_fresh(now=0.0)
    assert str(token) == "abc"

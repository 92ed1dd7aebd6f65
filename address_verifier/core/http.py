"""Shared JSON-over-HTTP helper for upstream providers."""
from typing import Any, Dict, Optional, Type

import requests

from address_verifier.core.config import REQUEST_TIMEOUT
from address_verifier.core.errors import UpstreamError


def new_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    return session


def fetch_json(
    session: requests.Session,
    method: str,
    url: str,
    error_cls: Type[UpstreamError],
    timeout: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Perform one request and decode its JSON body.

    Network failures, timeouts, non-2xx statuses and undecodable bodies are
    all raised as ``error_cls`` so the caller's stage owns the failure.
    Transport failures carry no status, and their body names only the
    exception type and the URL without its query string. An undecodable body
    also carries no status.

    Args:
        session: requests session (or compatible object) to send with
        method: HTTP method
        url: Target URL without query string
        error_cls: UpstreamError subclass naming the pipeline stage
        timeout: Seconds before the call is abandoned
        **kwargs: Passed through to ``session.request`` (params, json, headers)

    Returns:
        Decoded JSON object, or an empty dict for an empty body
    """
    try:
        response = session.request(method, url, timeout=timeout or REQUEST_TIMEOUT, **kwargs)
    except requests.exceptions.Timeout as e:
        raise error_cls(status=None, body=f"timeout: {type(e).__name__} calling {url}", url=url) from e
    except requests.exceptions.RequestException as e:
        raise error_cls(status=None, body=f"{type(e).__name__} calling {url}", url=url) from e

    text = response.text
    if not response.ok:
        raise error_cls(status=response.status_code, body=text, url=url)
    if not text:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise error_cls(status=None, body=text, url=url) from e

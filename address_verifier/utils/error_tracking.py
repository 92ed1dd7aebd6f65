"""Error tracking and monitoring setup."""
import os
import re
import logging
from typing import Optional

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

REDACTED = '***REDACTED***'
SENSITIVE_HEADERS = {'authorization', 'api-key', 'x-api-key', 'x-auth-token', 'cookie', 'set-cookie'}
SENSITIVE_KEYS = {'password', 'secret', 'client_secret', 'api_key', 'apikey', 'token', 'access_token', 'auth'}
SENSITIVE_ENV_VARS = ['API_KEY', 'SECRET', 'PASSWORD', 'TOKEN', 'AUTH']

# Bearer credentials and HERE apiKey query parameters embedded in URLs or messages
BEARER_PATTERN = re.compile(r'(Bearer\s+)[A-Za-z0-9\-._~+/]+=*', re.IGNORECASE)
API_KEY_PARAM_PATTERN = re.compile(r'(apiKey=)[^&\s]+', re.IGNORECASE)

_initialized = False


def scrub_text(value: str) -> str:
    """Remove bearer tokens and API keys from free text."""
    value = BEARER_PATTERN.sub(r'\1' + REDACTED, value)
    return API_KEY_PARAM_PATTERN.sub(r'\1' + REDACTED, value)


def filter_sensitive_data(event, hint):
    """Filter sensitive data from Sentry events."""
    request = event.get('request')
    if request:
        if 'headers' in request:
            request['headers'] = {
                k: REDACTED if k.lower() in SENSITIVE_HEADERS else v
                for k, v in request['headers'].items()
            }

        if isinstance(request.get('url'), str):
            request['url'] = scrub_text(request['url'])
        if isinstance(request.get('query_string'), str):
            request['query_string'] = scrub_text(request['query_string'])

        data = request.get('data')
        if isinstance(data, dict):
            for key in list(data.keys()):
                if key.lower() in SENSITIVE_KEYS:
                    data[key] = REDACTED

    env = event.get('environment')
    if isinstance(env, dict):
        for key in list(env.keys()):
            if any(sensitive in key.upper() for sensitive in SENSITIVE_ENV_VARS):
                env[key] = REDACTED

    for entry in (event.get('logentry'), event.get('message')):
        if isinstance(entry, dict) and isinstance(entry.get('message'), str):
            entry['message'] = scrub_text(entry['message'])
    if isinstance(event.get('message'), str):
        event['message'] = scrub_text(event['message'])

    return event


def setup_error_tracking(
    dsn: Optional[str] = None,
    environment: Optional[str] = None,
    release: Optional[str] = None,
    traces_sample_rate: float = 0.1
) -> bool:
    """
    Setup Sentry error tracking.

    Args:
        dsn: Sentry DSN (if None, will try to get from SENTRY_DSN env var)
        environment: Environment name (development, staging, production)
        release: Release version
        traces_sample_rate: Percentage of transactions to trace (0.0 to 1.0)

    Returns:
        True if Sentry was initialized, False otherwise
    """
    global _initialized

    dsn = dsn or os.getenv("SENTRY_DSN")
    if not dsn:
        logging.info("Sentry DSN not provided. Error tracking disabled.")
        return False

    environment = environment or os.getenv("ENVIRONMENT", "development")
    release = release or os.getenv("RELEASE", "unknown")

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
        traces_sample_rate=traces_sample_rate,
        before_send=filter_sensitive_data,
        attach_stacktrace=True,
        send_default_pii=False,
        debug=os.getenv("SENTRY_DEBUG", "false").lower() == "true",
    )
    _initialized = True

    logging.info(f"Sentry error tracking initialized for environment: {environment}")
    return True


def capture_exception(error: Exception, context: Optional[dict] = None) -> bool:
    """Capture exception and send to Sentry if it was initialized."""
    if not _initialized:
        return False

    with sentry_sdk.new_scope() as scope:
        if context:
            for key, value in context.items():
                scope.set_context(key, {"value": str(value)})
        sentry_sdk.capture_exception(error)
    return True


"""Error handling for Streamlit pages."""
import functools
import traceback
from typing import Callable

import streamlit as st

from address_verifier.core.errors import AuthError, GeocodeError, UpstreamError
from address_verifier.utils.logging import log_error

STAGE_MESSAGES = {
    AuthError.stage: "Could not sign in to USPS. Check USPS_CLIENT_ID / USPS_CLIENT_SECRET.",
    GeocodeError.stage: "HERE geocoding is unavailable. Check HERE_API_KEY.",
}


def describe_error(error: Exception) -> str:
    """Operator-facing message; upstream failures name their stage and status."""
    if isinstance(error, UpstreamError):
        hint = STAGE_MESSAGES.get(error.stage, f"{error.stage} request failed.")
        status = f" (HTTP {error.status})" if error.status is not None else ""
        return f"{hint}{status}"
    return str(error) or type(error).__name__


def handle_streamlit_errors(show_details: bool = True, reraise: bool = False):
    """
    Decorator that keeps a page rendering when a pipeline call blows up.

    Args:
        show_details: Show the traceback and upstream body in an expander
        reraise: Re-raise after reporting (for development)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                context = {"module": func.__module__, "function": func.__name__, "streamlit_page": True}
                if isinstance(e, UpstreamError):
                    context.update(stage=e.stage, status=e.status)
                log_error(e, context)

                st.error(f"❌ {describe_error(e)}")

                if show_details:
                    with st.expander("🔍 Error Details", expanded=False):
                        st.code(traceback.format_exc(), language="python")
                        details = {"function": func.__name__, "error_type": type(e).__name__}
                        if isinstance(e, UpstreamError):
                            details.update(e.to_dict())
                        st.json(details)

                if reraise:
                    raise
        return wrapper
    return decorator

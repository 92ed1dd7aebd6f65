"""Verify Addresses page: batch resolution, manual retry and map links."""
from typing import List

import pandas as pd
import pydeck as pdk
import streamlit as st

from address_verifier.core.errors import AuthError
from address_verifier.core.models import LineVerification, ParsedAddress
from address_verifier.core.pipeline import ResolutionPipeline
from address_verifier.core.query_builder import compose_street, retry_defaults
from address_verifier.core.sites import DEFAULT_SITES, SITE_OPEN_ORDER, SITE_PROVIDERS, build_site_links
from address_verifier.core.usps import summarize_standardized
from address_verifier.utils.error_handler import handle_streamlit_errors
from address_verifier.utils.timing import Timer

VERDICT_DISPLAY = {
    "exact": ("✅", "ADDRESS FOUND", "Exact house number match with high confidence"),
    "partial": ("⚠️", "PARTIAL MATCH", "Address partially matched, verify manually"),
    "none": ("❌", "NOT FOUND", "Address could not be verified in HERE database"),
}

PARTIAL_DESCRIPTIONS = {
    "street": "Street found, but house number not confirmed",
    "houseNumber": "House number found, but low confidence score",
    "locality": "Only matched to locality level, not specific address",
    "administrativeArea": "Only matched to administrativeArea level, not specific address",
}


if "pipeline" not in st.session_state:
    st.session_state.pipeline = ResolutionPipeline.from_config()
if "verifications" not in st.session_state:
    st.session_state.verifications = []

pipeline: ResolutionPipeline = st.session_state.pipeline


def render_usps(item: LineVerification, idx: int):
    """USPS card: standardized address, errors, and the retry form."""
    if item.resolution_error:
        st.error(f"USPS @{item.resolution_error.get('stage')}: {item.resolution_error.get('error')}")
        return

    result = item.resolution
    if result.ok:
        summary = summarize_standardized(result.standardized_address)
        st.success(f"USPS: {summary['line1']} {summary['zip']}")
        st.caption(
            f"DPV: {summary['dpvConfirmation'] or 'N/A'} ⋅ CR: {summary['carrierRoute'] or 'N/A'} ⋅ "
            f"Biz: {summary['business'] or 'N/A'} ⋅ Vacant: {summary['vacant'] or 'N/A'}"
        )
        with st.expander("USPS response"):
            st.json(result.standardized_address)
        return

    errors = []
    if result.ai_error:
        errors.append(f"AI: {result.ai_error}")
    if result.parse_error:
        errors.append(f"Parse: {result.parse_error}")
    if result.standardization_error:
        err = result.standardization_error
        errors.append(f"USPS @{err.get('stage')} ({err.get('status')})")
    st.warning(" ⋅ ".join(errors) or "Unknown error")

    parsed, query = retry_defaults(result.parsed, result.query)
    render_retry_form(parsed, query, idx)


def render_retry_form(parsed: ParsedAddress, query: dict, idx: int):
    with st.form(key=f"retry-{idx}"):
        cols = st.columns([1, 1, 3, 1, 1])
        number = cols[0].text_input("Number", parsed.number)
        prefix = cols[1].text_input("Prefix", parsed.prefix)
        name = cols[2].text_input("Street Name", parsed.name or query.get("streetAddress", ""))
        street_type = cols[3].text_input("Type", parsed.type)
        suffix = cols[4].text_input("Suffix", parsed.suffix)
        cols = st.columns([3, 1, 1])
        city = cols[0].text_input("City", parsed.city or query.get("city", ""))
        state = cols[1].text_input("State", parsed.state or query.get("state", ""), max_chars=2)
        postal = cols[2].text_input("ZIP", parsed.postal or query.get("ZIPCode", ""))
        submitted = st.form_submit_button("Retry USPS")

    if not submitted:
        return
    street = compose_street(ParsedAddress(number=number, prefix=prefix, name=name, type=street_type, suffix=suffix))
    if not street:
        st.error("Street address required")
        return
    try:
        with Timer("retry"):
            retried = pipeline.retry(street, city, state, postal)
    except AuthError as e:
        st.error(f"USPS @oauth: {e.body or 'OAuth failed'}")
        return
    if retried.standardized_address:
        summary = summarize_standardized(retried.standardized_address)
        st.success(f"USPS: {summary['line1']} {summary['zip']}")
    else:
        err = retried.standardization_error or {}
        st.error(f"USPS @{err.get('stage')} ({err.get('status')})")


def render_here(item: LineVerification):
    """HERE card: verdict, score, county link and map."""
    if item.geocode_error:
        st.error(f"HERE: {item.geocode_error.get('error')} ({item.geocode_error.get('status')})")
        return

    verdict = item.geocode.verdict
    icon, title, desc = VERDICT_DISPLAY.get(verdict.verdict, VERDICT_DISPLAY["none"])
    if verdict.verdict == "partial":
        desc = PARTIAL_DESCRIPTIONS.get(verdict.match_level, desc)
    if verdict.reason == "houseNumber-interpolated":
        desc = "House number interpolated between known points"

    st.markdown(f"HERE: {icon} **{title}**")
    st.caption(desc)
    st.text(verdict.label or "(no label)")

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Match Level", verdict.match_level or "N/A")
    with col2:
        st.metric("Score", f"{verdict.score * 100:.0f}%" if verdict.score is not None else "N/A")

    if item.geocode.county_map_url:
        st.link_button(f"🗺️ {item.geocode.county_provider.label}", item.geocode.county_map_url)

    if verdict.position:
        layer = pdk.Layer(
            "ScatterplotLayer",
            data=[{"lat": verdict.position["lat"], "lng": verdict.position["lng"]}],
            get_position="[lng, lat]",
            get_radius=25,
            get_fill_color=[220, 50, 50, 200],
        )
        view = pdk.ViewState(latitude=verdict.position["lat"], longitude=verdict.position["lng"], zoom=15)
        st.pydeck_chart(pdk.Deck(layers=[layer], initial_view_state=view))


def summary_frame(items: List[LineVerification]) -> pd.DataFrame:
    rows = []
    for item in items:
        resolution = item.resolution
        verdict = item.geocode.verdict if item.geocode else None
        rows.append({
            "input": item.input_line,
            "usps": "ok" if resolution and resolution.ok else "error",
            "street": resolution.query.street_address if resolution else "",
            "zip": resolution.query.zip_code if resolution else "",
            "fallback": resolution.parsed.fallback if resolution else None,
            "here": verdict.verdict if verdict else "error",
            "score": verdict.score if verdict else None,
        })
    return pd.DataFrame(rows)


@handle_streamlit_errors()
def render_page():
    st.title("🔍 Verify Addresses")

    with st.sidebar:
        st.subheader("Sites")
        enabled_sites = []
        for category in ("global", "regional"):
            st.caption(category.title())
            for site_id in SITE_OPEN_ORDER:
                provider = SITE_PROVIDERS[site_id]
                if provider["category"] != category:
                    continue
                label = str(provider["label"])
                if provider.get("region"):
                    label = f"{label} ({provider['region']})"
                if st.checkbox(label, value=site_id in DEFAULT_SITES, key=f"site-{site_id}"):
                    enabled_sites.append(site_id)

    input_text = st.text_area(
        "Address lines (one per line):",
        height=150,
        placeholder="1600 Pennsylvania Ave NW, Washington, DC 20500"
    )

    if st.button("Verify", type="primary") and input_text.strip():
        with st.spinner("Resolving..."), Timer("verify_lines"):
            st.session_state.verifications = pipeline.verify_lines(input_text.splitlines())

    items: List[LineVerification] = st.session_state.verifications
    if not items:
        return

    st.subheader("Summary")
    st.dataframe(summary_frame(items), use_container_width=True)

    for idx, item in enumerate(items):
        with st.expander(item.input_line, expanded=len(items) == 1):
            coords = item.geocode.verdict.position if item.geocode else None
            links = build_site_links(item.input_line, coords, enabled_sites)
            if links:
                st.markdown(" ⋅ ".join(f"[{label}]({url})" for _, label, url in links))

            col1, col2 = st.columns(2)
            with col1:
                render_usps(item, idx)
            with col2:
                render_here(item)


render_page()

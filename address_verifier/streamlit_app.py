"""Main Streamlit application entry point."""
import streamlit as st

from address_verifier.core import config
from address_verifier.core.pipeline import ResolutionPipeline
from address_verifier.utils.error_tracking import setup_error_tracking
from address_verifier.utils.logging import setup_logging

# Setup logging
setup_logging(config.LOG_LEVEL)
setup_error_tracking()

# Initialize session state
if "pipeline" not in st.session_state:
    st.session_state.pipeline = ResolutionPipeline.from_config()

# Page configuration
st.set_page_config(
    page_title="Address Verifier",
    page_icon="📮",
    layout="wide"
)

st.title("📮 Address Verifier")
st.markdown("Parse freeform address lines, standardize them with USPS and cross-check them with HERE.")

pipeline: ResolutionPipeline = st.session_state.pipeline

st.subheader("Configuration")
col1, col2, col3 = st.columns(3)
with col1:
    usps_status = "✅ Set" if config.USPS_CLIENT_ID and config.USPS_CLIENT_SECRET else "❌ Not set"
    st.text(f"USPS credentials ({config.USPS_ENV}): {usps_status}")
with col2:
    llm_status = f"✅ {config.OPENAI_MODEL} ({config.LLM_MODE})" if pipeline.extractor.enabled else "❌ Disabled (ZIP fallback only)"
    st.text(f"Language model: {llm_status}")
with col3:
    here_status = "✅ Set" if pipeline.geocoder and pipeline.geocoder.enabled else "❌ Not set"
    st.text(f"HERE API key: {here_status}")

st.info("Open **Verify Addresses** in the sidebar to check a batch of lines.")

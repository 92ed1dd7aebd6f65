"""Configuration management for the address verifier."""
import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# USPS Addresses v3 settings ("tem" is the USPS test environment)
USPS_ENV: str = os.getenv("USPS_ENV", "tem").lower()
USPS_OAUTH_URL: str = os.getenv(
    "USPS_OAUTH_URL",
    "https://apis.usps.com/oauth2/v3/token" if USPS_ENV == "prod"
    else "https://apis-tem.usps.com/oauth2/v3/token",
)
USPS_ADDRESSES_BASE: str = os.getenv(
    "USPS_ADDRESSES_BASE",
    "https://apis.usps.com/addresses/v3" if USPS_ENV == "prod"
    else "https://apis-tem.usps.com/addresses/v3",
)
USPS_CLIENT_ID: Optional[str] = os.getenv("USPS_CLIENT_ID")
USPS_CLIENT_SECRET: Optional[str] = os.getenv("USPS_CLIENT_SECRET")

# Seconds before expiry at which a cached bearer token is treated as stale
TOKEN_EXPIRY_SKEW: int = 60
DEFAULT_TOKEN_TTL: int = 3600

# Language model settings
OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
LLM_MODE: str = os.getenv("LLM_MODE", "structured").lower()  # structured | chat
ENABLE_AI_EXTRACTION: bool = os.getenv("ENABLE_AI_EXTRACTION", "true").lower() == "true"

# Azure OpenAI (used instead of api.openai.com when an endpoint is set)
AZURE_OPENAI_ENDPOINT: Optional[str] = os.getenv("AZURE_OPENAI_ENDPOINT")
AZURE_OPENAI_API_KEY: Optional[str] = os.getenv("AZURE_OPENAI_API_KEY")
AZURE_OPENAI_API_VERSION: str = os.getenv("AZURE_OPENAI_API_VERSION", "2024-10-21")

# HERE Geocoding & Search v7
HERE_API_KEY: Optional[str] = os.getenv("HERE_API_KEY")
HERE_GEOCODE_URL: str = os.getenv("HERE_GEOCODE_URL", "https://geocode.search.hereapi.com/v1/geocode")

# Network and worker settings
REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "20"))
MAX_WORKERS: int = int(os.getenv("MAX_WORKERS", "4"))

# Server settings
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "5501"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

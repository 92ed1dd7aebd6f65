#!/usr/bin/env python3
"""
Startup script for the address verifier API.

Usage:
    python scripts/run_api.py

Or with uvicorn directly:
    uvicorn address_verifier.api.main:app --reload --port 5501
"""
import uvicorn

from address_verifier.core.config import HOST, LOG_LEVEL, PORT

if __name__ == "__main__":
    uvicorn.run(
        "address_verifier.api.main:app",
        host=HOST,
        port=PORT,
        log_level=LOG_LEVEL.lower(),
    )

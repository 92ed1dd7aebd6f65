"""FastAPI service exposing the resolution pipeline."""
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from address_verifier import __version__
from address_verifier.core import config
from address_verifier.core.errors import AuthError, GeocodeError
from address_verifier.core.pipeline import ResolutionPipeline
from address_verifier.utils.error_tracking import setup_error_tracking
from address_verifier.utils.logging import setup_logging


# ---------- Pydantic models ----------

class AddressLineRequest(BaseModel):
    addressLine: Optional[str] = Field(None, description="Freeform address line")


class RetryRequest(BaseModel):
    streetAddress: Optional[str] = Field(None, description="Corrected street address")
    city: Optional[str] = ""
    state: Optional[str] = ""
    ZIPCode: Optional[str] = ""


class VerifyLinesRequest(BaseModel):
    lines: Optional[List[str]] = Field(None, description="Address lines, one per entry")


router = APIRouter()


def _pipeline(request: Request) -> ResolutionPipeline:
    return request.app.state.pipeline


def _oauth_failure(error: AuthError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status or 500,
        content={"stage": "oauth", "error": error.body or "OAuth failed"},
    )


@router.get("/health", tags=["meta"])
def health(request: Request) -> dict:
    pipeline = _pipeline(request)
    return {
        "status": "ok",
        "version": __version__,
        "llm": pipeline.extractor.enabled,
        "here": bool(pipeline.geocoder and pipeline.geocoder.enabled),
    }


@router.post("/usps/standardize-line", tags=["usps"])
def standardize_line(payload: AddressLineRequest, request: Request):
    address_line = payload.addressLine
    if not address_line or not address_line.strip():
        return JSONResponse(status_code=400, content={"error": "addressLine required"})

    try:
        result = _pipeline(request).resolve_line(address_line)
    except AuthError as e:
        return _oauth_failure(e)

    return JSONResponse(status_code=result.status_code, content=result.to_dict())


@router.post("/usps/retry", tags=["usps"])
def retry(payload: RetryRequest, request: Request):
    if not payload.streetAddress or not payload.streetAddress.strip():
        return JSONResponse(status_code=400, content={"error": "streetAddress required"})

    try:
        result = _pipeline(request).retry(
            payload.streetAddress,
            payload.city or "",
            payload.state or "",
            payload.ZIPCode or "",
        )
    except AuthError as e:
        return _oauth_failure(e)

    return JSONResponse(status_code=result.status_code, content=result.to_dict())


@router.post("/here/geocode-line", tags=["here"])
def geocode_line(payload: AddressLineRequest, request: Request):
    address_line = payload.addressLine
    if not address_line or not address_line.strip():
        return JSONResponse(status_code=400, content={"error": "addressLine required"})

    try:
        outcome = _pipeline(request).geocode_line(address_line)
    except GeocodeError as e:
        return JSONResponse(
            status_code=e.status or 500,
            content={"error": e.stage, "status": e.status, "body": e.body},
        )

    return outcome.to_dict()


@router.post("/verify-lines", tags=["batch"])
def verify_lines(payload: VerifyLinesRequest, request: Request):
    lines = [line for line in (payload.lines or []) if line and line.strip()]
    if not lines:
        return JSONResponse(status_code=400, content={"error": "lines required"})

    results = _pipeline(request).verify_lines(lines)
    return {"results": [r.to_dict() for r in results]}


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "invalid request", "detail": jsonable_encoder(exc.errors())})


def create_app(pipeline: Optional[ResolutionPipeline] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        pipeline: Pipeline to serve; built from the environment if omitted

    Returns:
        FastAPI app with routes mounted at ``/`` and ``/api``
    """
    setup_logging(config.LOG_LEVEL)
    setup_error_tracking()

    app = FastAPI(
        title="Address Verifier API",
        description="LLM address parsing, USPS standardization and HERE geocoding.",
        version=__version__,
    )
    app.state.pipeline = pipeline or ResolutionPipeline.from_config()
    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.include_router(router)
    # The browser client calls /api/...
    app.include_router(router, prefix="/api")
    return app


app = create_app()

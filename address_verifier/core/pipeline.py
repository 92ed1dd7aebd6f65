"""End-to-end address resolution: postal standardization and geocoding."""
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from address_verifier.core import config
from address_verifier.core.county import CountyResolver, county_link, default_resolver
from address_verifier.core.errors import AuthError, GeocodeError, StandardizationError
from address_verifier.core.extractor import AddressExtractor
from address_verifier.core.here import HereGeocoder, first_item
from address_verifier.core.llm import build_address_model
from address_verifier.core.match_classifier import classify
from address_verifier.core.models import (
    GeocodeOutcome,
    LineVerification,
    NormalizedQuery,
    ResolutionResult,
    RetryResult,
)
from address_verifier.core.query_builder import build_query, query_from_fields
from address_verifier.core.token_cache import TokenCache
from address_verifier.core.usps import USPSClient, enrich_query
from address_verifier.utils.logging import log_error, log_structured
from address_verifier.utils.timing import Timer

PARSE_ERROR_MESSAGE = "Could not extract street address"


class ResolutionPipeline:
    """
    Orchestrates one address line through every stage.

    Postal path: token -> extract -> build query -> enrich -> standardize.
    Geocode path: HERE search -> classify -> county provider.
    Only an OAuth failure aborts the postal path; every other stage degrades
    to partial output.
    """

    def __init__(
        self,
        token_cache: TokenCache,
        extractor: AddressExtractor,
        usps: USPSClient,
        geocoder: Optional[HereGeocoder] = None,
        county_resolver: Optional[CountyResolver] = None,
        max_workers: int = config.MAX_WORKERS
    ):
        self.token_cache = token_cache
        self.extractor = extractor
        self.usps = usps
        self.geocoder = geocoder
        self.county_resolver = county_resolver or default_resolver()
        self.max_workers = max(1, max_workers)

    @classmethod
    def from_config(cls) -> "ResolutionPipeline":
        """Build a pipeline wired to the environment configuration."""
        return cls(
            token_cache=TokenCache(
                config.USPS_OAUTH_URL,
                config.USPS_CLIENT_ID,
                config.USPS_CLIENT_SECRET,
                timeout=config.REQUEST_TIMEOUT,
            ),
            extractor=AddressExtractor(build_address_model()),
            usps=USPSClient(config.USPS_ADDRESSES_BASE, timeout=config.REQUEST_TIMEOUT),
            geocoder=HereGeocoder(config.HERE_API_KEY, config.HERE_GEOCODE_URL, timeout=config.REQUEST_TIMEOUT),
        )

    def _standardize(self, query: NormalizedQuery, token):
        """Returns (standardized_address, standardization_error)."""
        try:
            with Timer("standardize"):
                return self.usps.standardize(query, token), None
        except StandardizationError as e:
            return None, {"stage": e.stage, "status": e.status, "body": e.body}

    def resolve_line(self, line: str) -> ResolutionResult:
        """
        Run the postal sub-pipeline for one address line.

        Args:
            line: Freeform address line

        Returns:
            ResolutionResult; ``parsed`` and ``query`` are always populated

        Raises:
            AuthError: No bearer token could be obtained
        """
        token = self.token_cache.acquire()

        with Timer("extract"):
            parsed, ai_error = self.extractor.extract_with_error(line)

        query = build_query(parsed, line)
        with Timer("enrich"):
            query = enrich_query(query, token, self.usps)

        if not query.street_address:
            log_structured("warning", PARSE_ERROR_MESSAGE, stage="parse", ai_error=ai_error)
            return ResolutionResult(
                input_line=line,
                parsed=parsed,
                query=query,
                ai_error=ai_error,
                parse_error=PARSE_ERROR_MESSAGE,
            )

        standardized, error = self._standardize(query, token)
        return ResolutionResult(
            input_line=line,
            parsed=parsed,
            query=query,
            ai_error=ai_error,
            standardization_error=error,
            standardized_address=standardized,
        )

    def retry(self, street_address: str, city: str = "", state: str = "", zip_code: str = "") -> RetryResult:
        """
        Manual-correction path: already structured fields, no extraction.

        Raises:
            AuthError: No bearer token could be obtained
        """
        token = self.token_cache.acquire()
        query = enrich_query(query_from_fields(street_address, city, state, zip_code), token, self.usps)
        standardized, error = self._standardize(query, token)
        return RetryResult(query=query, standardization_error=error, standardized_address=standardized)

    def geocode_line(self, line: str) -> GeocodeOutcome:
        """
        Run the geocode sub-pipeline for one address line.

        Raises:
            GeocodeError: Geocoding is not configured or the search failed
        """
        if self.geocoder is None:
            raise GeocodeError(status=None, body="HERE geocoding not configured")

        with Timer("geocode"):
            raw = self.geocoder.search(line)
        verdict = classify(first_item(raw))
        record, url = county_link(verdict, line, self.county_resolver)
        return GeocodeOutcome(input_line=line, verdict=verdict, raw=raw, county_provider=record, county_map_url=url)

    def verify_line(self, line: str) -> LineVerification:
        """Run both sub-pipelines concurrently; each failure is kept apart."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            postal = pool.submit(self.resolve_line, line)
            geo = pool.submit(self.geocode_line, line)

            resolution = resolution_error = None
            try:
                resolution = postal.result()
            except AuthError as e:
                resolution_error = {"stage": e.stage, "status": e.status, "error": e.body or "OAuth failed"}
            except Exception as e:
                log_error(e, {"module": "pipeline", "function": "verify_line", "stage": "usps"})
                resolution_error = {"stage": "unknown", "status": None, "error": str(e)}

            geocode = geocode_error = None
            try:
                geocode = geo.result()
            except GeocodeError as e:
                geocode_error = {"error": e.stage, "status": e.status, "body": e.body}
            except Exception as e:
                log_error(e, {"module": "pipeline", "function": "verify_line", "stage": "here"})
                geocode_error = {"error": GeocodeError.stage, "status": None, "body": str(e)}

        return LineVerification(
            input_line=line,
            resolution=resolution,
            resolution_error=resolution_error,
            geocode=geocode,
            geocode_error=geocode_error,
        )

    def verify_lines(self, lines: Sequence[str]) -> List[LineVerification]:
        """Verify independent lines concurrently; output keeps input order."""
        lines = [line.strip() for line in lines if line and line.strip()]
        if not lines:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(lines))) as pool:
            return list(pool.map(self.verify_line, lines))

"""
OpenCage Geocoder Async Client

This module provides the main OpenCageClient class for forward geocoding with
the OpenCage API (api.opencagedata.com) with adaptive rate limit pacing.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from .config import ClientConfig
from .exceptions import DecodeError, GeocodeError, TransportError
from .models import GeocodeOptions, GeocodeResult, Rate
from .pacing import Clock, RequestPacer
from .parser import STATUS_OK, parseGeocodeResponse

logger = logging.getLogger(__name__)

DEFAULT_MIN_CONFIDENCE = 5


def _formatCoordinate(value: float) -> str:
    """Shortest form of a float, without trailing '.0' (51.0 -> '51')."""
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


class OpenCageClient:
    """Async client for OpenCage geocoding API with self-throttling, dood!

    Calls on one client are serialized: only one geocode() runs at a time,
    from pacing wait through HTTP request to pacing update. After each
    response the client spreads the time left in the server's rate window
    over the remaining quota and delays the next call accordingly.

    Share one instance per API key. Creates new HTTP session for each
    request; the session timeout is the only deadline the client imposes.

    Example:
        >>> from opencage_geocoder import GeocodeOptions, OpenCageClient
        >>>
        >>> client = OpenCageClient("your_api_key")
        >>> result = await client.geocode(
        ...     "Fonteinstraat, Leuven",
        ...     GeocodeOptions(countryCode="BE", limit=1),
        ... )
        >>> first = result["results"][0]
        >>> print(first["formatted"], first["geometry"]["lat"], first["geometry"]["lng"])
    """

    __slots__ = (
        "_apiKey",
        "disableRateLimitSleep",
        "requestTimeout",
        "endpoint",
        "transport",
        "_pacer",
        "_lock",
        "_lastRate",
    )

    API_BASE_URL = "https://api.opencagedata.com/geocode/v1/"

    def __init__(
        self,
        apiKey: str,
        *,
        disableRateLimitSleep: bool = False,
        requestTimeout: float = 10,
        endpoint: str = API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize OpenCage client.

        Args:
            apiKey: OpenCage API key (required)
            disableRateLimitSleep: Do not pace requests (not recommended) (default: False)
            requestTimeout: HTTP request timeout in seconds (default: 10)
            endpoint: API base URL, "json" is appended to it (default: API_BASE_URL)
            transport: httpx transport to send requests with (default: httpx default)
            clock: Time source for pacing (default: SystemClock)

        Raises:
            ValueError: If apiKey is empty
        """
        if not isinstance(apiKey, str) or not apiKey.strip():
            raise ValueError("apiKey is required")

        self._apiKey = apiKey
        self.disableRateLimitSleep = disableRateLimitSleep
        self.requestTimeout = requestTimeout
        self.endpoint = endpoint if endpoint.endswith("/") else endpoint + "/"
        self.transport = transport
        self._pacer = RequestPacer(clock)
        self._lock = asyncio.Lock()
        self._lastRate: Optional[Rate] = None

    @classmethod
    def fromConfig(cls, config: ClientConfig, **kwargs: Any) -> "OpenCageClient":
        """Create client from [opencage] configuration section.

        Args:
            config: Section returned by getClientConfig()
            **kwargs: Extra constructor arguments (transport, clock)

        Returns:
            Configured OpenCageClient
        """
        return cls(
            config["api-key"],
            disableRateLimitSleep=config.get("disable-rate-limit-sleep", False),
            requestTimeout=config.get("request-timeout", 10),
            endpoint=config.get("endpoint", cls.API_BASE_URL),
            **kwargs,
        )

    @property
    def apiKey(self) -> str:
        return self._apiKey

    @property
    def nextAllowedTime(self) -> float:
        """Unix timestamp before which the next request will be held back."""
        return self._pacer.nextAllowedTime

    @property
    def lastRate(self) -> Optional[Rate]:
        """Rate block of the latest response, None until one is received."""
        return self._lastRate

    def buildGeocodeParams(self, query: str, options: Optional[GeocodeOptions] = None) -> Dict[str, str]:
        """Map query and options to request parameters.

        Only options that are set end up in the result. Boolean flags are sent
        as "1" when True and omitted otherwise.

        Args:
            query: Free-form location query
            options: Optional request parameters

        Returns:
            Query parameters in the order they are sent
        """
        params: Dict[str, str] = {
            "q": query,
            "key": self._apiKey,
        }
        if options is None:
            return params

        if options.countryCode:
            params["countrycode"] = options.countryCode.lower()
        if options.limit is not None:
            params["limit"] = str(options.limit)
        if options.minConfidence:
            minConfidence = options.minConfidence
            if minConfidence < 1 or minConfidence > 10:
                # Out of range values are moved to the middle of the scale, not rejected
                logger.warning(
                    f"minConfidence {minConfidence} is out of range 1..10, using {DEFAULT_MIN_CONFIDENCE} instead"
                )
                minConfidence = DEFAULT_MIN_CONFIDENCE
            params["min_confidence"] = str(minConfidence)

        flags = {
            "no_annotations": options.noAnnotations,
            "no_dedupe": options.noDedupe,
            "no_record": options.noRecord,
            "add_request": options.addRequest,
            "abbrv": options.abbreviate,
            "pretty": options.pretty,
        }
        for name, enabled in flags.items():
            if enabled:
                params[name] = "1"

        if options.language:
            params["language"] = options.language
        if options.bounds is not None:
            bounds = options.bounds
            params["bounds"] = ",".join(
                _formatCoordinate(value) for value in (bounds.west, bounds.south, bounds.east, bounds.north)
            )

        return params

    def buildGeocodeUrl(self, query: str, options: Optional[GeocodeOptions] = None) -> str:
        """Build full request URL with percent-encoded query string.

        Args:
            query: Free-form location query
            options: Optional request parameters

        Returns:
            URL of the json endpoint
        """
        return self._buildUrl(self.buildGeocodeParams(query, options))

    def _buildUrl(self, params: Dict[str, str]) -> str:
        return str(httpx.URL(self.endpoint + "json", params=params))

    async def geocode(self, query: str, options: Optional[GeocodeOptions] = None) -> GeocodeResult:
        """Forward geocoding: convert free-form query to coordinates, dood!

        Waits for its turn (one request per client at a time), waits out the
        pacing delay, sends the request and updates pacing from the rate
        block of the response.

        Args:
            query: Free-form location query (e.g., "Fonteinstraat, Leuven")
            options: Optional request parameters (default: None)

        Returns:
            Decoded response with status code 200

        Raises:
            TransportError: Request could not be sent or timed out
            DecodeError: Response body is not a geocode envelope
            GeocodeError: Response status code is not 200

        Example:
            >>> result = await client.geocode("Berlin", GeocodeOptions(limit=1))
            >>> print(result["results"][0]["geometry"])
        """
        async with self._lock:
            if not self.disableRateLimitSleep:
                await self._pacer.wait()

            result = await self._makeRequest(query, options)

            if "rate" in result:
                self._lastRate = result["rate"]
                if not self.disableRateLimitSleep:
                    self._pacer.update(result["rate"])

            if result["status"]["code"] != STATUS_OK:
                logger.debug(f"Geocode failed: {result['status']['code']} {result['status']['message']}")
                raise GeocodeError(result)

            logger.debug(f"Geocoded '{query}': {len(result['results'])} result(s)")
            return result

    async def _makeRequest(self, query: str, options: Optional[GeocodeOptions]) -> GeocodeResult:
        """Send single request and decode the response.

        The body is decoded whatever the HTTP status is: the API reports
        errors (bad key, quota exceeded, ...) with a regular JSON envelope.

        Raises:
            TransportError: On timeout or network error
            DecodeError: On invalid JSON or unexpected shape
        """
        params = self.buildGeocodeParams(query, options)
        url = self._buildUrl(params)

        maskedParams = dict(params, key="***")
        logger.debug(f"Making request to {self.endpoint}json with params: {maskedParams}")

        try:
            async with httpx.AsyncClient(timeout=self.requestTimeout, transport=self.transport) as session:
                response = await session.get(url)
        except httpx.TimeoutException as e:
            logger.debug(f"Request timeout: {e}")
            raise TransportError("Request timeout", originalError=e) from e
        except httpx.RequestError as e:
            logger.debug(f"Network error: {e}")
            raise TransportError(f"Network error: {e}", originalError=e) from e

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Failed to parse JSON response: {e}",
                httpStatus=response.status_code,
                originalError=e,
            ) from e

        return parseGeocodeResponse(data, response.status_code)

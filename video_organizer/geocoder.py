"""
Geocoding module for reverse geocoding GPS coordinates.

This module resolves (latitude, longitude) pairs to a short place name
using the Google Geocoding API. Lookups are cached for the lifetime of
the process and outbound requests are spaced by a minimum interval.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from .exceptions import ConfigurationError, GeocodeServiceError

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DEFAULT_MIN_INTERVAL = 5.0

STATUS_OK = "OK"
STATUS_ZERO_RESULTS = "ZERO_RESULTS"


class GoogleGeocodeClient:
    """
    Thin HTTP client for the Google reverse geocoding endpoint.

    Any object with a ``reverse(latitude, longitude) -> dict`` method can
    stand in for this class.
    """

    def __init__(self, api_key: Optional[str], url: str = GOOGLE_GEOCODE_URL,
                 timeout: float = 10.0, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            api_key: Google Maps API key; only required once a lookup is made
            url: Geocode endpoint
            timeout: Request timeout in seconds
            session: Optional requests session to reuse
        """
        self.logger = logging.getLogger(__name__)
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def reverse(self, latitude: float, longitude: float) -> Dict[str, Any]:
        """
        Request the reverse geocode response for a coordinate pair.

        Returns:
            The decoded JSON payload, status checks are left to the caller
        """
        if not self.api_key:
            raise ConfigurationError("GOOGLE_MAPS_API_KEY is not set; cannot look up places")

        params = {"latlng": f"{latitude},{longitude}", "key": self.api_key}
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise GeocodeServiceError(
                f"Geocode request failed for ({latitude}, {longitude}): {e}"
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise GeocodeServiceError(
                f"Geocode response for ({latitude}, {longitude}) is not JSON: {e}",
                response.text,
            ) from e


class RateLimiter:
    """Enforces a minimum interval between consecutive calls."""

    def __init__(self, min_interval: float = DEFAULT_MIN_INTERVAL,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        self.logger = logging.getLogger(__name__)
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request_time: Optional[float] = None

    def wait(self):
        """Block until the next call is allowed, then record it."""
        if self._last_request_time is not None:
            elapsed = self._clock() - self._last_request_time
            if elapsed < self.min_interval:
                delay = self.min_interval - elapsed
                self.logger.debug(f"Rate limiting geocode lookups, sleeping {delay:.2f}s")
                self._sleep(delay)
        self._last_request_time = self._clock()


def _component_with_type(components: list, type_name: str) -> Optional[dict]:
    for component in components:
        if type_name in component.get("types", []):
            return component
    return None


def select_place_name(response: Dict[str, Any]) -> str:
    """
    Pick a place name from the first result of an OK response.

    Priority: neighborhood (shown with its locality), locality, a
    component whose second type is sublocality, then
    administrative_area_level_2.

    Raises:
        GeocodeServiceError: If no recognizable component is present
    """
    results = response.get("results") or []
    if not results:
        raise GeocodeServiceError("Geocode response has no results", response)
    components = results[0].get("address_components", [])

    locality = _component_with_type(components, "locality")
    neighborhood = _component_with_type(components, "neighborhood")
    if neighborhood:
        if locality:
            return f"{neighborhood['long_name']} ({locality['long_name']})"
        return neighborhood["long_name"]
    if locality:
        return locality["long_name"]

    for component in components:
        types = component.get("types", [])
        if len(types) > 1 and types[1] == "sublocality":
            return component["long_name"]

    county = _component_with_type(components, "administrative_area_level_2")
    if county:
        return county["long_name"]

    raise GeocodeServiceError("No locality found in geocode response", response)


class Geocoder:
    """
    Resolves GPS coordinates to place names.

    Results (including "no result") are cached by exact coordinate pair,
    and cache misses go through the rate limiter before reaching the
    client.
    """

    def __init__(self, client, rate_limiter: Optional[RateLimiter] = None):
        """
        Initialize the geocoder.

        Args:
            client: Object with ``reverse(latitude, longitude) -> dict``
            rate_limiter: Spacing policy for outbound calls
        """
        self.logger = logging.getLogger(__name__)
        self.client = client
        self.rate_limiter = rate_limiter or RateLimiter()

        self._geocoding_cache: Dict[Tuple[float, float], Optional[str]] = {}
        self._cache_hits = 0
        self._cache_misses = 0

    def resolve_place(self, latitude: Optional[float], longitude: Optional[float]) -> Optional[str]:
        """
        Reverse geocode a coordinate pair to a place name.

        Args:
            latitude: Latitude, or None
            longitude: Longitude, or None

        Returns:
            Place name, or None when coordinates are absent or the service
            found nothing

        Raises:
            GeocodeServiceError: On any status other than OK or ZERO_RESULTS
        """
        if latitude is None or longitude is None:
            return None

        cache_key = (latitude, longitude)
        if cache_key in self._geocoding_cache:
            self._cache_hits += 1
            self.logger.info(f"Cache hit for coordinates ({latitude}, {longitude})")
            return self._geocoding_cache[cache_key]

        self._cache_misses += 1
        self.rate_limiter.wait()
        response = self.client.reverse(latitude, longitude)

        status = response.get("status")
        if status == STATUS_ZERO_RESULTS:
            self.logger.info(f"No place found for ({latitude}, {longitude})")
            place = None
        elif status == STATUS_OK:
            place = select_place_name(response)
            self.logger.info(f"Found place {place!r} for ({latitude}, {longitude})")
        else:
            raise GeocodeServiceError(
                f"Geocode lookup for ({latitude}, {longitude}) returned status {status!r}",
                response,
            )

        self._geocoding_cache[cache_key] = place
        return place

    def get_cache_stats(self) -> Dict[str, float]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache hit/miss statistics
        """
        total_requests = self._cache_hits + self._cache_misses
        hit_rate = (self._cache_hits / total_requests * 100) if total_requests > 0 else 0

        return {
            'cache_hits': self._cache_hits,
            'cache_misses': self._cache_misses,
            'total_requests': total_requests,
            'hit_rate_percent': round(hit_rate, 2),
            'cache_size': len(self._geocoding_cache)
        }

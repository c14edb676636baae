"""
Reverse geocoding of device-reported coordinates.

Location is advisory metadata on an attendance action. Every failure here
degrades to a placeholder name; nothing in this module raises.
"""

import logging
from typing import Optional

import httpx

from presensi.config import settings
from presensi.schemas.attendance import LocationSnapshot

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Lokasi tidak dikenal"


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{latitude:.4f}, {longitude:.4f}"


def place_name_from_display(display_name: Optional[str], parts: int = 3) -> Optional[str]:
    """Keep the first few comma-separated parts of a Nominatim display name."""
    if not display_name:
        return None
    return ",".join(display_name.split(",")[:parts]).strip() or None


class ReverseGeocoder:
    """Nominatim reverse-geocoding client with a bounded timeout."""

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        language: str = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.base_url = base_url or settings.GEOCODER_URL
        self.timeout = timeout if timeout is not None else settings.GEOCODER_TIMEOUT_SECONDS
        self.language = language or settings.GEOCODER_LANGUAGE
        self.client = client

    async def _fetch(self, latitude: float, longitude: float) -> dict:
        params = {
            "format": "json",
            "lat": latitude,
            "lon": longitude,
            "zoom": 18,
            "addressdetails": 1,
        }
        headers = {
            "Accept-Language": self.language,
            "User-Agent": settings.GEOCODER_USER_AGENT,
        }

        if self.client is not None:
            response = await self.client.get(self.base_url, params=params, headers=headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=params, headers=headers)

        response.raise_for_status()
        return response.json()

    async def reverse(self, latitude: float, longitude: float) -> str:
        """
        Resolve coordinates to a short place name.

        Returns:
            The place name, `UNKNOWN_LOCATION` when the service knows no name,
            or the formatted coordinates when the lookup fails
        """
        try:
            data = await self._fetch(latitude, longitude)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Reverse geocoding failed for {latitude}, {longitude}: {e}")
            return format_coordinates(latitude, longitude)

        if not isinstance(data, dict):
            return UNKNOWN_LOCATION
        return place_name_from_display(data.get("display_name")) or UNKNOWN_LOCATION


async def resolve_snapshot(
    snapshot: Optional[LocationSnapshot],
    geocoder: Optional[ReverseGeocoder] = None
) -> Optional[LocationSnapshot]:
    """
    Fill in the place name of a location snapshot when only coordinates
    were reported. Snapshots that already carry a name are returned as is.
    """
    if snapshot is None:
        return None

    if snapshot.location_name or snapshot.coordinates is None:
        return snapshot

    if settings.ENABLE_REVERSE_GEOCODING and geocoder is not None:
        name = await geocoder.reverse(snapshot.latitude, snapshot.longitude)
    else:
        name = format_coordinates(snapshot.latitude, snapshot.longitude)

    return snapshot.model_copy(update={"location_name": name})

import asyncio

import httpx
import pytest

from presensi.config import settings
from presensi.schemas.attendance import LocationSnapshot
from presensi.services.location_service import (
    UNKNOWN_LOCATION, ReverseGeocoder, place_name_from_display, resolve_snapshot
)

DISPLAY_NAME = "Jalan Jenderal Sudirman, Setiabudi, Jakarta Selatan, Daerah Khusus Ibukota Jakarta, 12190, Indonesia"


def geocoder_with(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ReverseGeocoder(base_url="https://geocoder.test/reverse", client=client)


def reverse(geocoder, latitude=-6.2088, longitude=106.8456):
    async def run():
        try:
            return await geocoder.reverse(latitude, longitude)
        finally:
            await geocoder.client.aclose()

    return asyncio.run(run())


def test_place_name_keeps_first_three_parts():
    assert place_name_from_display(DISPLAY_NAME) == "Jalan Jenderal Sudirman, Setiabudi, Jakarta Selatan"
    assert place_name_from_display("Monas") == "Monas"
    assert place_name_from_display("") is None
    assert place_name_from_display(None) is None


def test_reverse_geocoding_request():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["language"] = request.headers.get("accept-language")
        return httpx.Response(200, json={"display_name": DISPLAY_NAME})

    name = reverse(geocoder_with(handler))

    assert name == "Jalan Jenderal Sudirman, Setiabudi, Jakarta Selatan"
    assert seen["params"]["format"] == "json"
    assert seen["params"]["lat"] == "-6.2088"
    assert seen["params"]["lon"] == "106.8456"
    assert seen["language"] == settings.GEOCODER_LANGUAGE


def test_missing_display_name():
    assert reverse(geocoder_with(lambda request: httpx.Response(200, json={}))) == UNKNOWN_LOCATION


def test_non_object_response():
    assert reverse(geocoder_with(lambda request: httpx.Response(200, json=[]))) == UNKNOWN_LOCATION


@pytest.mark.parametrize("handler", [
    lambda request: httpx.Response(500, text="upstream error"),
    lambda request: httpx.Response(200, text="<html>not json</html>"),
])
def test_failed_lookup_falls_back_to_coordinates(handler):
    assert reverse(geocoder_with(handler)) == "-6.2088, 106.8456"


def test_timeout_falls_back_to_coordinates():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    assert reverse(geocoder_with(handler), -6.123456, 106.1) == "-6.1235, 106.1000"


class CountingGeocoder:
    def __init__(self):
        self.calls = 0

    async def reverse(self, latitude, longitude):
        self.calls += 1
        return "Kantor Cabang"


def test_snapshot_name_is_filled_from_geocoder(monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_REVERSE_GEOCODING", True)
    geocoder = CountingGeocoder()

    snapshot = asyncio.run(resolve_snapshot(LocationSnapshot(latitude=-6.2, longitude=106.8), geocoder))

    assert snapshot.location_name == "Kantor Cabang"
    assert geocoder.calls == 1


def test_snapshot_with_name_is_kept(monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_REVERSE_GEOCODING", True)
    geocoder = CountingGeocoder()
    original = LocationSnapshot(latitude=-6.2, longitude=106.8, location_name="Rumah Nasabah")

    snapshot = asyncio.run(resolve_snapshot(original, geocoder))

    assert snapshot == original
    assert geocoder.calls == 0


def test_snapshot_without_coordinates():
    snapshot = LocationSnapshot(location_name=None)

    assert asyncio.run(resolve_snapshot(snapshot, CountingGeocoder())) == snapshot
    assert asyncio.run(resolve_snapshot(None)) is None


def test_geocoding_disabled(monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_REVERSE_GEOCODING", False)
    geocoder = CountingGeocoder()

    snapshot = asyncio.run(resolve_snapshot(LocationSnapshot(latitude=-6.2, longitude=106.8), geocoder))

    assert snapshot.location_name == "-6.2000, 106.8000"
    assert geocoder.calls == 0

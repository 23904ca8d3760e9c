"""Tests for Nominatim geocoding."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.models import Coordinates
from app.services.errors import LocationNotFoundError
from app.services.geocoding_service import GeocodingService, format_coordinates


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


class TestGeocode:
    """Test forward geocoding."""

    @pytest.mark.asyncio
    async def test_indian_location_restricted_to_india(self, settings):
        service = GeocodingService(settings)

        with patch.object(service, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get.return_value = _response([{"lat": "12.97", "lon": "77.59"}])
            mock_get_client.return_value = mock_client

            coordinates = await service.geocode("Bengaluru")

        assert coordinates == Coordinates(lat=12.97, lng=77.59)
        params = mock_client.get.call_args.kwargs["params"]
        assert params["q"] == "Bangalore, India"
        assert params["countrycodes"] == "in"

    @pytest.mark.asyncio
    async def test_other_location_unrestricted(self, settings):
        service = GeocodingService(settings)

        with patch.object(service, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get.return_value = _response([{"lat": "52.52", "lon": "13.40"}])
            mock_get_client.return_value = mock_client

            coordinates = await service.geocode("Berlin, Germany")

        assert coordinates == Coordinates(lat=52.52, lng=13.40)
        params = mock_client.get.call_args.kwargs["params"]
        assert params["q"] == "Berlin, Germany"
        assert "countrycodes" not in params

    @pytest.mark.asyncio
    async def test_known_city_fallback(self, settings):
        """Test that Indian cities resolve from the table when Nominatim fails."""
        service = GeocodingService(settings)

        with patch.object(service, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get.side_effect = httpx.ConnectError("offline")
            mock_get_client.return_value = mock_client

            coordinates = await service.geocode("Jaipur")

        assert coordinates == Coordinates(lat=26.9124, lng=75.7873)

    @pytest.mark.asyncio
    async def test_unknown_location_raises(self, settings):
        service = GeocodingService(settings)

        with patch.object(service, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get.return_value = _response([])
            mock_get_client.return_value = mock_client

            with pytest.raises(LocationNotFoundError):
                await service.geocode("Nowhereville")

    @pytest.mark.asyncio
    async def test_sentinel_answer_treated_as_missing(self, settings):
        service = GeocodingService(settings)

        with patch.object(service, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get.return_value = _response([{"lat": "0", "lon": "0"}])
            mock_get_client.return_value = mock_client

            with pytest.raises(LocationNotFoundError):
                await service.geocode("Null Island")

    @pytest.mark.asyncio
    async def test_blank_location_raises(self, settings):
        with pytest.raises(LocationNotFoundError):
            await GeocodingService(settings).geocode("   ")


class TestReverseGeocode:
    """Test reverse geocoding."""

    @pytest.mark.asyncio
    async def test_display_name(self, settings):
        service = GeocodingService(settings)

        with patch.object(service, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get.return_value = _response({"display_name": "Pune, Maharashtra, India"})
            mock_get_client.return_value = mock_client

            assert await service.reverse_geocode(18.52, 73.85) == "Pune, Maharashtra, India"

    @pytest.mark.asyncio
    async def test_falls_back_to_coordinates(self, settings):
        service = GeocodingService(settings)

        with patch.object(service, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get.side_effect = httpx.ReadTimeout("slow")
            mock_get_client.return_value = mock_client

            assert await service.reverse_geocode(18.52, 73.85) == "18.5200, 73.8500"

    def test_format_coordinates(self):
        assert format_coordinates(1.23456, -2.5) == "1.2346, -2.5000"

# views/weather.py

from core.errors import FormValidationError, PermissionDeniedError, TransportError
from core.gateway import GatewayClient
from core.models import WeatherData
from tools.geocoding_api import get_coordinates_for_location
from .base import FeatureView

LOCATION_DENIED = "Location permission denied. Please enable location sharing to see local weather."


class WeatherView(FeatureView):
    """Agricultural forecast for the farmer's location."""

    name = "weather"

    def __init__(self, gateway: GatewayClient):
        super().__init__()
        self.gateway = gateway
        self.location_label = None

    @property
    def weather(self) -> WeatherData:
        return self.state.result

    def fetch(self, lat: float, lon: float, share_location: bool = True) -> bool:
        return self._run(self._fetch_coordinates, lat, lon, share_location)

    def fetch_for_place(self, query: str, share_location: bool = True) -> bool:
        return self._run(self._fetch_place, query, share_location)

    def _fetch_coordinates(self, lat: float, lon: float, share_location: bool) -> WeatherData:
        if not share_location:
            raise PermissionDeniedError(LOCATION_DENIED)
        self.location_label = f"{lat:.4f}, {lon:.4f}"
        return self.gateway.fetch_weather(lat, lon)

    def _fetch_place(self, query: str, share_location: bool) -> WeatherData:
        if not share_location:
            raise PermissionDeniedError(LOCATION_DENIED)
        if not query or not query.strip():
            raise FormValidationError("Please enter a village, town or city.")

        location = get_coordinates_for_location.invoke({"location_query": query.strip()})
        if "error" in location:
            if location.get("reason") == "not_found":
                raise FormValidationError(f"Could not find '{query.strip()}'. Try a nearby town.")
            raise TransportError(location["error"])

        self.location_label = query.strip()
        return self.gateway.fetch_weather(location["latitude"], location["longitude"])

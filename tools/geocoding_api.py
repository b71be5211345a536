# tools/geocoding_api.py

import requests
from langchain_core.tools import tool
from core.config import settings

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"

@tool
def get_coordinates_for_location(location_query: str) -> dict:
    """
    Resolves a place name (e.g., "Chennai, India") to coordinates for the weather view.
    Returns a dictionary with 'latitude', 'longitude' and 'display_name', or with
    'error' and a 'reason' of 'not_found', 'request_failed' or 'bad_response'.
    """
    print(f"---TOOL: Geocoding for '{location_query}'---")
    # Nominatim (OpenStreetMap) needs no API key but requires a user-agent
    params = {'q': location_query, 'format': 'json', 'limit': 1}
    headers = {'User-Agent': settings.geocoding_user_agent}

    try:
        response = requests.get(NOMINATIM_URL, params=params, headers=headers)
        response.raise_for_status()
        data = response.json()

        if not data:
            return {"error": "Location not found.", "reason": "not_found"}
        return {
            "latitude": float(data[0]['lat']),
            "longitude": float(data[0]['lon']),
            "display_name": data[0].get('display_name', location_query),
        }

    except requests.exceptions.RequestException as e:
        return {"error": f"Geocoding request failed: {e}", "reason": "request_failed"}
    except (KeyError, IndexError, TypeError, ValueError) as e:
        return {"error": f"Error parsing geocoding data: {e}", "reason": "bad_response"}

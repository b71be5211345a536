# core/schemas.py
"""
Output schemas bound to the structured Gemini calls.

These dictionaries are the wire contract with the model. Every reply is
validated again against the matching model in `core.models`, so a reply the
service lets through but that does not fit the contract still fails loudly.
"""

from typing import Optional


def _string(description: Optional[str] = None) -> dict:
    schema = {"type": "string"}
    if description:
        schema["description"] = description
    return schema


def _number(description: str) -> dict:
    return {"type": "number", "description": description}


def _string_list() -> dict:
    return {"type": "array", "items": {"type": "string"}}


DISEASE_ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "disease_name": _string(),
        "is_healthy": {"type": "boolean"},
        "description": _string(),
        "causes": _string_list(),
        "treatment_recommendations": {
            "type": "object",
            "properties": {
                "organic": _string_list(),
                "chemical": _string_list(),
            },
            "required": ["organic", "chemical"],
        },
    },
    "required": ["disease_name", "is_healthy", "description", "causes", "treatment_recommendations"],
}

WEATHER_SCHEMA = {
    "type": "object",
    "properties": {
        "current": {
            "type": "object",
            "properties": {
                "temp_c": _number("Current temperature in Celsius"),
                "condition": _string("e.g., Sunny, Partly Cloudy"),
                "humidity": _number("Humidity percentage"),
                "wind_kph": _number("Wind speed in km/h"),
                "precip_mm": _number("Precipitation in millimeters"),
                "uv_index": _number("UV Index"),
            },
            "required": ["temp_c", "condition", "humidity", "wind_kph", "precip_mm", "uv_index"],
        },
        "forecast": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "date": _string("Forecast date (YYYY-MM-DD)"),
                    "day": _string("Day of the week"),
                    "max_temp_c": _number("Maximum temperature in Celsius"),
                    "min_temp_c": _number("Minimum temperature in Celsius"),
                    "condition": _string("Forecasted weather condition"),
                    "chance_of_rain": _number("Probability of rain as a percentage"),
                },
                "required": ["date", "day", "max_temp_c", "min_temp_c", "condition", "chance_of_rain"],
            },
        },
        "soil": {
            "type": "object",
            "properties": {
                "temperature_c": _number("Soil temperature at 10cm depth in Celsius"),
                "moisture_percent": _number("Soil moisture percentage"),
            },
            "required": ["temperature_c", "moisture_percent"],
        },
    },
    "required": ["current", "forecast", "soil"],
}

LEARNING_RESOURCES_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "title": _string(),
            "summary": _string(),
            "techniques": _string_list(),
            "source": _string(),
        },
        "required": ["title", "summary", "techniques", "source"],
    },
}

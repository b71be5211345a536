import json

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from pydantic import Field

from core.gateway import GatewayClient


class RecordingChatModel(FakeListChatModel):
    """Replays canned replies and remembers every call it received."""
    calls: list = Field(default_factory=list)

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        self.calls.append({"messages": messages, "kwargs": kwargs})
        return super()._call(messages, stop=stop, run_manager=run_manager, **kwargs)


class OfflineChatModel(FakeListChatModel):
    """Fails every call the way a dropped connection would."""

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        raise ConnectionError("Network is unreachable")


HEALTHY_ANALYSIS = {
    "disease_name": "Healthy",
    "is_healthy": True,
    "description": "Your tomato leaf looks vigorous and green.",
    "causes": [],
    "treatment_recommendations": {"organic": [], "chemical": []},
}

DISEASED_ANALYSIS = {
    "disease_name": "Early Blight",
    "is_healthy": False,
    "description": "Concentric brown rings on older leaves.",
    "causes": ["Alternaria solani fungus", "Warm, humid weather"],
    "treatment_recommendations": {
        "organic": ["Remove infected leaves", "Copper-based spray"],
        "chemical": ["Chlorothalonil"],
    },
}


def forecast_day(date: str, day: str) -> dict:
    return {
        "date": date, "day": day, "max_temp_c": 31, "min_temp_c": 22,
        "condition": "Partly Cloudy", "chance_of_rain": 40,
    }


WEATHER = {
    "current": {
        "temp_c": 29.5, "condition": "Sunny", "humidity": 64,
        "wind_kph": 11, "precip_mm": 0, "uv_index": 8,
    },
    "forecast": [
        forecast_day("2024-05-01", "Wednesday"),
        forecast_day("2024-05-02", "Thursday"),
        forecast_day("2024-05-03", "Friday"),
    ],
    "soil": {"temperature_c": 26.1, "moisture_percent": 38},
}


def learning_resource(n: int) -> dict:
    return {
        "title": f"Technique {n}",
        "summary": "A modern approach to sustainable farming.",
        "techniques": ["Plan the beds", "Monitor moisture"],
        "source": "Fictional Agronomy Journal",
    }


LEARNING_RESOURCES = [learning_resource(n) for n in range(1, 6)]


def as_json(payload) -> str:
    return json.dumps(payload)


@pytest.fixture
def make_gateway():
    """Builds a gateway over a recording model that replies with the given texts."""
    def _make(*responses, enforce_response_schema=True):
        llm = RecordingChatModel(responses=list(responses) or [""])
        return GatewayClient(llm, enforce_response_schema=enforce_response_schema), llm
    return _make


@pytest.fixture
def offline_gateway():
    return GatewayClient(OfflineChatModel(responses=[""]))

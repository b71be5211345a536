# core/models.py

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Literal
from datetime import datetime, timezone
import uuid


def new_id() -> str:
    return uuid.uuid4().hex


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class User(BaseModel):
    """The signed-in farmer. Held in memory for the session only."""
    name: str
    email: str
    picture: str


# --- Records returned by the AI service ---

class AIRecord(BaseModel):
    """Base for replies from the AI service; unknown keys are rejected."""
    model_config = ConfigDict(extra="forbid")


class TreatmentRecommendations(AIRecord):
    organic: List[str]
    chemical: List[str]


class DiseaseAnalysis(AIRecord):
    """Diagnosis of a single plant leaf image."""
    disease_name: str
    is_healthy: bool
    description: str
    causes: List[str]
    treatment_recommendations: TreatmentRecommendations

    @model_validator(mode="after")
    def check_diseased_fields(self):
        if not self.is_healthy and not self.causes:
            raise ValueError("a diseased plant must list at least one cause")
        return self


class CurrentWeather(AIRecord):
    temp_c: float
    condition: str
    humidity: float
    wind_kph: float
    precip_mm: float
    uv_index: float


class ForecastDay(AIRecord):
    date: str
    day: str
    max_temp_c: float
    min_temp_c: float
    condition: str
    chance_of_rain: float


class SoilConditions(AIRecord):
    temperature_c: float
    moisture_percent: float


class WeatherData(AIRecord):
    current: CurrentWeather
    forecast: List[ForecastDay] = Field(min_length=3, max_length=3)
    soil: SoilConditions


class LearningResource(AIRecord):
    title: str
    summary: str
    techniques: List[str]
    source: str


# --- Local view-state records ---

class ChatMessage(BaseModel):
    """A single conversational turn. Never mutated once appended."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    role: Literal["user", "model"]
    text: str


class CalendarEvent(BaseModel):
    id: str = Field(default_factory=new_id)
    date: str  # YYYY-MM-DD
    title: str
    description: str = ""


class Author(BaseModel):
    name: str
    picture: str

    @classmethod
    def from_user(cls, user: User) -> "Author":
        return cls(name=user.name, picture=user.picture)


class ForumReply(BaseModel):
    id: str = Field(default_factory=new_id)
    author: Author
    content: str
    timestamp: str = Field(default_factory=utc_timestamp)


class ForumPost(BaseModel):
    id: str = Field(default_factory=new_id)
    author: Author
    title: str
    content: str
    timestamp: str = Field(default_factory=utc_timestamp)
    replies: List[ForumReply] = Field(default_factory=list)

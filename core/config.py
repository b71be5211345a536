# core/config.py

from typing import Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Loads application settings from .env file."""
    google_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("google_api_key", "api_key")
    )
    model_name: str = "gemini-2.5-flash"

    # Bind the JSON output schema to the model call, not only describe it in the prompt
    enforce_response_schema: bool = True

    # Federated sign-in (Google)
    google_client_id: Optional[str] = None

    # Development stand-in for a one-time-passcode service
    verification_code: str = "123456"

    geocoding_user_agent: str = "PlantsDoctor/1.0"

    @property
    def federated_login_enabled(self) -> bool:
        return bool(self.google_client_id)

    class Config:
        env_file = ".env"
        extra = "ignore"

# Create a single, reusable instance of the settings
settings = Settings()

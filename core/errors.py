# core/errors.py

from typing import Optional

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class PlantsDoctorError(Exception):
    """Base class for every error a view may show to the farmer."""

    default_message = UNKNOWN_ERROR_MESSAGE

    def __init__(self, user_message: Optional[str] = None):
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)


class InvalidResponseError(PlantsDoctorError):
    """The AI service replied with text that does not match the expected shape."""

    default_message = "The AI returned an invalid response. Please try again."

    def __init__(self, user_message: Optional[str] = None, raw_text: str = ""):
        super().__init__(user_message)
        self.raw_text = raw_text


class TransportError(PlantsDoctorError):
    """The outbound call to the AI service failed."""


class PermissionDeniedError(PlantsDoctorError):
    """A device capability (location, camera) was not granted."""

    default_message = "Permission denied. Please enable it in your browser settings."


class FormValidationError(PlantsDoctorError):
    """Required form input is missing or invalid. Raised before any network call."""

    default_message = "Please fill in all required fields."


class IdentityVerificationError(PlantsDoctorError):
    default_message = "Could not verify Google Sign-In. Please try again."


class ConfigurationError(PlantsDoctorError):
    default_message = "The application is not configured. Please set GOOGLE_API_KEY."

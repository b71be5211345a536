# core/gateway.py

import base64
import re
from typing import Annotated, List, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate
from pydantic import Field, TypeAdapter, ValidationError

from .chat_session import ChatSession, SYSTEM_INSTRUCTION, message_text
from .errors import FormValidationError, InvalidResponseError, TransportError
from .models import DiseaseAnalysis, LearningResource, WeatherData
from .schemas import DISEASE_ANALYSIS_SCHEMA, LEARNING_RESOURCES_SCHEMA, WEATHER_SCHEMA

LEARNING_RESOURCE_COUNT = 5
FORECAST_DAYS = 3

SUPPORTED_LANGUAGES = {
    "en": "English",
    "es": "Spanish",
    "hi": "Hindi",
    "ta": "Tamil",
    "bn": "Bengali",
    "pt": "Portuguese",
    "ar": "Arabic",
    "sw": "Swahili",
}

DIAGNOSIS_ERROR = "The AI returned an invalid response. Please try again."
WEATHER_ERROR = "Could not retrieve weather data for your location."
LEARNING_ERROR = "Could not fetch learning resources."
TRANSCRIPTION_ERROR = "Sorry, I could not make out your question. Please try again."

_CODE_FENCE = re.compile(r"```(?:json)?\s*|```")

_diagnosis_adapter = TypeAdapter(DiseaseAnalysis)
_weather_adapter = TypeAdapter(WeatherData)
_learning_adapter = TypeAdapter(
    Annotated[List[LearningResource], Field(min_length=LEARNING_RESOURCE_COUNT, max_length=LEARNING_RESOURCE_COUNT)]
)


def strip_code_fences(text: str) -> str:
    """Removes ```json fences the model sometimes wraps around its reply."""
    return _CODE_FENCE.sub("", text).strip()


class GatewayClient:
    """
    The single entry point to the remote generative model.

    Each operation builds a prompt (and, for structured operations, an output
    schema), makes exactly one call to the model, and returns a typed result.
    There is no retry and no caching. A failed call raises TransportError; a
    reply that is not the expected JSON raises InvalidResponseError.
    """

    def __init__(self, llm: BaseChatModel, enforce_response_schema: bool = True):
        self.llm = llm
        self.enforce_response_schema = enforce_response_schema

        self.diagnosis_instructions = (
            "Analyze this plant image for diseases. Provide a detailed analysis including the disease name, "
            "whether the plant is healthy, a description, causes, and treatment recommendations "
            "(both organic and chemical). If the plant is healthy, provide a positive message in the "
            "description and other fields can be empty.\n\n"
            + JsonOutputParser(pydantic_object=DiseaseAnalysis).get_format_instructions()
        )

        self.weather_prompt = ChatPromptTemplate.from_template(
            """Provide a detailed weather forecast for agricultural purposes at latitude {lat} and longitude {lon}.
Include current conditions, a {days}-day forecast, and soil data.

{format_instructions}
"""
        ).partial(
            days=str(FORECAST_DAYS),
            format_instructions=JsonOutputParser(pydantic_object=WeatherData).get_format_instructions(),
        )

        self.learning_prompt = ChatPromptTemplate.from_template(
            """Generate a list of {count} diverse and modern farming techniques. For each technique, provide a title, a brief summary, a list of key techniques or steps, and a fictional source name.
Return a JSON array of exactly {count} objects, each following this format:

{format_instructions}
"""
        ).partial(
            count=str(LEARNING_RESOURCE_COUNT),
            format_instructions=JsonOutputParser(pydantic_object=LearningResource).get_format_instructions(),
        )

        self.translation_prompt = ChatPromptTemplate.from_template(
            'Translate the following text to {target_language}. Provide only the translation, '
            'with no additional commentary or explanations:\n\n"{text}"'
        )

        self.transcription_instructions = (
            "Transcribe this recording of a farmer asking a question. Keep the language it is spoken in. "
            "Reply with only the transcription."
        )

    # --- Plumbing ---

    def _invoke(self, operation: str, prompt_input, schema: Optional[dict] = None) -> str:
        model = self.llm
        if schema is not None and self.enforce_response_schema:
            model = self.llm.bind(response_mime_type="application/json", response_schema=schema)

        print(f"---GATEWAY: {operation}---")
        try:
            response = model.invoke(prompt_input)
        except Exception as e:
            print(f"Error in GatewayClient.{operation}: {type(e).__name__} - {e}")
            raise TransportError() from e
        return message_text(response)

    def _parse(self, operation: str, text: str, adapter: TypeAdapter, error_message: str):
        try:
            return adapter.validate_json(strip_code_fences(text))
        except ValidationError as e:
            print(f"Failed to parse {operation} response as JSON: {text}")
            raise InvalidResponseError(error_message, raw_text=text) from e

    # --- Operations ---

    def diagnose_image(self, image_bytes: bytes, mime_type: str) -> DiseaseAnalysis:
        if not image_bytes:
            raise FormValidationError("Please select an image first.")
        if not mime_type or not mime_type.startswith("image/"):
            raise FormValidationError("Please select an image file (PNG, JPG, WEBP).")

        data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"
        message = HumanMessage(content=[
            {"type": "image_url", "image_url": {"url": data_url}},
            {"type": "text", "text": self.diagnosis_instructions},
        ])
        text = self._invoke("diagnose_image", [message], DISEASE_ANALYSIS_SCHEMA)
        return self._parse("diagnosis", text, _diagnosis_adapter, DIAGNOSIS_ERROR)

    def fetch_weather(self, lat: float, lon: float) -> WeatherData:
        if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
            raise FormValidationError("Invalid coordinates. Latitude must be within ±90 and longitude within ±180.")

        prompt_value = self.weather_prompt.invoke({"lat": lat, "lon": lon})
        text = self._invoke("fetch_weather", prompt_value, WEATHER_SCHEMA)
        return self._parse("weather", text, _weather_adapter, WEATHER_ERROR)

    def fetch_learning_resources(self) -> List[LearningResource]:
        prompt_value = self.learning_prompt.invoke({})
        text = self._invoke("fetch_learning_resources", prompt_value, LEARNING_RESOURCES_SCHEMA)
        return self._parse("learning resources", text, _learning_adapter, LEARNING_ERROR)

    def translate(self, text: str, target_language_name: str) -> str:
        if not text or not text.strip():
            raise FormValidationError("There is no text to translate.")

        prompt_value = self.translation_prompt.invoke({"text": text, "target_language": target_language_name})
        return self._invoke("translate", prompt_value).strip()

    def transcribe(self, audio_bytes: bytes, mime_type: str) -> str:
        """Turns a spoken question into text for the chat."""
        if not audio_bytes:
            raise FormValidationError("Please record a question first.")
        if not mime_type or not mime_type.startswith("audio/"):
            raise FormValidationError("Please record your question as audio.")

        message = HumanMessage(content=[
            {"type": "media", "mime_type": mime_type, "data": base64.b64encode(audio_bytes).decode("ascii")},
            {"type": "text", "text": self.transcription_instructions},
        ])
        text = self._invoke("transcribe", [message]).strip()
        if not text:
            raise InvalidResponseError(TRANSCRIPTION_ERROR, raw_text=text)
        return text

    def open_chat(self, system_instruction: str = SYSTEM_INSTRUCTION) -> ChatSession:
        print("---GATEWAY: Opening chat session---")
        return ChatSession(self.llm, system_instruction)

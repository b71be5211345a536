# core/llm.py

from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from .config import Settings, settings as default_settings
from .errors import ConfigurationError
from .gateway import GatewayClient


def build_llm(settings: Settings = default_settings) -> BaseChatModel:
    """Creates the Gemini chat model. Fails fast when no API key is configured."""
    if not settings.google_api_key:
        raise ConfigurationError("GOOGLE_API_KEY (or API_KEY) environment variable not set.")
    print(f"---LLM: Using {settings.model_name}---")
    return ChatGoogleGenerativeAI(model=settings.model_name, google_api_key=settings.google_api_key,
                                  max_retries=1)


def build_gateway(settings: Settings = default_settings) -> GatewayClient:
    return GatewayClient(build_llm(settings), enforce_response_schema=settings.enforce_response_schema)

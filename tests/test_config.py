import pytest

from core.config import Settings
from core.errors import ConfigurationError
from core.llm import build_gateway, build_llm


def test_api_key_read_from_either_variable(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "from-api-key")
    assert Settings(_env_file=None).google_api_key == "from-api-key"

    monkeypatch.delenv("API_KEY")
    monkeypatch.setenv("GOOGLE_API_KEY", "from-google-api-key")
    assert Settings(_env_file=None).google_api_key == "from-google-api-key"


def test_defaults(monkeypatch):
    for name in ("GOOGLE_API_KEY", "API_KEY", "GOOGLE_CLIENT_ID", "VERIFICATION_CODE", "MODEL_NAME"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)

    assert settings.model_name == "gemini-2.5-flash"
    assert settings.verification_code == "123456"
    assert settings.enforce_response_schema is True
    assert settings.federated_login_enabled is False


def test_gateway_needs_an_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        build_gateway(Settings(_env_file=None))


def test_model_makes_a_single_attempt_per_call():
    llm = build_llm(Settings(_env_file=None, google_api_key="x"))
    assert llm.max_retries == 1

import pytest
import requests

from core import session_manager as session_module
from core.config import Settings
from core.errors import FormValidationError, IdentityVerificationError
from core.session_manager import SessionManager

CLIENT_ID = "1234-plants.apps.googleusercontent.com"


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self.payload = payload

    def json(self):
        return self.payload


def google_claims(**overrides):
    claims = {
        "iss": "https://accounts.google.com",
        "aud": CLIENT_ID,
        "email": "ravi@example.com",
        "name": "Ravi Kumar",
        "picture": "https://lh3.googleusercontent.com/a/ravi",
    }
    claims.update(overrides)
    return claims


def test_correct_code_completes_login():
    sessions = SessionManager(verification_code="123456")
    pending = sessions.sign_in("ravi@example.com", "secret")

    assert sessions.is_authenticated is False
    assert sessions.verify("123456") is None
    assert sessions.is_authenticated is True
    assert sessions.user == pending
    assert sessions.user.name == "ravi"


@pytest.mark.parametrize("code", ["654321", "000000", "123457"])
def test_wrong_code_returns_error_and_stays_logged_out(code):
    sessions = SessionManager(verification_code="123456")
    sessions.sign_in("ravi@example.com", "secret")

    error = sessions.verify(code)
    assert error
    assert sessions.is_authenticated is False
    assert sessions.pending_user is not None


@pytest.mark.parametrize("code", ["", "12345", "abcdef", "1234567"])
def test_malformed_code_is_rejected(code):
    sessions = SessionManager(verification_code="123456")
    sessions.sign_in("ravi@example.com", "secret")

    assert sessions.verify(code)
    assert sessions.is_authenticated is False


def test_verify_without_pending_user():
    sessions = SessionManager(verification_code="123456")
    assert sessions.verify("123456")
    assert sessions.is_authenticated is False


def test_sign_up_requires_every_field():
    sessions = SessionManager()
    with pytest.raises(FormValidationError) as excinfo:
        sessions.sign_up("", "ravi@example.com", "secret")
    assert excinfo.value.user_message == "Please fill in all fields to sign up."

    user = sessions.sign_up("Ravi Kumar", "ravi@example.com", "secret")
    assert user.name == "Ravi Kumar"
    assert user.picture.startswith("https://api.dicebear.com/8.x/initials/svg?seed=Ravi")


def test_sign_in_requires_email_and_password():
    with pytest.raises(FormValidationError) as excinfo:
        SessionManager().sign_in("ravi@example.com", "")
    assert excinfo.value.user_message == "Please enter both email and password."


def test_logout_discards_user():
    sessions = SessionManager(verification_code="123456")
    sessions.sign_in("ravi@example.com", "secret")
    sessions.verify("123456")

    sessions.logout()
    assert sessions.is_authenticated is False
    assert sessions.user is None


def test_id_token_verified_by_provider(monkeypatch):
    requested = {}

    def fake_get(url, params=None, timeout=None):
        requested.update(url=url, params=params)
        return FakeResponse(200, google_claims())

    monkeypatch.setattr(session_module.requests, "get", fake_get)
    sessions = SessionManager(google_client_id=CLIENT_ID)
    user = sessions.login_with_id_token("header.payload.signature")

    assert requested["params"] == {"id_token": "header.payload.signature"}
    assert user.name == "Ravi Kumar"
    assert sessions.is_authenticated is True


def test_id_token_rejected_by_provider(monkeypatch):
    monkeypatch.setattr(session_module.requests, "get",
                        lambda url, params=None, timeout=None: FakeResponse(400, {"error": "invalid_token"}))
    sessions = SessionManager(google_client_id=CLIENT_ID)

    with pytest.raises(IdentityVerificationError):
        sessions.login_with_id_token("forged.token.value")
    assert sessions.is_authenticated is False


def test_id_token_for_another_audience_is_rejected(monkeypatch):
    monkeypatch.setattr(session_module.requests, "get",
                        lambda url, params=None, timeout=None: FakeResponse(200, google_claims(aud="someone-else")))
    sessions = SessionManager(google_client_id=CLIENT_ID)

    with pytest.raises(IdentityVerificationError):
        sessions.login_with_id_token("header.payload.signature")


def test_id_token_network_failure(monkeypatch):
    def offline(url, params=None, timeout=None):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(session_module.requests, "get", offline)
    with pytest.raises(IdentityVerificationError):
        SessionManager(google_client_id=CLIENT_ID).login_with_id_token("a.b.c")


def test_id_token_requires_client_id(monkeypatch):
    monkeypatch.setattr(session_module, "settings", Settings(_env_file=None, google_client_id=None))
    with pytest.raises(IdentityVerificationError):
        SessionManager().login_with_id_token("a.b.c")


def test_defaults_follow_current_settings(monkeypatch):
    monkeypatch.setattr(session_module, "settings",
                        Settings(_env_file=None, verification_code="654321", google_client_id=CLIENT_ID))
    sessions = SessionManager()
    assert sessions.google_client_id == CLIENT_ID

    sessions.sign_in("ravi@example.com", "secret")
    assert sessions.verify("123456")
    assert sessions.verify("654321") is None
    assert sessions.is_authenticated


def test_login_with_claims_falls_back_to_generated_avatar():
    user = SessionManager().login_with_claims({"email": "meera@example.com"})
    assert user.name == "meera"
    assert "dicebear" in user.picture

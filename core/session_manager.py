# core/session_manager.py

import re
from typing import Optional
from urllib.parse import quote

import requests

from .config import settings
from .errors import FormValidationError, IdentityVerificationError
from .models import User

TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")

_SIX_DIGITS = re.compile(r"^\d{6}$")


def avatar_url(seed: str) -> str:
    return f"https://api.dicebear.com/8.x/initials/svg?seed={quote(seed)}"


class SessionManager:
    """
    Holds the signed-in user for one app session.

    E-mail sign-in is a mock: any non-empty credentials produce a pending user,
    which becomes the session user once the verification code is entered.
    Federated sign-in verifies the identity token with the provider.
    """

    def __init__(self, verification_code: Optional[str] = None,
                 google_client_id: Optional[str] = None):
        self.verification_code = verification_code or settings.verification_code
        self.google_client_id = google_client_id or settings.google_client_id
        self.user: Optional[User] = None
        self.pending_user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    # --- E-mail flow ---

    def sign_up(self, name: str, email: str, password: str) -> User:
        if not name or not email or not password:
            raise FormValidationError("Please fill in all fields to sign up.")
        self.pending_user = User(name=name, email=email, picture=avatar_url(name))
        print(f"---SESSION MANAGER: Pending sign-up for {email}---")
        return self.pending_user

    def sign_in(self, email: str, password: str) -> User:
        if not email or not password:
            raise FormValidationError("Please enter both email and password.")
        self.pending_user = User(name=email.split("@")[0], email=email, picture=avatar_url(email))
        print(f"---SESSION MANAGER: Pending sign-in for {email}---")
        return self.pending_user

    def verify(self, code: str) -> Optional[str]:
        """Completes a pending login. Returns an error message, or None on success."""
        if self.pending_user is None:
            return "There is no sign-in waiting for verification."
        code = (code or "").strip()
        if not _SIX_DIGITS.match(code):
            return "Please enter the 6-digit verification code."
        if code != self.verification_code:
            return "Invalid verification code. Please try again."

        self.user, self.pending_user = self.pending_user, None
        print(f"---SESSION MANAGER: Logged in {self.user.email}---")
        return None

    def cancel_verification(self):
        self.pending_user = None

    # --- Federated flow ---

    def login_with_id_token(self, token: str) -> User:
        """Verifies a Google ID token with Google and signs its owner in."""
        if not self.google_client_id:
            raise IdentityVerificationError("Google Sign-In is not configured.")

        try:
            response = requests.get(TOKENINFO_URL, params={"id_token": token}, timeout=10)
        except requests.exceptions.RequestException as e:
            print(f"Error in SessionManager.login_with_id_token: {type(e).__name__} - {e}")
            raise IdentityVerificationError() from e

        if response.status_code != 200:
            print(f"---SESSION MANAGER: Token rejected by provider ({response.status_code})---")
            raise IdentityVerificationError()

        claims = response.json()
        if claims.get("aud") != self.google_client_id or claims.get("iss") not in GOOGLE_ISSUERS:
            print("---SESSION MANAGER: Token audience or issuer mismatch---")
            raise IdentityVerificationError()
        return self.login_with_claims(claims)

    def login_with_claims(self, claims: dict) -> User:
        """Signs in from identity claims that have already been verified."""
        email = claims.get("email")
        if not email:
            raise IdentityVerificationError()
        self.user = User(
            name=claims.get("name") or email.split("@")[0],
            email=email,
            picture=claims.get("picture") or avatar_url(email),
        )
        self.pending_user = None
        print(f"---SESSION MANAGER: Logged in {email} via federated identity---")
        return self.user

    def logout(self):
        print("---SESSION MANAGER: Logged out---")
        self.user = None
        self.pending_user = None

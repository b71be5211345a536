# views/community.py

from typing import List, Optional
from core.chat_session import ChatSession
from core.gateway import GatewayClient
from core.models import ChatMessage
from .base import FeatureView, ViewState

WELCOME_MESSAGE = "Welcome to the AI Chatbot! I am Plants Doctor. Ask me anything about farming."
CHAT_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."


class CommunityView(FeatureView):
    """
    The AI chatbot. Owns its chat session, which is opened on the first
    message and reused for every later one, so each view instance carries
    an independent conversation.
    """

    name = "community"

    def __init__(self, gateway: GatewayClient):
        super().__init__()
        self.gateway = gateway
        self.chat: Optional[ChatSession] = None
        self.voice = ViewState()
        self.messages: List[ChatMessage] = [ChatMessage(id="initial", role="model", text=WELCOME_MESSAGE)]

    def _session(self) -> ChatSession:
        if self.chat is None:
            self.chat = self.gateway.open_chat()
        return self.chat

    def send(self, text: str) -> bool:
        if not text or not text.strip() or self.state.is_loading:
            return False

        self.messages.append(ChatMessage(role="user", text=text))
        ok = self._run(self._reply, text)
        reply = self.state.result if ok else CHAT_ERROR_MESSAGE
        self.messages.append(ChatMessage(role="model", text=reply))
        return ok

    def _reply(self, text: str) -> str:
        return self._session().send(text)

    def send_voice(self, audio_bytes: bytes, mime_type: str) -> bool:
        """Transcribes a spoken question and sends it as a chat message."""
        if self.state.is_loading:
            return False
        if not self._run(self.gateway.transcribe, audio_bytes, mime_type, state=self.voice):
            return False
        return self.send(self.voice.result)

# core/chat_session.py

import threading
from typing import List
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder
from .errors import TransportError

SYSTEM_INSTRUCTION = """You are Plants Doctor, an expert agricultural assistant in a community forum for farmers.
Your tone should be knowledgeable, friendly, and supportive. Provide practical, actionable advice.
Keep your answers concise but thorough. Always prioritize sustainable and safe farming practices."""


def message_text(message: BaseMessage) -> str:
    """Flattens a chat model reply into plain text."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class ChatSession:
    """
    One ongoing conversation with the assistant.

    Every turn is sent together with the system instruction and the full prior
    history, so later answers can refer to earlier ones. Sends are serialised:
    a message is only issued once the reply to the previous one has arrived.
    """

    def __init__(self, llm: BaseChatModel, system_instruction: str = SYSTEM_INSTRUCTION):
        self.llm = llm
        self.system_instruction = system_instruction
        self.history: List[BaseMessage] = []
        self._lock = threading.Lock()
        self.prompt = ChatPromptTemplate.from_messages([
            ("system", "{system_instruction}"),
            MessagesPlaceholder("history"),
            ("human", "{message}"),
        ])
        self.chain = self.prompt | self.llm

    def send(self, user_text: str) -> str:
        with self._lock:
            print(f"---CHAT SESSION: Sending turn {len(self.history) // 2 + 1}---")
            try:
                response = self.chain.invoke({
                    "system_instruction": self.system_instruction,
                    "history": list(self.history),
                    "message": user_text,
                })
            except Exception as e:
                print(f"Error in ChatSession: {type(e).__name__} - {e}")
                raise TransportError() from e

            reply = message_text(response)
            # History only grows once the turn has fully succeeded
            self.history.extend([HumanMessage(content=user_text), AIMessage(content=reply)])
            return reply

    def turns(self) -> List[tuple]:
        """Returns the history as (role, text) pairs."""
        return [("user" if m.type == "human" else "model", m.content) for m in self.history]

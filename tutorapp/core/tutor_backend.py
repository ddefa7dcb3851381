from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


# =========================
# Conversation Datamodels
# =========================

class Speaker(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    speaker: Speaker
    text: str
    mode: Optional[str] = None    # mode the assistant turn was produced under
    is_error: bool = False        # inline error turn, never sent as feedback
    language: Optional[str] = None  # target language the turn was requested in

    def to_message(self) -> dict:
        return {"role": self.speaker.value, "content": self.text}


# =========================
# Input / Output Datamodels
# =========================

@dataclass
class TutorResponse:
    success: bool
    content: str                  # trimmed provider text ("" is valid)
    latency_ms: Optional[int] = None
    error: Optional[str] = None   # user-facing message
    reason: Optional[str] = None  # credential_missing | timeout | auth | ...


# =========================
# Backend Interface
# =========================

class TutorBackend(Protocol):
    def complete(self, messages: list[dict]) -> str:
        """Sends one chat completion and returns the first choice's text.

        Raises CredentialMissing or TransportFailure.
        """
        ...

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from tutorapp.core.interpreter import Interpretation, Raw, interpret
from tutorapp.core.modes import Mode, TargetLanguage
from tutorapp.core.orchestrator import request_reply
from tutorapp.core.tutor_backend import Speaker, Turn, TutorBackend, TutorResponse


class Conversation:
    """Ordered, append-only turn history. Owned by the caller."""

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))

    def append(self, turn: Turn) -> Turn:
        self._turns.append(turn)
        return turn

    def append_user(self, text: str) -> Turn:
        return self.append(Turn(Speaker.USER, text))

    def append_assistant(
        self,
        text: str,
        *,
        mode: Optional[Mode] = None,
        language: Optional[TargetLanguage] = None,
        is_error: bool = False,
    ) -> Turn:
        return self.append(
            Turn(
                Speaker.ASSISTANT,
                text,
                mode=mode.value if mode else None,
                is_error=is_error,
                language=language.value if language else None,
            )
        )

    def history(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def last(self) -> Optional[Turn]:
        return self._turns[-1] if self._turns else None

    def reset(self) -> None:
        self._turns.clear()


@dataclass(frozen=True)
class TutorReply:
    turn: Turn
    interpretation: Interpretation
    response: TutorResponse

    @property
    def is_error(self) -> bool:
        return not self.response.success

    @property
    def language(self) -> TargetLanguage:
        return TargetLanguage.parse(self.turn.language or TargetLanguage.EN)


def join_voice_input(pending: str, spoken: str) -> str:
    """Voice results are appended to whatever was already typed."""
    spoken = (spoken or "").strip()
    if not spoken:
        return pending
    return f"{pending} {spoken}" if pending else spoken


class TutorSession:
    """
    One tutoring chat: language/mode pickers plus history.

    send(): user turn -> one provider call -> assistant turn (or inline error turn).
    Overlapping sends are not serialized; replies append in completion order.
    """

    def __init__(
        self,
        backend: TutorBackend,
        *,
        language: TargetLanguage = TargetLanguage.EN,
        mode: Mode = Mode.EXPLAIN,
        conversation: Optional[Conversation] = None,
    ) -> None:
        self.backend = backend
        self.language = TargetLanguage.parse(language)
        self.mode = Mode.parse(mode)
        self.conversation = conversation if conversation is not None else Conversation()

    def set_mode(self, mode: "str | Mode") -> Mode:
        self.mode = Mode.parse(mode)
        return self.mode

    def set_language(self, language: "str | TargetLanguage") -> TargetLanguage:
        self.language = TargetLanguage.parse(language)
        return self.language

    def reset(self) -> None:
        self.conversation.reset()

    def send(self, text: str) -> Optional[TutorReply]:
        text = (text or "").strip()
        if not text:
            return None

        # mode/language are fixed per request
        mode, language = self.mode, self.language

        self.conversation.append_user(text)
        resp = request_reply(self.conversation.history(), mode, language, self.backend)

        if not resp.success:
            msg = f"Erro: {resp.error or 'Erro desconhecido'}"
            turn = self.conversation.append_assistant(msg, mode=mode, language=language, is_error=True)
            return TutorReply(turn=turn, interpretation=Raw(msg), response=resp)

        turn = self.conversation.append_assistant(resp.content, mode=mode, language=language)
        return TutorReply(turn=turn, interpretation=interpret(resp.content, mode), response=resp)


def interpret_turn(turn: Turn) -> Interpretation:
    """Re-reads a stored assistant turn under the mode it was produced with."""
    if turn.speaker is not Speaker.ASSISTANT or turn.is_error or not turn.mode:
        return Raw(turn.text)
    return interpret(turn.text, Mode.parse(turn.mode))

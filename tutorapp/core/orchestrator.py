from __future__ import annotations

import time
from typing import Sequence

from tutorapp.core.errors import TutorError
from tutorapp.core.modes import Mode, TargetLanguage, directive
from tutorapp.core.tutor_backend import Turn, TutorBackend, TutorResponse


def build_messages(history: Sequence[Turn], mode: Mode, language: TargetLanguage) -> list[dict]:
    """[directive] + history, turn content untouched."""
    if not history:
        raise ValueError("history must contain at least one turn")

    messages = [{"role": "system", "content": directive(language, mode)}]
    messages.extend(turn.to_message() for turn in history)
    return messages


def request_reply(
    history: Sequence[Turn],
    mode: Mode,
    language: TargetLanguage,
    backend: TutorBackend,
) -> TutorResponse:
    """
    Exactly one provider call for the newest turn in `history`.
    No retry and no state: resending a failed turn is up to the caller.
    """
    messages = build_messages(history, mode, language)

    t0 = time.perf_counter()
    try:
        content = backend.complete(messages)
    except TutorError as e:
        return TutorResponse(
            success=False,
            content="",
            latency_ms=int((time.perf_counter() - t0) * 1000),
            error=str(e),
            reason=e.reason,
        )

    return TutorResponse(
        success=True,
        content=(content or "").strip(),
        latency_ms=int((time.perf_counter() - t0) * 1000),
    )

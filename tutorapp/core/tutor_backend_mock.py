from __future__ import annotations

import json

from tutorapp.core.tutor_backend import TutorBackend


class MockTutorBackend(TutorBackend):
    """Offline backend. Picks a canned reply from the system directive."""

    def __init__(self) -> None:
        self.calls: list[list[dict]] = []

    def complete(self, messages: list[dict]) -> str:
        self.calls.append(list(messages))

        system = messages[0]["content"] if messages else ""
        last = messages[-1]["content"] if messages else ""

        if '"naturalSuggestion"' in system:
            return json.dumps(
                {
                    "corrected": f"(MOCK) {last}",
                    "translation": "",
                    "explanation": "(MOCK) Resposta de exemplo, sem correção real.",
                    "naturalSuggestion": f"(MOCK) {last}",
                    "score": 7,
                },
                ensure_ascii=False,
            )
        if '"alreadyCorrect"' in system:
            return json.dumps(
                {
                    "informal": f"(MOCK) {last}",
                    "alreadyCorrect": False,
                    "translation": "(MOCK) tradução de exemplo",
                },
                ensure_ascii=False,
            )
        return f"(MOCK) {last}"

from __future__ import annotations

import os

from tutorapp.core.tutor_backend import TutorBackend
from tutorapp.core.tutor_backend_mock import MockTutorBackend


def get_tutor_backend(name: str | None = None) -> TutorBackend:
    """Picks the tutor backend by argument or env flag.
    TUTOR_BACKEND=groq | mock
    Default: groq
    """
    backend = (name or os.getenv("TUTOR_BACKEND", "groq")).strip().lower()

    if backend == "mock":
        return MockTutorBackend()

    if backend == "groq":
        # Lazy import so Mock can run without the OpenAI dependency installed.
        from tutorapp.core.tutor_backend_groq import GroqTutorBackend

        return GroqTutorBackend()

    raise ValueError(f"Backend desconhecido: {backend!r} (permitidos: groq, mock)")

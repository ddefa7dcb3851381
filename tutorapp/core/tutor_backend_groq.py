from __future__ import annotations

import os
import time
from datetime import UTC, datetime
from typing import Any, Callable, Optional

from openai import OpenAI

from tutorapp.core.errors import CredentialMissing, TransportFailure
from tutorapp.core.tutor_backend import TutorBackend


# =========================
# Runtime Config (env)
# =========================

TUTOR_LOG = os.getenv("TUTOR_LOG", "0") == "1"

GROQ_BASE_URL = os.getenv("TUTOR_BASE_URL", "https://api.groq.com/openai/v1")
GROQ_MODEL = os.getenv("TUTOR_MODEL", "llama-3.1-8b-instant")

# Low temperature: literal corrections over creative variation
TUTOR_TEMPERATURE = float(os.getenv("TUTOR_TEMPERATURE", "0.3"))

API_KEY_ENV = "GROQ_API_KEY"


def _log_event(*, model: str, success: bool, latency_ms: int, reason: str = "") -> None:
    if not TUTOR_LOG:
        return
    ts = datetime.now(UTC).isoformat()
    # never log learner content
    tail = f" reason={reason}" if reason else ""
    print(f"\n[GROQ-TUTOR] ts={ts} model={model} success={success} latency_ms={latency_ms}{tail}\n")


def _classify_error(e: Exception) -> str:
    msg = str(e).lower()
    name = type(e).__name__.lower()
    if "timeout" in msg or "timeout" in name:
        return "timeout"
    if "unauthorized" in msg or "401" in msg or "authentication" in name:
        return "auth"
    if "quota" in msg or "billing" in msg or "insufficient" in msg or "402" in msg:
        return "billing"
    if ("rate" in msg and "limit" in msg) or "ratelimit" in name:
        return "rate_limit"
    if "connection" in msg or "connection" in name:
        return "connection"
    return "error"


def _user_facing_error(reason: str) -> str:
    if reason == "timeout":
        return "Tutor: tempo esgotado. Tente novamente."
    if reason == "auth":
        return "Tutor: erro de autenticação (verifique a GROQ_API_KEY)."
    if reason == "billing":
        return "Tutor: problema de cota/faturamento na conta do provedor."
    if reason == "rate_limit":
        return "Tutor: limite de requisições atingido. Aguarde um pouco e reenvie."
    if reason == "connection":
        return "Tutor: sem conexão com o provedor. Verifique a internet e reenvie."
    return "Tutor indisponível no momento. Tente novamente mais tarde."


def _extract_text(completion: Any) -> str:
    """First choice's message content, trimmed. No choice -> ""."""
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) if message is not None else None
    return (content or "").strip()


class GroqTutorBackend(TutorBackend):
    """Groq adapter backend (OpenAI-compatible Chat Completions API).

    The API key is read on every call; a missing key fails that call only.
    `client_factory` receives the api key and returns an OpenAI-like client.
    """

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        base_url: Optional[str] = None,
        client_factory: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self._model = model or GROQ_MODEL
        self._temperature = TUTOR_TEMPERATURE if temperature is None else temperature
        self._base_url = base_url or GROQ_BASE_URL
        self._client_factory = client_factory or self._default_client
        self._client = None
        self._client_key: Optional[str] = None

    @property
    def model(self) -> str:
        return self._model

    @property
    def temperature(self) -> float:
        return self._temperature

    def _default_client(self, api_key: str) -> OpenAI:
        return OpenAI(api_key=api_key, base_url=self._base_url, max_retries=0)

    def _get_client(self) -> Any:
        api_key = (os.getenv(API_KEY_ENV) or "").strip()
        if not api_key:
            raise CredentialMissing(f"{API_KEY_ENV} não configurada.")

        # rebuild when the key changed (e.g. .env reloaded)
        if self._client is None or self._client_key != api_key:
            self._client = self._client_factory(api_key)
            self._client_key = api_key
        return self._client

    def complete(self, messages: list[dict]) -> str:
        client = self._get_client()

        t0 = time.perf_counter()
        try:
            completion = client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=self._temperature,
            )
        except Exception as e:
            latency_ms = int((time.perf_counter() - t0) * 1000)
            reason = _classify_error(e)
            _log_event(model=self._model, success=False, latency_ms=latency_ms, reason=reason)
            raise TransportFailure(_user_facing_error(reason), reason=reason) from e

        latency_ms = int((time.perf_counter() - t0) * 1000)
        text = _extract_text(completion)
        _log_event(
            model=self._model,
            success=True,
            latency_ms=latency_ms,
            reason="" if text else "empty_output",
        )
        return text

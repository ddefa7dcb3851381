from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from tutorapp.core.modes import EXPLAIN_KEYS, INFORMAL_KEYS, Mode, Shape, expected_shape


# =========================
# Decoded shapes
# =========================

@dataclass(frozen=True)
class ExplainFeedback:
    corrected: str
    translation: str              # "" if the input was already in the target language
    explanation: str
    natural_suggestion: str
    score: float                  # 0–10


@dataclass(frozen=True)
class InformalFeedback:
    informal: str
    translation: str              # pt-BR
    already_correct: bool


@dataclass(frozen=True)
class Decoded:
    feedback: Union[ExplainFeedback, InformalFeedback]


@dataclass(frozen=True)
class Raw:
    text: str


Interpretation = Union[Decoded, Raw]


_FENCE_OPEN = re.compile(r"^```(?:[A-Za-z0-9_+-]+(?=[ \t]*\r?\n|[ \t]*[{\[]))?[ \t]*\r?\n?")
_FENCE_CLOSE = re.compile(r"\r?\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """Removes a leading ```lang / trailing ``` pair and surrounding whitespace."""
    t = (text or "").strip()
    while True:
        stripped = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", t, count=1), count=1).strip()
        if stripped == t:
            return t
        t = stripped


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_number(value: Any) -> float:
    # lenient: garbled score is cosmetic, degrade to 0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if value is None:
        return 0.0
    try:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return 0.0
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(num) or math.isinf(num):
        return 0.0
    return num


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "false", "0", "no", "nao", "não")
    return bool(value)


def _load_object(text: str, required: tuple[str, ...]) -> Optional[dict]:
    try:
        data = json.loads(strip_code_fences(text))
    except (ValueError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    if any(key not in data for key in required):
        return None
    return data


def decode_explain(text: str) -> Optional[ExplainFeedback]:
    data = _load_object(text, EXPLAIN_KEYS)
    if data is None:
        return None
    return ExplainFeedback(
        corrected=_as_str(data["corrected"]),
        translation=_as_str(data["translation"]),
        explanation=_as_str(data["explanation"]),
        natural_suggestion=_as_str(data["naturalSuggestion"]),
        score=_as_number(data["score"]),
    )


def decode_informal(text: str) -> Optional[InformalFeedback]:
    data = _load_object(text, INFORMAL_KEYS)
    if data is None:
        return None
    return InformalFeedback(
        informal=_as_str(data["informal"]),
        translation=_as_str(data["translation"]),
        already_correct=_as_bool(data["alreadyCorrect"]),
    )


def interpret(text: str, mode: Mode) -> Interpretation:
    """
    Decodes provider text into the shape the mode expects.
    Structured decode failures fall back to Raw with the provider text, never an error.
    """
    shape = expected_shape(mode)

    if shape is Shape.RAW:
        return Raw(strip_code_fences(text))

    feedback = decode_explain(text) if shape is Shape.EXPLAIN else decode_informal(text)
    if feedback is None:
        return Raw((text or "").strip())
    return Decoded(feedback)

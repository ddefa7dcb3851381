from __future__ import annotations

from enum import Enum


class Mode(str, Enum):
    TRANSLATE = "translate"
    EXPLAIN = "explain"
    CORRECT = "correct"
    INFORMAL = "informal"

    @classmethod
    def parse(cls, value: "str | Mode") -> "Mode":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Modo desconhecido: {value!r} (permitidos: {allowed})") from None


class TargetLanguage(str, Enum):
    EN = "en"
    DE = "de"

    @classmethod
    def parse(cls, value: "str | TargetLanguage") -> "TargetLanguage":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(lang.value for lang in cls)
            raise ValueError(f"Idioma desconhecido: {value!r} (permitidos: {allowed})") from None

    @property
    def english_name(self) -> str:
        return "English" if self is TargetLanguage.EN else "German"

    @property
    def portuguese_name(self) -> str:
        return "inglês" if self is TargetLanguage.EN else "alemão"

    @property
    def speech_tag(self) -> str:
        return "en-US" if self is TargetLanguage.EN else "de-DE"


class Shape(str, Enum):
    RAW = "raw"
    EXPLAIN = "explain"
    INFORMAL = "informal"


# Picker labels (UI is Portuguese)
LANGUAGE_LABELS = {
    TargetLanguage.EN: "Inglês",
    TargetLanguage.DE: "Alemão",
}

MODE_LABELS = {
    Mode.TRANSLATE: "Só traduzir",
    Mode.EXPLAIN: "Com explicações",
    Mode.CORRECT: "Apenas corrigir (inglês)",
    Mode.INFORMAL: "Inglês casual (corrige + traduz)",
}

SUGGESTIONS = [
    "Como se diz 'obrigado' em inglês?",
    "Qual a diferença entre 'good' e 'well'?",
    "Me ajude a praticar o passado",
    "Corrija isto: 'I go to school yesterday'",
]

EXPLAIN_KEYS = ("corrected", "translation", "explanation", "naturalSuggestion", "score")
INFORMAL_KEYS = ("informal", "alreadyCorrect", "translation")

_SHAPES = {
    Mode.TRANSLATE: Shape.RAW,
    Mode.CORRECT: Shape.RAW,
    Mode.EXPLAIN: Shape.EXPLAIN,
    Mode.INFORMAL: Shape.INFORMAL,
}


def expected_shape(mode: Mode) -> Shape:
    return _SHAPES[Mode.parse(mode)]


def directive(language: TargetLanguage, mode: Mode) -> str:
    """System directive for one outgoing request."""
    language = TargetLanguage.parse(language)
    mode = Mode.parse(mode)
    target = language.english_name

    if mode is Mode.TRANSLATE:
        return (
            "You are a translator. The user will write in any language (often Portuguese). "
            f"Your ONLY task is to respond with the translation into {target}. "
            "Do not correct, explain, or add anything. Just the translation."
        )

    if mode is Mode.CORRECT:
        return (
            "The user will write in English. Your ONLY task is to respond with the corrected English text. "
            "Do not explain, translate, or add anything. Just the corrected sentence."
        )

    if mode is Mode.EXPLAIN:
        return (
            f"You are a friendly {language.portuguese_name} language tutor. "
            f"The user may write in Portuguese or {target}.\n"
            "For each message you must respond with a JSON object (no markdown, no extra text) "
            "with exactly these keys:\n"
            f'- "corrected": string - the corrected version of what they wrote (in {target})\n'
            f'- "translation": string - if they wrote in Portuguese, the translation to {target}; '
            "otherwise empty string\n"
            '- "explanation": string - brief explanation of what was wrong and why (in Portuguese)\n'
            f'- "naturalSuggestion": string - a more natural or idiomatic version of the phrase in {target}\n'
            '- "score": number - a grade from 0 to 10 for their attempt\n\n'
            'Example format: {"corrected":"...","translation":"...","explanation":"...",'
            '"naturalSuggestion":"...","score":7}'
        )

    # Mode.INFORMAL
    return (
        "The user will send you phrases in English. Your tasks:\n"
        "1. Rewrite the phrase in the most informal, casual, day-to-day English possible. "
        "Use contractions, slang, and natural spoken English. "
        "If the phrase is already correct and casual, keep it as is.\n"
        '2. If the original phrase was already correct and natural, set "alreadyCorrect" to true; '
        "otherwise false.\n"
        "3. Provide the translation to Portuguese (Brazil).\n\n"
        "Respond with a JSON object only (no markdown, no extra text), with exactly these keys:\n"
        '- "informal": string - the phrase in casual/informal English\n'
        '- "alreadyCorrect": boolean - true if the original was already correct and casual\n'
        '- "translation": string - translation to Portuguese (Brazil)\n\n'
        'Example: {"informal":"Yeah, that\'s totally fine by me.","alreadyCorrect":false,'
        '"translation":"Sim, pra mim tá tranquilo."}'
    )

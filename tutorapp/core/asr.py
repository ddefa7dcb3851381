import os

WHISPER_MODEL = os.getenv("TUTOR_WHISPER_MODEL", "small")
ASR_LANG = os.getenv("TUTOR_ASR_LANG", "pt")

_MODEL_CACHE: dict = {}


def _load_model(name: str):
    import whisper  # type: ignore

    if name not in _MODEL_CACHE:
        _MODEL_CACHE[name] = whisper.load_model(name)
    return _MODEL_CACHE[name]


def transcribe_with_whisper(audio_path: str, language: str | None = None) -> str:
    # TUTOR_ASR_LANG= (empty) lets Whisper detect the language
    model = _load_model(WHISPER_MODEL)
    result = model.transcribe(
        audio_path,
        language=language or ASR_LANG or None,
        task="transcribe",
        fp16=False,
        temperature=0.0,
        condition_on_previous_text=False,
    )
    return (result.get("text") or "").strip()

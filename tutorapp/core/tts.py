from __future__ import annotations

import hashlib
from pathlib import Path

from gtts import gTTS

from tutorapp.core.modes import TargetLanguage

TTS_DIR = Path("data/tts")


def synthesize_speech(text: str, language: TargetLanguage, out_dir: Path = TTS_DIR) -> Path | None:
    """Writes an MP3 of `text` in the target language. Blank text -> None."""
    clean = (text or "").strip()
    if not clean:
        return None

    lang = TargetLanguage.parse(language)
    out_dir.mkdir(parents=True, exist_ok=True)

    # same text + language -> same file
    digest = hashlib.sha1(f"{lang.value}:{clean}".encode("utf-8")).hexdigest()[:16]
    out_path = out_dir / f"{lang.value}_{digest}.mp3"
    if out_path.exists() and out_path.stat().st_size > 0:
        return out_path

    # gTTS opens the file before fetching audio; only a finished file gets the final name
    tmp_path = out_path.with_name(out_path.name + ".part")
    try:
        gTTS(text=clean, lang=lang.value, slow=False).save(str(tmp_path))
        tmp_path.replace(out_path)
    finally:
        tmp_path.unlink(missing_ok=True)
    return out_path

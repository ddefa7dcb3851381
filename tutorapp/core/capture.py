from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Optional

import numpy as np
import sounddevice as sd

from tutorapp.core.asr import transcribe_with_whisper
from tutorapp.core.audio import (
    AUDIO_DIR,
    cleanup_audio_retention,
    pick_sample_rate,
    validate_device,
    write_wav,
)


@dataclass
class CaptureHandle:
    stream: sd.InputStream
    sample_rate: int
    on_result: Callable[[str], None]
    frames: list = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)
    stopped: bool = False


class SpeechCapture:
    """
    Microphone speech-to-text.

    start_capture(on_result) begins recording and returns a handle;
    stop(handle) ends it, transcribes and calls on_result with the text.
    """

    def __init__(
        self,
        *,
        device: int | None = None,
        language: str | None = None,
        audio_dir: Path = AUDIO_DIR,
        keep_last_audios: int = 5,
        transcribe: Callable[[str, Optional[str]], str] = transcribe_with_whisper,
    ) -> None:
        self.device = validate_device(device)
        self.language = language
        self.audio_dir = audio_dir
        self.keep_last_audios = keep_last_audios
        self._transcribe = transcribe

    def start_capture(self, on_result: Callable[[str], None]) -> CaptureHandle:
        sample_rate = pick_sample_rate(self.device)
        handle: Optional[CaptureHandle] = None

        def _callback(indata, frames, time_info, status):
            if handle is None:
                return
            with handle.lock:
                handle.frames.append(indata.copy())

        stream = sd.InputStream(
            samplerate=sample_rate,
            channels=1,
            dtype="float32",
            device=self.device,
            callback=_callback,
        )
        handle = CaptureHandle(stream=stream, sample_rate=sample_rate, on_result=on_result)
        stream.start()
        return handle

    def stop(self, handle: CaptureHandle) -> str:
        if handle.stopped:
            return ""
        handle.stopped = True
        handle.stream.stop()
        handle.stream.close()

        with handle.lock:
            chunks = list(handle.frames)
        if not chunks:
            handle.on_result("")
            return ""

        audio = np.concatenate(chunks, axis=0)
        ts = datetime.now(UTC).strftime("%Y-%m-%dT%H-%M-%S")
        wav_path = write_wav(self.audio_dir / f"{ts}_mic.wav", handle.sample_rate, audio)

        try:
            text = self._transcribe(str(wav_path), self.language)
        finally:
            cleanup_audio_retention(self.audio_dir, keep_last=self.keep_last_audios)

        handle.on_result(text)
        return text

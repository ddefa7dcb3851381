from __future__ import annotations
from pathlib import Path

import numpy as np
import sounddevice as sd
from scipy.io.wavfile import write as wav_write

AUDIO_DIR = Path("data/audio")


def list_input_devices():
    devs = sd.query_devices()
    for i, d in enumerate(devs):
        if d.get("max_input_channels", 0) > 0:
            print(f"[{i}] {d['name']} (in:{d['max_input_channels']})")


def pick_sample_rate(device: int | None, channels: int = 1) -> int:
    # prefer 16 kHz (Whisper), else the device default
    try:
        sd.check_input_settings(device=device, samplerate=16000, channels=channels)
        return 16000
    except Exception:
        dev = sd.query_devices(device, "input")
        return int(dev["default_samplerate"])


def validate_device(device: int | None) -> int | None:
    if device is None:
        return None
    try:
        sd.query_devices(device, "input")
        return device
    except Exception:
        print(f"Aviso: dispositivo {device} inválido. Usando o microfone padrão.")
        return None


def write_wav(out_path: Path, sample_rate: int, audio: np.ndarray) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    audio_i16 = np.clip(audio, -1.0, 1.0)
    audio_i16 = (audio_i16 * 32767.0).astype(np.int16)
    wav_write(str(out_path), sample_rate, audio_i16)
    return out_path


def cleanup_audio_retention(audio_dir: Path, keep_last: int = 0):
    if not audio_dir.exists():
        return

    files = sorted(
        [p for p in audio_dir.glob("*.wav") if p.is_file()],
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    if keep_last and keep_last > 0:
        for p in files[keep_last:]:
            p.unlink(missing_ok=True)


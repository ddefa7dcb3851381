import os

import numpy as np
import pytest

try:
    import tutorapp.core.capture as capture
except OSError as e:  # sounddevice without PortAudio
    pytest.skip(f"sounddevice unavailable: {e}", allow_module_level=True)


class FakeInputStream:
    instances = []

    def __init__(self, samplerate, channels, dtype, device, callback):
        self.samplerate = samplerate
        self.channels = channels
        self.callback = callback
        self.started = False
        self.stop_calls = 0
        self.closed = False
        FakeInputStream.instances.append(self)

    def start(self):
        self.started = True

    def stop(self):
        self.stop_calls += 1

    def close(self):
        self.closed = True

    def feed(self, n=160):
        self.callback(np.full((n, 1), 0.25, dtype=np.float32), n, None, None)


@pytest.fixture(autouse=True)
def fake_stream(monkeypatch):
    FakeInputStream.instances = []
    monkeypatch.setattr(capture.sd, "InputStream", FakeInputStream)
    monkeypatch.setattr(capture, "pick_sample_rate", lambda device, channels=1: 16000)


class RecordingTranscriber:
    def __init__(self, text="I went to school"):
        self.text = text
        self.paths = []

    def __call__(self, audio_path, language=None):
        self.paths.append(audio_path)
        return self.text


def _capture(tmp_path, transcribe, **kwargs):
    return capture.SpeechCapture(audio_dir=tmp_path / "audio", transcribe=transcribe, **kwargs)


def test_frames_are_written_and_transcribed(tmp_path):
    transcribe = RecordingTranscriber()
    results = []
    cap = _capture(tmp_path, transcribe)

    handle = cap.start_capture(results.append)
    stream = FakeInputStream.instances[0]
    assert stream.started and stream.samplerate == 16000 and stream.channels == 1

    stream.feed()
    stream.feed()
    assert len(handle.frames) == 2

    text = cap.stop(handle)

    assert text == "I went to school"
    assert results == ["I went to school"]
    assert stream.stop_calls == 1 and stream.closed
    assert len(transcribe.paths) == 1
    assert transcribe.paths[0].endswith("_mic.wav")
    assert os.path.exists(transcribe.paths[0])


def test_empty_capture_reports_empty_text(tmp_path):
    transcribe = RecordingTranscriber()
    results = []
    cap = _capture(tmp_path, transcribe)

    handle = cap.start_capture(results.append)
    assert cap.stop(handle) == ""

    assert results == [""]
    assert transcribe.paths == []


def test_second_stop_is_a_no_op(tmp_path):
    transcribe = RecordingTranscriber()
    results = []
    cap = _capture(tmp_path, transcribe)

    handle = cap.start_capture(results.append)
    FakeInputStream.instances[0].feed()
    cap.stop(handle)
    assert cap.stop(handle) == ""

    assert results == ["I went to school"]
    assert FakeInputStream.instances[0].stop_calls == 1
    assert len(transcribe.paths) == 1


def test_retention_runs_when_transcription_fails(tmp_path):
    audio_dir = tmp_path / "audio"
    audio_dir.mkdir()
    for i in range(3):
        old = audio_dir / f"old_{i}.wav"
        old.write_bytes(b"RIFF")
        os.utime(old, (1_000_000 + i, 1_000_000 + i))

    def broken(audio_path, language=None):
        raise RuntimeError("whisper crashed")

    results = []
    cap = _capture(tmp_path, broken, keep_last_audios=1)
    handle = cap.start_capture(results.append)
    FakeInputStream.instances[0].feed()

    with pytest.raises(RuntimeError, match="whisper crashed"):
        cap.stop(handle)

    remaining = sorted(p.name for p in audio_dir.glob("*.wav"))
    assert len(remaining) == 1
    assert remaining[0].endswith("_mic.wav")
    assert results == []

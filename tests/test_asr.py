import tutorapp.core.asr as asr


class FakeModel:
    def __init__(self):
        self.languages = []

    def transcribe(self, audio_path, language=None, **kwargs):
        self.languages.append(language)
        return {"text": "  eu fui para a escola  "}


def _use_model(monkeypatch, model):
    monkeypatch.setattr(asr, "_load_model", lambda name: model)


def test_default_language_is_portuguese(monkeypatch):
    model = FakeModel()
    _use_model(monkeypatch, model)
    monkeypatch.setattr(asr, "ASR_LANG", "pt")

    assert asr.transcribe_with_whisper("a.wav") == "eu fui para a escola"
    assert model.languages == ["pt"]


def test_empty_asr_lang_lets_whisper_detect(monkeypatch):
    model = FakeModel()
    _use_model(monkeypatch, model)
    monkeypatch.setattr(asr, "ASR_LANG", "")

    asr.transcribe_with_whisper("a.wav")
    asr.transcribe_with_whisper("a.wav", language="de")

    assert model.languages == [None, "de"]

import pytest

from tutorapp.core.conversation import TutorSession
from tutorapp.core.modes import Mode, TargetLanguage
from tutorapp.core.tutor_backend_mock import MockTutorBackend
from tutorapp.modules.tutor_chat import handle_command, run_chat_session, speak_reply


def _scripted(lines):
    it = iter(lines)

    def read_line(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return read_line


def test_chat_sends_and_prints(capsys):
    session = TutorSession(MockTutorBackend(), mode=Mode.CORRECT)
    run_chat_session(session, read_line=_scripted(["I go to school", "/quit"]))

    out = capsys.readouterr().out
    assert "(MOCK) I go to school" in out
    assert "Até logo!" in out
    assert len(session.conversation) == 2


def test_chat_number_picks_suggestion_on_empty_chat():
    backend = MockTutorBackend()
    session = TutorSession(backend, mode=Mode.TRANSLATE)
    run_chat_session(session, read_line=_scripted(["4"]))
    assert session.conversation.history()[0].text == "Corrija isto: 'I go to school yesterday'"


def test_chat_commands_switch_mode_and_language(capsys):
    session = TutorSession(MockTutorBackend())
    run_chat_session(session, read_line=_scripted(["/mode informal", "/lang de", "/mode nope"]))

    assert session.mode is Mode.INFORMAL
    assert session.language is TargetLanguage.DE
    assert "Modo desconhecido" in capsys.readouterr().out


def test_chat_reset_clears_conversation():
    session = TutorSession(MockTutorBackend())
    run_chat_session(session, read_line=_scripted(["hello", "/reset"]))
    assert len(session.conversation) == 0


def test_mic_command_returns_pending_voice_text():
    session = TutorSession(MockTutorBackend())
    keep, pending = handle_command(
        "/mic", session, last_reply=None, voice=lambda device: "eu fui para escola"
    )
    assert keep is True
    assert pending == "eu fui para escola"


def test_chat_sends_voice_input_after_confirm():
    session = TutorSession(MockTutorBackend(), mode=Mode.TRANSLATE)
    run_chat_session(
        session,
        read_line=_scripted(["/mic", "", "/quit"]),
        voice=lambda device: "bom dia",
    )
    assert session.conversation.history()[0].text == "bom dia"


def test_speak_without_reply(capsys):
    session = TutorSession(MockTutorBackend())
    handle_command("/speak", session, last_reply=None)
    assert "Nada para ouvir" in capsys.readouterr().out


def test_unknown_command(capsys):
    session = TutorSession(MockTutorBackend())
    keep, pending = handle_command("/dance", session, last_reply=None)
    assert keep is True and pending == ""
    assert "Comando desconhecido" in capsys.readouterr().out


def _missing_microphone(device):
    raise OSError("PortAudio library not found")


def test_mic_failure_keeps_chat_running(capsys):
    session = TutorSession(MockTutorBackend(), mode=Mode.CORRECT)
    run_chat_session(
        session,
        read_line=_scripted(["/mic", "hello", "/quit"]),
        voice=_missing_microphone,
    )

    out = capsys.readouterr().out
    assert "Aviso: microfone indisponível (PortAudio library not found)." in out
    assert session.conversation.history()[0].text == "hello"
    assert "(MOCK) hello" in out


@pytest.fixture
def spoken(monkeypatch):
    import tutorapp.core.tts as tts

    calls = []

    class RecordingTTS:
        def __init__(self, text, lang, slow=False):
            calls.append((text, lang))

        def save(self, path):
            with open(path, "wb") as f:
                f.write(b"ID3")

    monkeypatch.setattr(tts, "gTTS", RecordingTTS)
    return calls


def test_informal_reply_is_spoken_in_english(spoken):
    session = TutorSession(MockTutorBackend(), language=TargetLanguage.DE, mode=Mode.INFORMAL)
    reply = session.send("Ich bin gut")

    speak_reply(reply)

    assert [lang for _, lang in spoken] == ["en"]


def test_speak_uses_language_of_the_reply(spoken):
    session = TutorSession(MockTutorBackend(), language=TargetLanguage.DE, mode=Mode.EXPLAIN)
    reply = session.send("Ich gehe gestern zur Schule")
    session.set_language(TargetLanguage.EN)

    handle_command("/speak", session, last_reply=reply)

    assert reply.language is TargetLanguage.DE
    assert [lang for _, lang in spoken] == ["de"]

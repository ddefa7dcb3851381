from __future__ import annotations

from typing import Callable, Optional

from tutorapp.core.conversation import TutorReply, TutorSession, join_voice_input
from tutorapp.core.modes import LANGUAGE_LABELS, MODE_LABELS, SUGGESTIONS, TargetLanguage
from tutorapp.core.tutor_print import print_reply_block, speech_language, speech_text

HELP_TEXT = """Comandos:
  /mode <translate|explain|correct|informal>   trocar o modo
  /lang <en|de>                                trocar o idioma alvo
  /mic                                         gravar pelo microfone (Enter para parar)
  /speak                                       gerar áudio da última resposta
  /reset                                       apagar a conversa
  /help                                        esta ajuda
  /quit                                        sair"""


def print_header(session: TutorSession) -> None:
    title = "Deutsch" if session.language is TargetLanguage.DE else "English"
    print(f"\n=== Tutor de {title} ===")
    print(f"Idioma: {LANGUAGE_LABELS[session.language]} | Modo: {MODE_LABELS[session.mode]}")


def print_suggestions() -> None:
    print("\nSugestões:")
    for i, s in enumerate(SUGGESTIONS, start=1):
        print(f"  [{i}] {s}")
    print("Digite em português ou no idioma alvo (ou /mic). /help para comandos.\n")


def speak_reply(reply: Optional[TutorReply]) -> None:
    if reply is None or reply.is_error:
        print("Nada para ouvir ainda.")
        return

    text = speech_text(reply.interpretation)
    if not text.strip():
        print("Nada para ouvir ainda.")
        return

    from gtts import gTTSError

    from tutorapp.core.tts import synthesize_speech

    try:
        path = synthesize_speech(text, speech_language(reply.interpretation, reply.language))
    except gTTSError as e:
        print(f"Aviso: áudio indisponível ({e}).")
        return
    print(f"Áudio salvo: {path}")


def capture_voice(device: int | None) -> str:
    """Blocking helper around SpeechCapture for the terminal."""
    from tutorapp.core.capture import SpeechCapture

    capture = SpeechCapture(device=device)
    result: list[str] = []
    handle = capture.start_capture(result.append)
    input("Gravando... pressione Enter para parar. ")
    capture.stop(handle)
    text = (result[0] if result else "").strip()
    if not text:
        print("Não entendi nada. Fale mais perto do microfone.")
    return text


def handle_command(
    line: str,
    session: TutorSession,
    *,
    last_reply: Optional[TutorReply],
    device: int | None = None,
    voice: Callable[[int | None], str] = capture_voice,
) -> tuple[bool, str]:
    """Runs one slash command. Returns (keep_running, pending_input)."""
    parts = line.strip().split(maxsplit=1)
    cmd = parts[0].lower()
    arg = parts[1].strip() if len(parts) > 1 else ""

    if cmd in ("/quit", "/exit"):
        return False, ""

    if cmd == "/help":
        print(HELP_TEXT)
        return True, ""

    if cmd == "/reset":
        session.reset()
        print("Conversa apagada.")
        print_suggestions()
        return True, ""

    if cmd == "/mode":
        try:
            mode = session.set_mode(arg)
        except ValueError as e:
            print(e)
            return True, ""
        print(f"Modo: {MODE_LABELS[mode]}")
        return True, ""

    if cmd == "/lang":
        try:
            lang = session.set_language(arg)
        except ValueError as e:
            print(e)
            return True, ""
        print(f"Idioma: {LANGUAGE_LABELS[lang]}")
        return True, ""

    if cmd == "/speak":
        speak_reply(last_reply)
        return True, ""

    if cmd == "/mic":
        try:
            spoken = voice(device)
        except Exception as e:
            print(f"Aviso: microfone indisponível ({e}).")
            return True, ""
        pending = join_voice_input(arg, spoken)
        if pending:
            print(f"Você disse: {pending}")
        return True, pending

    print(f"Comando desconhecido: {cmd} (/help)")
    return True, ""


def run_chat_session(
    session: TutorSession,
    *,
    device: int | None = None,
    read_line: Callable[[str], str] = input,
    voice: Optional[Callable[[int | None], str]] = None,
) -> None:
    print_header(session)
    print_suggestions()

    last_reply: Optional[TutorReply] = None
    pending = ""

    while True:
        try:
            prompt = f"[{session.language.value}/{session.mode.value}] Você: "
            line = read_line(prompt)
        except (EOFError, KeyboardInterrupt):
            print("\nAté logo!")
            return

        line = line.strip()

        # number picks a suggestion on an empty chat
        if line.isdigit() and len(session.conversation) == 0:
            idx = int(line) - 1
            if 0 <= idx < len(SUGGESTIONS):
                line = SUGGESTIONS[idx]

        if line.startswith("/"):
            keep_running, pending = handle_command(
                line, session, last_reply=last_reply, device=device, voice=voice or capture_voice
            )
            if not keep_running:
                print("Até logo!")
                return
            if line.lower().startswith("/reset"):
                last_reply = None
            if not pending:
                continue
            # voice result: confirm before sending
            extra = read_line("Enter para enviar (ou complete o texto): ").strip()
            line = join_voice_input(pending, extra)
            pending = ""

        reply = session.send(line)
        if reply is None:
            continue
        last_reply = reply
        print_reply_block(reply)

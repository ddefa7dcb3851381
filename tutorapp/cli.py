from __future__ import annotations

import argparse

from tutorapp.core.conversation import TutorSession
from tutorapp.core.modes import Mode, TargetLanguage
from tutorapp.core.tutor_backend_factory import get_tutor_backend
from tutorapp.core.tutor_print import print_reply_block
from tutorapp.modules.selfcheck import run_selfcheck
from tutorapp.modules.tutor_chat import run_chat_session, speak_reply


def _make_session(args: argparse.Namespace) -> TutorSession:
    try:
        backend = get_tutor_backend(args.backend)
    except ValueError as e:
        raise SystemExit(str(e))
    return TutorSession(
        backend,
        language=TargetLanguage(args.lang),
        mode=Mode(args.mode),
    )


def cmd_chat(args: argparse.Namespace) -> None:
    session = _make_session(args)
    run_chat_session(session, device=args.device)


def cmd_ask(args: argparse.Namespace) -> None:
    text = " ".join(args.text).strip()
    if not text:
        raise SystemExit("ask: texto vazio.")

    session = _make_session(args)
    reply = session.send(text)
    print_reply_block(reply)

    if args.speak:
        speak_reply(reply)

    if reply.is_error:
        raise SystemExit(1)


def cmd_devices(args: argparse.Namespace) -> None:
    from tutorapp.core.audio import list_input_devices

    list_input_devices()


def cmd_selfcheck(args: argparse.Namespace) -> None:
    raise SystemExit(run_selfcheck(
        verbose=args.verbose,
        load_model=args.load_model,
        list_devices=args.list_devices,
    ))


def _add_session_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--lang",
        choices=[lang.value for lang in TargetLanguage],
        default=TargetLanguage.EN.value,
        help="Idioma alvo (default: en).",
    )
    p.add_argument(
        "--mode",
        choices=[m.value for m in Mode],
        default=Mode.EXPLAIN.value,
        help="Modo do tutor (default: explain).",
    )
    p.add_argument(
        "--backend",
        choices=["groq", "mock"],
        default=None,
        help="Backend (default: env TUTOR_BACKEND ou groq).",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tutorapp",
        description="Tutor de idiomas no terminal (inglês/alemão para falantes de português).",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    chat = sub.add_parser("chat", help="Conversa interativa com o tutor.")
    _add_session_args(chat)
    chat.add_argument("--device", type=int, default=None, help="Input-Device-ID para /mic.")
    chat.set_defaults(func=cmd_chat)

    ask = sub.add_parser("ask", help="Envia uma frase e mostra a resposta.")
    _add_session_args(ask)
    ask.add_argument("text", nargs="+", help="Frase a enviar.")
    ask.add_argument("--speak", action="store_true", help="Gera áudio (MP3) da resposta.")
    ask.set_defaults(func=cmd_ask)

    dev = sub.add_parser("devices", help="Lista os microfones disponíveis.")
    dev.set_defaults(func=cmd_devices)

    sc = sub.add_parser("selfcheck", help="Verifica ambiente (config, imports, áudio, Whisper).")
    sc.add_argument("--verbose", action="store_true")
    sc.add_argument("--load-model", action="store_true", help="Carrega o modelo Whisper (lento).")
    sc.add_argument("--list-devices", action="store_true", help="Lista os microfones.")
    sc.set_defaults(func=cmd_selfcheck)

    return p


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()

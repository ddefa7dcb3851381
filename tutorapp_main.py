# tutorapp_main.py
from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv


def _load_env() -> None:
    base = Path(__file__).resolve().parent

    # 1) ./tutorapp.env  2) ./.env  (first hit wins, never overrides the shell)
    candidates = [
        base / "tutorapp.env",
        base / ".env",
    ]

    for env_path in candidates:
        if env_path.exists():
            load_dotenv(env_path, override=False)
            break


def main() -> None:
    _load_env()
    from tutorapp.cli import main as cli_main
    cli_main()

if __name__ == "__main__":
    main()

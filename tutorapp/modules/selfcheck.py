from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import traceback


@dataclass
class CheckResult:
    name: str
    ok: bool
    detail: str = ""


def _run_import_checks() -> list[CheckResult]:
    results: list[CheckResult] = []
    modules = [
        "tutorapp.cli",
        "tutorapp.core.modes",
        "tutorapp.core.orchestrator",
        "tutorapp.core.interpreter",
        "tutorapp.core.conversation",
        "tutorapp.core.tutor_backend_groq",
        "tutorapp.modules.tutor_chat",
    ]
    for m in modules:
        try:
            __import__(m)
            results.append(CheckResult(f"import:{m}", True, "OK"))
        except Exception as e:
            results.append(CheckResult(f"import:{m}", False, f"{type(e).__name__}: {e}"))
    return results


def _run_config_checks() -> list[CheckResult]:
    results: list[CheckResult] = []

    backend = os.getenv("TUTOR_BACKEND", "groq").lower()
    results.append(CheckResult("config:backend", backend in ("groq", "mock"), backend))

    key = (os.getenv("GROQ_API_KEY") or "").strip()
    if backend == "mock":
        results.append(CheckResult("config:groq_api_key", True, "not needed (mock)"))
    elif key:
        masked = f"{key[:6]}...{key[-4:]}" if len(key) > 12 else "***"
        results.append(CheckResult("config:groq_api_key", True, masked))
    else:
        results.append(CheckResult("config:groq_api_key", False, "missing (GROQ_API_KEY)"))

    try:
        temp = float(os.getenv("TUTOR_TEMPERATURE", "0.3"))
        results.append(CheckResult("config:temperature", 0.0 <= temp <= 2.0, str(temp)))
    except ValueError as e:
        results.append(CheckResult("config:temperature", False, f"{type(e).__name__}: {e}"))

    results.append(CheckResult("config:model", True, os.getenv("TUTOR_MODEL", "llama-3.1-8b-instant")))
    return results


def _run_data_dir_checks() -> list[CheckResult]:
    results: list[CheckResult] = []
    for name, d in (("audio", Path("data/audio")), ("tts", Path("data/tts"))):
        try:
            d.mkdir(parents=True, exist_ok=True)
            tmp = d / ".selfcheck_write_test"
            tmp.write_text("ok", encoding="utf-8")
            tmp.unlink(missing_ok=True)
            results.append(CheckResult(f"fs:{name}_dir_writable", True, str(d.resolve())))
        except Exception as e:
            results.append(CheckResult(f"fs:{name}_dir_writable", False, f"{type(e).__name__}: {e}"))
    return results


def _run_pipeline_checks() -> list[CheckResult]:
    """Offline round through the mock backend for every mode."""
    results: list[CheckResult] = []
    try:
        from tutorapp.core.conversation import TutorSession
        from tutorapp.core.interpreter import Decoded
        from tutorapp.core.modes import Mode, Shape, expected_shape
        from tutorapp.core.tutor_backend_mock import MockTutorBackend

        for mode in Mode:
            session = TutorSession(MockTutorBackend(), mode=mode)
            reply = session.send("I go to school yesterday")
            structured = expected_shape(mode) is not Shape.RAW
            ok = reply is not None and not reply.is_error
            if ok and structured:
                ok = isinstance(reply.interpretation, Decoded)
            results.append(CheckResult(f"pipeline:{mode.value}", ok, "OK" if ok else "unexpected reply"))
    except Exception as e:
        results.append(CheckResult("pipeline:mock", False, f"{type(e).__name__}: {e}"))
    return results


def _run_whisper_checks(load_model: bool = False) -> list[CheckResult]:
    results: list[CheckResult] = []
    try:
        import whisper  # type: ignore
        results.append(CheckResult("asr:whisper_import", True, "OK"))
    except Exception as e:
        results.append(CheckResult("asr:whisper_import", False, f"{type(e).__name__}: {e}"))
        return results

    if not load_model:
        results.append(CheckResult("asr:whisper_model_load", True, "skipped (--load-model off)"))
        return results

    try:
        from tutorapp.core.asr import WHISPER_MODEL, _load_model
        _load_model(WHISPER_MODEL)
        results.append(CheckResult("asr:whisper_model_load", True, WHISPER_MODEL))
    except Exception as e:
        results.append(CheckResult("asr:whisper_model_load", False, f"{type(e).__name__}: {e}"))
    return results


def _run_sounddevice_checks(list_devices: bool = False) -> list[CheckResult]:
    results: list[CheckResult] = []
    try:
        import sounddevice as sd  # type: ignore
        results.append(CheckResult("audio:sounddevice_import", True, "OK"))
    except Exception as e:
        results.append(CheckResult("audio:sounddevice_import", False, f"{type(e).__name__}: {e}"))
        return results

    try:
        devs = sd.query_devices()
        results.append(CheckResult("audio:devices_found", True, f"count={len(devs)}"))
        if list_devices:
            inputs = []
            for i, d in enumerate(devs):
                if int(d.get("max_input_channels", 0)) > 0:
                    inputs.append(f"[{i}] {d.get('name')} (in:{d.get('max_input_channels')})")
            detail = " | ".join(inputs) if inputs else "(no input devices)"
            results.append(CheckResult("audio:input_devices", True, detail))
        else:
            results.append(CheckResult("audio:input_devices", True, "skipped (--list-devices off)"))
    except Exception as e:
        results.append(CheckResult("audio:devices_query", False, f"{type(e).__name__}: {e}"))

    return results


def _run_tts_checks() -> list[CheckResult]:
    try:
        import gtts  # type: ignore  # noqa: F401
        return [CheckResult("tts:gtts_import", True, "OK")]
    except Exception as e:
        return [CheckResult("tts:gtts_import", False, f"{type(e).__name__}: {e}")]


def run_selfcheck(verbose: bool = False, load_model: bool = False, list_devices: bool = False) -> int:
    checks: list[CheckResult] = []
    checks += _run_import_checks()
    checks += _run_config_checks()
    checks += _run_data_dir_checks()
    checks += _run_pipeline_checks()
    checks += _run_whisper_checks(load_model=load_model)
    checks += _run_sounddevice_checks(list_devices=list_devices)
    checks += _run_tts_checks()

    ok_all = all(c.ok for c in checks)

    print("\nSELF-CHECK RESULT:", "OK" if ok_all else "FAIL")
    print("-" * 80)
    for c in checks:
        status = "OK " if c.ok else "ERR"
        print(f"{status}  {c.name:<28}  {c.detail}")
    print("-" * 80)

    if (not ok_all) and verbose:
        print("\nVERBOSE (first failing import, re-raised):")
        for c in checks:
            if not c.ok and c.name.startswith("import:"):
                try:
                    __import__(c.name.split(":", 1)[1])
                except Exception:
                    traceback.print_exc()
                break

    return 0 if ok_all else 1

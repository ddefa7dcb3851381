from __future__ import annotations

from tutorapp.core.interpreter import Decoded, ExplainFeedback, InformalFeedback, Interpretation
from tutorapp.core.modes import TargetLanguage


def score_band(score: float) -> str:
    if score >= 7:
        return "good"
    if score >= 5:
        return "ok"
    return "low"


def format_score(score: float) -> str:
    return f"{int(score)}" if float(score).is_integer() else f"{score:.1f}"


def speech_text(interp: Interpretation) -> str:
    """Text worth reading aloud for a reply."""
    if isinstance(interp, Decoded):
        fb = interp.feedback
        if isinstance(fb, ExplainFeedback):
            return fb.natural_suggestion or fb.corrected
        return fb.informal
    return interp.text


def speech_language(interp: Interpretation, language: TargetLanguage) -> TargetLanguage:
    # informal mode always answers in casual English
    if isinstance(interp, Decoded) and isinstance(interp.feedback, InformalFeedback):
        return TargetLanguage.EN
    return language


def format_reply(interp: Interpretation) -> str:
    lines: list[str] = []

    if isinstance(interp, Decoded) and isinstance(interp.feedback, ExplainFeedback):
        fb = interp.feedback
        if fb.translation:
            lines.append(f"Tradução: {fb.translation}")
        lines.append(f"Corrigido: {fb.corrected}")
        lines.append(f"Explicação: {fb.explanation}")
        if fb.natural_suggestion:
            lines.append(f"Mais natural: {fb.natural_suggestion}")
        lines.append(f"Nota: {format_score(fb.score)}/10 ({score_band(fb.score)})")
        return "\n".join(lines)

    if isinstance(interp, Decoded) and isinstance(interp.feedback, InformalFeedback):
        fb = interp.feedback
        if fb.already_correct:
            lines.append("✓ Sua frase já está correta e natural.")
        lines.append(f"Casual: {fb.informal}")
        lines.append(f"Tradução: {fb.translation}")
        return "\n".join(lines)

    text = (interp.text or "").strip()
    return text if text else "(sem resposta)"


def print_reply_block(reply) -> None:
    print("\n--- TUTOR ---")
    if reply.is_error:
        print(f"(Erro) {reply.turn.text.removeprefix('Erro: ')}")
        print("Dica: reenvie a mesma frase para tentar de novo.")
        print()
        return

    print(format_reply(reply.interpretation))
    print()

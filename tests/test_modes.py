import pytest

from tutorapp.core.modes import (
    EXPLAIN_KEYS,
    INFORMAL_KEYS,
    Mode,
    Shape,
    TargetLanguage,
    directive,
    expected_shape,
)


@pytest.mark.parametrize(
    "mode,shape",
    [
        (Mode.TRANSLATE, Shape.RAW),
        (Mode.CORRECT, Shape.RAW),
        (Mode.EXPLAIN, Shape.EXPLAIN),
        (Mode.INFORMAL, Shape.INFORMAL),
    ],
)
def test_expected_shape(mode, shape):
    assert expected_shape(mode) is shape


def test_translate_directive_names_target_language():
    assert "translation into English" in directive(TargetLanguage.EN, Mode.TRANSLATE)
    assert "translation into German" in directive(TargetLanguage.DE, Mode.TRANSLATE)
    assert "Do not correct, explain, or add anything" in directive(TargetLanguage.EN, Mode.TRANSLATE)


def test_correct_directive_is_english_only():
    text = directive(TargetLanguage.DE, Mode.CORRECT)
    assert "corrected English text" in text
    assert "German" not in text


def test_explain_directive_lists_all_keys():
    text = directive(TargetLanguage.DE, Mode.EXPLAIN)
    for key in EXPLAIN_KEYS:
        assert f'"{key}"' in text
    assert "alemão language tutor" in text
    assert "otherwise empty string" in text


def test_informal_directive_lists_all_keys():
    text = directive(TargetLanguage.EN, Mode.INFORMAL)
    for key in INFORMAL_KEYS:
        assert f'"{key}"' in text
    assert "Portuguese (Brazil)" in text


def test_directive_accepts_plain_strings():
    assert directive("en", "explain") == directive(TargetLanguage.EN, Mode.EXPLAIN)


def test_directive_is_pure():
    assert directive(TargetLanguage.EN, Mode.EXPLAIN) == directive(TargetLanguage.EN, Mode.EXPLAIN)


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        directive(TargetLanguage.EN, "poetry")
    with pytest.raises(ValueError):
        expected_shape("poetry")


def test_unknown_language_rejected():
    with pytest.raises(ValueError):
        TargetLanguage.parse("fr")


def test_language_speech_tags():
    assert TargetLanguage.EN.speech_tag == "en-US"
    assert TargetLanguage.DE.speech_tag == "de-DE"

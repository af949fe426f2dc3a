"""Tests for localized strings and error messages."""

import pytest

from grok_mind.messages import (
    ErrorType,
    banded_comment,
    detailed_error_message,
    error_message,
    error_title,
    overall_error_comment,
    text,
)


def test_text_plain_and_formatted():
    assert text("app_title", "en") == "In Grok's Mind"
    assert text("app_title", "ja") == "Grokの気持ち"
    assert text("fact_check_request", "en", style="Tsundere Style") == "Fact-check please. Answer in Tsundere Style"


def test_text_unknown_key():
    with pytest.raises(KeyError, match="Unknown message key"):
        text("no_such_key", "en")


@pytest.mark.parametrize(
    ("kind", "score", "prefix"),
    [
        ("accuracy", 50, "Highly accurate"),
        ("accuracy", 40, "Highly accurate"),
        ("accuracy", 39, "Mostly accurate"),
        ("accuracy", 20, "Basic facts"),
        ("accuracy", 0, "The information has accuracy issues"),
        ("overall", 90, "Excellent answer!"),
        ("overall", 89, "Good answer."),
        ("overall", 50, "Decent answer."),
        ("overall", 49, "Your answer has room"),
    ],
)
def test_banded_comment_bands(kind, score, prefix):
    assert banded_comment(kind, score, "en").startswith(prefix)


def test_banded_comment_below_all_bands_uses_lowest():
    assert banded_comment("overall", -5, "en").startswith("Your answer has room")


def test_style_comment_quotes_style():
    assert "「忍者風」" in banded_comment("style", 45, "ja", style="忍者風")


def test_error_strings():
    assert error_title(ErrorType.RATE_LIMIT, "en") == "API Rate Limit Exceeded"
    assert error_message(ErrorType.RATE_LIMIT, "en") == "※API rate limit exceeded, showing mock data."


def test_detailed_error_message():
    assert detailed_error_message(ErrorType.NETWORK_ERROR, "en", "timeout").endswith(" Error details: timeout")
    assert detailed_error_message(ErrorType.NETWORK_ERROR, "ja", "timeout").endswith(" エラー詳細: timeout")
    assert detailed_error_message(ErrorType.NETWORK_ERROR, "en") == error_message(ErrorType.NETWORK_ERROR, "en")


def test_overall_error_comment():
    assert (
        overall_error_comment(ErrorType.RATE_LIMIT, "en")
        == "※Note: API rate limit exceeded, showing mock data. This is a demo display."
    )
    assert overall_error_comment(ErrorType.RATE_LIMIT, "ja").startswith("※注：APIの制限")

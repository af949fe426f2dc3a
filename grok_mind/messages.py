"""Localized strings and the error-message catalog."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from grok_mind.locales import Locale, normalize_locale, pick
from grok_mind.resources import DATA_DIR, load_yaml

logger = logging.getLogger(__name__)

MESSAGES_PATH = DATA_DIR / "messages.yaml"

_messages: dict[str, Any] | None = None


class ErrorType(Enum):
    """Degraded-path reasons surfaced to users alongside fallback feedback."""

    API_KEY_MISSING = "API_KEY_MISSING"
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


def _load() -> dict[str, Any]:
    global _messages
    if _messages is None:
        _messages = load_yaml(MESSAGES_PATH)
    return _messages


def text(key: str, locale: Locale | str | bool | None, **values: Any) -> str:
    """Return the localized string *key*, formatted with *values*.

    Raises
    ------
    KeyError
        If *key* is not a known message.
    """
    table = _load()["text"]
    if key not in table:
        msg = f"Unknown message key: {key!r}"
        raise KeyError(msg)
    template = pick(table[key], locale)
    return template.format(**values) if values else template


def banded_comment(kind: str, score: int, locale: Locale | str | bool | None, **values: Any) -> str:
    """Return the feedback comment of the highest band *score* reaches.

    Parameters
    ----------
    kind : str
        ``"accuracy"``, ``"style"`` or ``"overall"``.
    score : int
        Score to place into a band.
    locale : Locale | str | bool | None
        Output language.
    **values
        Placeholders for the comment (``style`` for style comments).

    Raises
    ------
    KeyError
        If *kind* is unknown.
    """
    bands = _load()["feedback"][kind]
    for band in bands:
        if score >= band["min"]:
            break
    else:
        band = bands[-1]
    template = pick({k: v for k, v in band.items() if k != "min"}, locale)
    return template.format(**values) if values else template


def error_title(error_type: ErrorType, locale: Locale | str | bool | None) -> str:
    """Return the short title for *error_type*."""
    return pick(_error_entry(error_type)["title"], locale)


def error_message(error_type: ErrorType, locale: Locale | str | bool | None) -> str:
    """Return the user-facing message for *error_type*."""
    return pick(_error_entry(error_type)["message"], locale)


def detailed_error_message(
    error_type: ErrorType,
    locale: Locale | str | bool | None,
    details: str | None = None,
) -> str:
    """Return the message for *error_type*, with *details* appended when given."""
    message = error_message(error_type, locale)
    if not details:
        return message
    if normalize_locale(locale) is Locale.JA:
        return f"{message} エラー詳細: {details}"
    return f"{message} Error details: {details}"


def overall_error_comment(error_type: ErrorType, locale: Locale | str | bool | None) -> str:
    """Return the overall-comment note shown when feedback is a fallback."""
    body = error_message(error_type, locale).lstrip("※")
    if normalize_locale(locale) is Locale.JA:
        return f"※注：{body} これはデモ表示です。"
    return f"※Note: {body} This is a demo display."


def _error_entry(error_type: ErrorType) -> dict[str, Any]:
    errors = _load()["errors"]
    return errors.get(error_type.value, errors[ErrorType.UNKNOWN_ERROR.value])

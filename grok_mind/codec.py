"""Compact, reversible result identifiers for shareable result URLs."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass

DELIMITER = "-"
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
# Leading numeric prefix of a field; trailing characters are ignored.
_DECIMAL_FIELD = re.compile(r"\s*([+-]?[0-9]+)")
_BASE36_FIELD = re.compile(r"\s*([+-]?[0-9a-z]+)", re.IGNORECASE)


class DecodeError(ValueError):
    """Raised when a result identifier cannot be decoded."""


@dataclass(frozen=True)
class ScoredResult:
    """A scored trivia attempt, as carried by a result identifier.

    Parameters
    ----------
    quiz_id : int
        Trivia prompt identifier.
    style_id : int
        Persona/tone identifier.
    score : int
        Total score, expected in ``0..100``.  Not clamped.
    timestamp : int
        Creation time in milliseconds since the epoch.
    """

    quiz_id: int
    style_id: int
    score: int
    timestamp: int


def encode_result_id(quiz_id: int, style_id: int, score: int, timestamp: int | None = None) -> str:
    """Pack a scored result into a URL-path-safe identifier.

    The first three fields are rendered in decimal, the timestamp in base 36,
    and the four are joined with ``-``.

    Negative values are rendered literally with a leading ``-``, which
    collides with the delimiter; such identifiers do not decode back to
    their inputs.

    Parameters
    ----------
    quiz_id : int
        Trivia prompt identifier.
    style_id : int
        Persona/tone identifier.
    score : int
        Total score.  The caller is responsible for keeping it in ``0..100``.
    timestamp : int | None
        Milliseconds since the epoch.  Defaults to the current time.

    Returns
    -------
    str

    Examples
    --------
    >>> encode_result_id(7, 2, 85, 1700000000000)
    '7-2-85-loyw3v28'
    """
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    fields = (str(int(quiz_id)), str(int(style_id)), str(int(score)), _to_base36(int(timestamp)))
    return DELIMITER.join(fields)


def decode_result_id(result_id: str) -> ScoredResult:
    """Unpack an identifier produced by :func:`encode_result_id`.

    Each field is read from its leading numeric prefix, after optional
    whitespace and sign, so ``"85x"`` reads as 85.  Fields after the fourth
    are ignored.  Quiz and style ids are not checked against any catalog.

    Parameters
    ----------
    result_id : str
        Identifier taken from a result URL.

    Returns
    -------
    ScoredResult

    Raises
    ------
    DecodeError
        If fewer than four fields are present, or a field has no numeric
        prefix in its base.
    """
    parts = result_id.split(DELIMITER)
    if len(parts) < 4:
        msg = f"Malformed result id {result_id!r}: expected 4 fields, got {len(parts)}"
        raise DecodeError(msg)

    values = []
    for position, part in enumerate(parts[:3]):
        match = _DECIMAL_FIELD.match(part)
        if match is None:
            msg = f"Malformed result id {result_id!r}: field {position} is not a decimal integer"
            raise DecodeError(msg)
        values.append(int(match.group(1), 10))
    match = _BASE36_FIELD.match(parts[3])
    if match is None:
        msg = f"Malformed result id {result_id!r}: timestamp is not a base-36 integer"
        raise DecodeError(msg)

    quiz_id, style_id, score = values
    return ScoredResult(quiz_id=quiz_id, style_id=style_id, score=score, timestamp=int(match.group(1), 36))


def _to_base36(value: int) -> str:
    """Render *value* in lowercase base 36."""
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return sign + "".join(reversed(digits))

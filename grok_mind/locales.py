"""Locale normalization and precedence resolution."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum


class Locale(Enum):
    """Languages the application ships strings for."""

    JA = "ja"
    EN = "en"


DEFAULT_LOCALE = Locale.JA


def normalize_locale(value: Locale | str | bool | None) -> Locale | None:
    """Map a raw locale hint onto a :class:`Locale`.

    Accepts a ``Locale``, a language tag (``"ja"``, ``"en-US"``, ``"JA_jp"``),
    or a boolean *is Japanese* flag.  Unrecognised values yield ``None``.
    """
    if isinstance(value, Locale):
        return value
    if isinstance(value, bool):
        return Locale.JA if value else Locale.EN
    if not value:
        return None
    primary = value.strip().lower().replace("_", "-").split("-", 1)[0]
    try:
        return Locale(primary)
    except ValueError:
        return None


def resolve_locale(
    sources: Iterable[Locale | str | bool | None],
    default: Locale | str = DEFAULT_LOCALE,
) -> Locale:
    """Return the first recognised locale from a prioritised list of sources.

    Parameters
    ----------
    sources : Iterable
        Candidate values, highest priority first (e.g. URL parameter, stored
        preference, page props, ``Accept-Language``).  ``None`` and
        unrecognised entries are skipped.
    default : Locale | str
        Used when no source is recognised.

    Returns
    -------
    Locale

    Raises
    ------
    ValueError
        If *default* itself is not a known locale.
    """
    for source in sources:
        locale = normalize_locale(source)
        if locale is not None:
            return locale
    fallback = normalize_locale(default)
    if fallback is None:
        msg = f"Unknown default locale: {default!r}"
        raise ValueError(msg)
    return fallback


def is_japanese(value: Locale | str | bool | None) -> bool:
    """True when *value* normalizes to Japanese."""
    return normalize_locale(value) is Locale.JA


def pick(texts: Mapping[str, str], locale: Locale | str | bool | None) -> str:
    """Select the entry of a ``{"ja": ..., "en": ...}`` mapping for *locale*.

    Falls back to English, then to any available entry.
    """
    resolved = normalize_locale(locale) or Locale.EN
    if resolved.value in texts:
        return texts[resolved.value]
    if Locale.EN.value in texts:
        return texts[Locale.EN.value]
    return next(iter(texts.values()), "")

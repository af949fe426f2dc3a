"""Trivia prompts and answer styles, keyed by the ids carried in result ids."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from grok_mind.locales import Locale, pick
from grok_mind.resources import DATA_DIR, load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = DATA_DIR / "catalog.yaml"


@dataclass(frozen=True)
class QuizItem:
    """A trivia claim to fact-check.

    Parameters
    ----------
    id : int
        Quiz identifier, carried in result ids.
    content_by_locale : Mapping[str, str]
        Claim text keyed by locale code.
    """

    id: int
    content_by_locale: Mapping[str, str]

    def content(self, locale: Locale | str | bool | None) -> str:
        return pick(self.content_by_locale, locale)


@dataclass(frozen=True)
class StyleVariation:
    """A persona/tone the answer must be written in.

    Parameters
    ----------
    id : int
        Style identifier, carried in result ids.
    name_by_locale : Mapping[str, str]
        Short style name keyed by locale code.
    description_by_locale : Mapping[str, str]
        One-line description of the tone keyed by locale code.
    """

    id: int
    name_by_locale: Mapping[str, str]
    description_by_locale: Mapping[str, str]

    def name(self, locale: Locale | str | bool | None) -> str:
        return pick(self.name_by_locale, locale)

    def description(self, locale: Locale | str | bool | None) -> str:
        return pick(self.description_by_locale, locale)


class Catalog:
    """Read-only lookup of quizzes and styles by id."""

    def __init__(self, quizzes, styles) -> None:
        self._quizzes = MappingProxyType({q.id: q for q in quizzes})
        self._styles = MappingProxyType({s.id: s for s in styles})

    def quiz(self, quiz_id: int) -> QuizItem | None:
        """Return the quiz with *quiz_id*, or ``None``."""
        return self._quizzes.get(quiz_id)

    def style(self, style_id: int) -> StyleVariation | None:
        """Return the style with *style_id*, or ``None``."""
        return self._styles.get(style_id)

    @property
    def quizzes(self) -> list[QuizItem]:
        return list(self._quizzes.values())

    @property
    def styles(self) -> list[StyleVariation]:
        return list(self._styles.values())


def load_catalog(path: str | Path | None = None) -> Catalog:
    """Load a catalog from a YAML file with ``quizzes`` and ``styles`` lists.

    Parameters
    ----------
    path : str | Path | None
        Catalog YAML file.  ``None`` reads the packaged default catalog.

    Returns
    -------
    Catalog

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    """
    path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    data = load_yaml(path)
    quizzes = [
        QuizItem(id=int(entry["id"]), content_by_locale=_localized(entry.get("content", {})))
        for entry in data.get("quizzes", [])
    ]
    styles = [
        StyleVariation(
            id=int(entry["id"]),
            name_by_locale=_localized(entry.get("name", {})),
            description_by_locale=_localized(entry.get("description", {})),
        )
        for entry in data.get("styles", [])
    ]
    logger.debug("Loaded catalog %s: %d quizzes, %d styles", path, len(quizzes), len(styles))
    return Catalog(quizzes, styles)


def _localized(value: Any) -> Mapping[str, str]:
    if isinstance(value, str):
        return MappingProxyType({"ja": value, "en": value})
    return MappingProxyType({str(k): str(v) for k, v in value.items()})

"""Virtual persona roster."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from grok_mind.locales import Locale, pick
from grok_mind.resources import DATA_DIR, load_yaml

logger = logging.getLogger(__name__)

DEFAULT_ROSTER_PATH = DATA_DIR / "personas.yaml"


@dataclass(frozen=True)
class VirtualPersona:
    """A predefined display identity used to stage a social-feed thread.

    Parameters
    ----------
    id : int
        Roster id, unique within a roster.
    display_name_by_locale : Mapping[str, str]
        Display name keyed by locale code (``"ja"``, ``"en"``).
    handle : str
        Account handle, without ``@``.
    avatar_color : str
        CSS colour used for the avatar placeholder.
    """

    id: int
    display_name_by_locale: Mapping[str, str]
    handle: str
    avatar_color: str

    def display_name(self, locale: Locale | str | bool | None) -> str:
        """Return the display name for *locale*."""
        return pick(self.display_name_by_locale, locale)


@dataclass(frozen=True)
class PersonaView:
    """A persona with its display name fixed to one locale."""

    id: int
    name: str
    handle: str
    avatar_color: str

    @classmethod
    def of(cls, persona: VirtualPersona, locale: Locale | str | bool | None) -> PersonaView:
        return cls(
            id=persona.id,
            name=persona.display_name(locale),
            handle=persona.handle,
            avatar_color=persona.avatar_color,
        )


class Roster:
    """Immutable, ordered collection of personas keyed by id.

    Parameters
    ----------
    personas : iterable of VirtualPersona
        Roster entries in display order.

    Raises
    ------
    ValueError
        If two personas share an id.
    """

    def __init__(self, personas) -> None:
        entries = tuple(personas)
        by_id: dict[int, VirtualPersona] = {}
        for persona in entries:
            if persona.id in by_id:
                msg = f"Duplicate persona id in roster: {persona.id}"
                raise ValueError(msg)
            by_id[persona.id] = persona
        self._personas = entries
        self._by_id = MappingProxyType(by_id)

    def __len__(self) -> int:
        return len(self._personas)

    def __iter__(self) -> Iterator[VirtualPersona]:
        return iter(self._personas)

    def __contains__(self, persona_id: object) -> bool:
        return persona_id in self._by_id

    def get(self, persona_id: int) -> VirtualPersona | None:
        """Return the persona with *persona_id*, or ``None``."""
        return self._by_id.get(persona_id)

    def ids(self) -> list[int]:
        """Return persona ids in roster order."""
        return [p.id for p in self._personas]


GROK_PERSONA = VirtualPersona(
    id=0,
    display_name_by_locale=MappingProxyType({"ja": "Grok", "en": "Grok"}),
    handle="grok",
    avatar_color="#1d9bf0",
)


def grok_persona(locale: Locale | str | bool | None = None) -> PersonaView:
    """Return the localized view of the answering "Grok" account."""
    return PersonaView.of(GROK_PERSONA, locale)


def load_roster(path: str | Path | None = None) -> Roster:
    """Load a roster from a YAML file.

    The file holds a top-level ``personas`` list; each entry has ``id``,
    ``name`` (mapping of locale to display name), ``handle`` and
    ``avatar_color``.

    Parameters
    ----------
    path : str | Path | None
        YAML file to read.  ``None`` reads the packaged default roster.

    Returns
    -------
    Roster

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If an entry lacks a required field or ids are duplicated.
    """
    path = Path(path) if path is not None else DEFAULT_ROSTER_PATH
    data = load_yaml(path)
    personas = [_persona_from_dict(entry) for entry in data.get("personas", [])]
    roster = Roster(personas)
    logger.debug("Loaded roster from %s: %d personas", path, len(roster))
    return roster


def _persona_from_dict(entry: dict[str, Any]) -> VirtualPersona:
    for key in ("id", "name", "handle"):
        if key not in entry:
            msg = f"Persona entry missing required field: {key!r}"
            raise ValueError(msg)
    names = entry["name"]
    if isinstance(names, str):
        names = {"ja": names, "en": names}
    return VirtualPersona(
        id=int(entry["id"]),
        display_name_by_locale=MappingProxyType({str(k): str(v) for k, v in names.items()}),
        handle=str(entry["handle"]),
        avatar_color=str(entry.get("avatar_color", "#9ca3af")),
    )

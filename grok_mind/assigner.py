"""Deterministic assignment of the poster/requester persona pair.

A result page shows two virtual users: one who posted the trivia claim and
one who asked for a fact-check.  The pair is derived from the result id, so
every visit to the same URL tells the same story without stored state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from grok_mind.locales import Locale
from grok_mind.roster import PersonaView, Roster

logger = logging.getLogger(__name__)

_UINT32 = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


class AssignmentError(LookupError):
    """Raised when a resolved persona id is not in the roster."""


@dataclass(frozen=True)
class PersonaAssignment:
    """Roster ids of the two personas shown on a result page."""

    poster_id: int
    requester_id: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.poster_id, self.requester_id)


def string_hash(seed: str) -> int:
    """Return a stable non-negative 32-bit hash of *seed*.

    ``h = h * 31 + c`` over the UTF-16 code units of *seed*, wrapped to a
    signed 32-bit integer at every step, then made non-negative.  Matches
    Java's ``String.hashCode`` and the JavaScript idiom
    ``((h << 5) - h + c) | 0``, so ids hash identically in every runtime.

    Examples
    --------
    >>> string_hash("abc")
    96354
    """
    h = 0
    data = seed.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h = (h * 31 + int.from_bytes(data[i : i + 2], "little")) & _UINT32
    if h & _INT32_SIGN:
        h -= _UINT32 + 1
    return abs(h)


def build_pair_table(roster_size: int) -> list[tuple[int, int]]:
    """Return the cyclic table of adjacent id pairs ``(1,2), ..., (N,1)``.

    Raises
    ------
    ValueError
        If *roster_size* is below 2; no distinct pair exists.
    """
    if roster_size < 2:
        msg = f"roster_size must be >= 2, got {roster_size}"
        raise ValueError(msg)
    return [(i, i % roster_size + 1) for i in range(1, roster_size + 1)]


def select_pair(
    seed: str,
    roster_size: int,
    pairs: Sequence[tuple[int, int]] | None = None,
) -> tuple[int, int]:
    """Pick a pair of distinct persona ids for *seed*.

    Parameters
    ----------
    seed : str
        Any string; equal seeds always select the same pair.
    roster_size : int
        Number of personas ``N``.  Used to build the default pair table.
    pairs : Sequence[tuple[int, int]] | None
        Candidate pairs.  Defaults to :func:`build_pair_table` of
        *roster_size*.  Every candidate must hold two distinct ids.

    Returns
    -------
    tuple[int, int]

    Raises
    ------
    ValueError
        If the table is empty or holds a pair with equal ids.
    """
    table = list(pairs) if pairs is not None else build_pair_table(roster_size)
    if not table:
        msg = "Pair table is empty"
        raise ValueError(msg)
    for a, b in table:
        if a == b:
            msg = f"Pair table holds a non-distinct pair: ({a}, {b})"
            raise ValueError(msg)
    a, b = table[string_hash(seed) % len(table)]
    return (a, b)


def resolve_pair(
    result_id: str,
    quiz_id: int,
    explicit_a: int | None = None,
    explicit_b: int | None = None,
    *,
    roster_size: int,
) -> tuple[int, int]:
    """Resolve the (poster, requester) ids for a result page.

    Explicit ids (from the ``quizUserId`` / ``replyUserId`` URL parameters)
    take precedence when both are positive.  If they are equal the requester
    is moved to the next roster id, ``(b mod N) + 1``.  Otherwise the pair is
    selected from ``result_id + str(quiz_id)``.

    Parameters
    ----------
    result_id : str
        Encoded result identifier.
    quiz_id : int
        Quiz id decoded from *result_id*.
    explicit_a, explicit_b : int | None
        Explicit poster and requester ids.  ``None`` or non-positive values
        count as absent.
    roster_size : int
        Number of personas ``N``.

    Returns
    -------
    tuple[int, int]

    Raises
    ------
    ValueError
        If *roster_size* is below 2; no distinct pair exists.
    """
    if roster_size < 2:
        msg = f"roster_size must be >= 2, got {roster_size}"
        raise ValueError(msg)
    if _usable(explicit_a) and _usable(explicit_b):
        if explicit_a != explicit_b:
            return (explicit_a, explicit_b)
        return (explicit_a, explicit_b % roster_size + 1)
    return select_pair(result_id + str(quiz_id), roster_size)


def materialize(
    pair: tuple[int, int] | PersonaAssignment,
    locale_flag: Locale | str | bool | None,
    roster: Roster,
) -> tuple[PersonaView, PersonaView]:
    """Look up both ids of *pair* and localize their display names.

    Parameters
    ----------
    pair : tuple[int, int] | PersonaAssignment
        ``(poster_id, requester_id)``.
    locale_flag : Locale | str | bool | None
        ``True``/``"ja"`` for Japanese names, ``False``/``"en"`` for English.
    roster : Roster
        Persona roster.

    Returns
    -------
    tuple[PersonaView, PersonaView]

    Raises
    ------
    AssignmentError
        If either id is not in *roster*.
    """
    if isinstance(pair, PersonaAssignment):
        pair = pair.as_tuple()
    views = []
    for persona_id in pair:
        persona = roster.get(persona_id)
        if persona is None:
            msg = f"Unknown persona id {persona_id}. Roster ids: {roster.ids()}"
            raise AssignmentError(msg)
        views.append(PersonaView.of(persona, locale_flag))
    poster, requester = views
    return poster, requester


def _usable(value: int | None) -> bool:
    return value is not None and value > 0

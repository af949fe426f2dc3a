"""Result identifiers, persona assignment and answer scoring for In Grok's Mind."""

from grok_mind.api import Redirect, ResultView, Submission, load_result, submit_answer
from grok_mind.assigner import (
    AssignmentError,
    PersonaAssignment,
    build_pair_table,
    materialize,
    resolve_pair,
    select_pair,
    string_hash,
)
from grok_mind.catalog import Catalog, load_catalog
from grok_mind.codec import DecodeError, ScoredResult, decode_result_id, encode_result_id
from grok_mind.config import AppConfig, BackendConfig, load_config
from grok_mind.locales import Locale, resolve_locale
from grok_mind.roster import Roster, VirtualPersona, load_roster

__all__ = [
    "AppConfig",
    "AssignmentError",
    "BackendConfig",
    "Catalog",
    "DecodeError",
    "Locale",
    "PersonaAssignment",
    "Redirect",
    "ResultView",
    "Roster",
    "ScoredResult",
    "Submission",
    "VirtualPersona",
    "build_pair_table",
    "decode_result_id",
    "encode_result_id",
    "load_catalog",
    "load_config",
    "load_result",
    "load_roster",
    "materialize",
    "resolve_locale",
    "resolve_pair",
    "select_pair",
    "string_hash",
    "submit_answer",
]

"""Shared fixtures for grok_mind tests."""

import pytest

from grok_mind.catalog import load_catalog
from grok_mind.roster import load_roster

_ENV_VARS = (
    "GROK_MIND_BACKEND_TYPE",
    "GROK_MIND_BACKEND_MODEL",
    "GROK_MIND_BACKEND_TEMPERATURE",
    "GROK_MIND_BACKEND_MAX_TOKENS",
    "GROK_MIND_DEFAULT_LOCALE",
    "GROK_MIND_HOST",
    "GROK_MIND_USE_LLM",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep configuration tests independent of the caller's environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def roster():
    """The packaged five-persona roster."""
    return load_roster()


@pytest.fixture()
def catalog():
    """The packaged quiz/style catalog."""
    return load_catalog()


@pytest.fixture()
def evaluation_json():
    """A well-formed evaluation response."""
    return (
        '{"accuracy_score": 41, "accuracy_comment": "Correct: Dejima was closed.", '
        '"style_score": 33, "style_comment": "Mostly tsundere.", '
        '"total_score": 74, "overall_comment": "Solid."}'
    )

"""Unified application configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from grok_mind.locales import normalize_locale
from grok_mind.resources import load_yaml

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class BackendConfig:
    """LLM backend configuration.

    Parameters
    ----------
    type : str
        Registered backend name (see ``BackendRegistry``).
    model : str
        Model identifier passed to the backend.
    temperature : float
        Sampling temperature.
    max_tokens : int
        Maximum tokens per completion.
    extra : dict
        Additional kwargs forwarded to the backend constructor.
    """

    type: str = "litellm"
    model: str = "gemini/gemini-2.0-flash"
    temperature: float = 0.2
    max_tokens: int = 1024
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.model:
            msg = "model must be a non-empty string"
            raise ValueError(msg)
        if self.temperature < 0:
            msg = f"temperature must be >= 0, got {self.temperature}"
            raise ValueError(msg)
        if self.max_tokens <= 0:
            msg = f"max_tokens must be > 0, got {self.max_tokens}"
            raise ValueError(msg)


@dataclass
class AppConfig:
    """Top-level application configuration.

    Parameters
    ----------
    backend : BackendConfig
        LLM backend settings for answer scoring.
    default_locale : str
        Locale used when no request source names one (``"ja"`` or ``"en"``).
    host : str
        Host used to build absolute share URLs.
    use_llm : bool
        Score answers with the LLM backend.  When ``False`` deterministic
        mock feedback is produced instead.
    """

    backend: BackendConfig = field(default_factory=BackendConfig)
    default_locale: str = "ja"
    host: str = "localhost:3000"
    use_llm: bool = False

    def __post_init__(self) -> None:
        if normalize_locale(self.default_locale) is None:
            msg = f"default_locale must be 'ja' or 'en', got {self.default_locale!r}"
            raise ValueError(msg)


def load_config(source: str | Path | dict[str, Any] | AppConfig | None = None) -> AppConfig:
    """Load an AppConfig from a YAML file, dict, or environment variables.

    Environment variables (``GROK_MIND_*``) override values from *source*.

    Parameters
    ----------
    source : str | Path | dict | AppConfig | None
        A path to a YAML file, a raw dict, an already built config (returned
        unchanged), or ``None`` to use only environment variable overrides
        on defaults.

    Returns
    -------
    AppConfig
    """
    if isinstance(source, AppConfig):
        return source

    raw: dict[str, Any] = {}

    if isinstance(source, dict):
        raw = source
    elif source is not None:
        path = Path(source)
        if path.is_file():
            raw = load_yaml(path)

    backend_raw = raw.get("backend", {})
    defaults = BackendConfig()

    backend = BackendConfig(
        type=os.environ.get("GROK_MIND_BACKEND_TYPE", backend_raw.get("type", defaults.type)),
        model=os.environ.get("GROK_MIND_BACKEND_MODEL", backend_raw.get("model", defaults.model)),
        temperature=float(
            os.environ.get("GROK_MIND_BACKEND_TEMPERATURE", backend_raw.get("temperature", defaults.temperature))
        ),
        max_tokens=int(os.environ.get("GROK_MIND_BACKEND_MAX_TOKENS", backend_raw.get("max_tokens", defaults.max_tokens))),
        extra={k: v for k, v in backend_raw.items() if k not in {"type", "model", "temperature", "max_tokens"}},
    )

    use_llm = os.environ.get("GROK_MIND_USE_LLM", raw.get("use_llm", False))
    if isinstance(use_llm, str):
        use_llm = use_llm.strip().lower() in _TRUE_VALUES

    return AppConfig(
        backend=backend,
        default_locale=os.environ.get("GROK_MIND_DEFAULT_LOCALE", raw.get("default_locale", "ja")),
        host=os.environ.get("GROK_MIND_HOST", raw.get("host", "localhost:3000")),
        use_llm=bool(use_llm),
    )

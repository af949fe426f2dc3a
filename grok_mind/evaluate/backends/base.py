"""Completion backends used to grade answers, and the name → class registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RateLimitError(RuntimeError):
    """Raised by a backend when the provider rejects a call for rate limiting."""


class Backend(ABC):
    """A chat-completion provider.

    Implementations set ``name`` and turn a list of chat messages into the
    assistant's reply text.  Provider rate limiting is reported as
    :class:`RateLimitError` so the evaluator can tell it apart from other
    failures.
    """

    name: str = ""

    @abstractmethod
    def complete(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> str:
        """Return the reply to *messages*.

        Parameters
        ----------
        messages : list[dict[str, str]]
            ``role`` / ``content`` dicts, system message first.
        model : str | None
            Model for this call; ``None`` keeps the backend's own.
        temperature : float
            Sampling temperature.
        max_tokens : int
            Reply length limit.
        json_mode : bool
            Ask the provider for a bare JSON object, where it supports that.

        Raises
        ------
        RateLimitError
            If the provider refused the call for rate limiting.
        """


class BackendRegistry:
    """Backend classes keyed by the ``backend.type`` configuration value."""

    _backends: dict[str, type[Backend]] = {}

    @classmethod
    def register(cls, name: str):
        """Return a class decorator that files a backend under *name*."""

        def decorator(klass: type[Backend]) -> type[Backend]:
            cls._backends[name] = klass
            return klass

        return decorator

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> Backend:
        """Build the backend registered as *name* with *kwargs*.

        Raises
        ------
        KeyError
            If no backend is registered as *name*.
        """
        try:
            klass = cls._backends[name]
        except KeyError:
            msg = f"Unknown backend {name!r}. Available: {', '.join(cls.available()) or '(none)'}"
            raise KeyError(msg) from None
        return klass(**kwargs)

    @classmethod
    def available(cls) -> list[str]:
        return sorted(cls._backends)

"""LiteLLM backend: one completion interface for Gemini and other providers."""

from __future__ import annotations

import logging
from typing import Any

import litellm

from grok_mind.evaluate.backends.base import Backend, BackendRegistry, RateLimitError

logger = logging.getLogger(__name__)


@BackendRegistry.register("litellm")
class LiteLLMBackend(Backend):
    """Backend powered by LiteLLM's unified completion interface.

    Parameters
    ----------
    model : str
        Model identifier in LiteLLM format (e.g. ``"gemini/gemini-2.0-flash"``).
        Provider credentials are read by LiteLLM from the environment
        (``GEMINI_API_KEY`` for Gemini).
    max_tokens : int
        Default max tokens for completions.
    **options
        Extra keyword arguments forwarded to every ``litellm.completion`` call
        (e.g. ``top_p``, ``api_base``).
    """

    name = "litellm"

    def __init__(
        self,
        model: str = "gemini/gemini-2.0-flash",
        max_tokens: int = 1024,
        **options: Any,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._options = options

    def complete(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> str:
        """Call LiteLLM's unified completion endpoint.

        Raises
        ------
        RateLimitError
            If the provider answered with a rate-limit error.
        """
        kwargs: dict[str, Any] = {
            **self._options,
            "model": model or self._model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens or self._max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.debug("LiteLLM request model=%s messages=%d", kwargs["model"], len(messages))
        try:
            response = litellm.completion(**kwargs)
        except litellm.RateLimitError as exc:
            raise RateLimitError(str(exc)) from exc
        return response.choices[0].message.content or ""

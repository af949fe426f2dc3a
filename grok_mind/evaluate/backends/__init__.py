"""LLM backend abstraction and registry."""

from grok_mind.evaluate.backends.base import Backend, BackendRegistry, RateLimitError
from grok_mind.evaluate.backends.litellm_backend import LiteLLMBackend

__all__ = ["Backend", "BackendRegistry", "LiteLLMBackend", "RateLimitError"]

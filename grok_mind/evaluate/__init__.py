"""LLM scoring of trivia answers with pluggable backends."""

from grok_mind.evaluate.backends import Backend, BackendRegistry, RateLimitError
from grok_mind.evaluate.engine import AnswerEvaluator, PromptSpec, load_prompt_spec, parse_feedback, render

__all__ = [
    "AnswerEvaluator",
    "Backend",
    "BackendRegistry",
    "PromptSpec",
    "RateLimitError",
    "load_prompt_spec",
    "parse_feedback",
    "render",
]

"""AnswerEvaluator: scores a trivia answer with an LLM backend."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from grok_mind.catalog import QuizItem, StyleVariation
from grok_mind.config import AppConfig, BackendConfig, load_config
from grok_mind.evaluate.backends import BackendRegistry
from grok_mind.evaluate.backends.base import Backend, RateLimitError
from grok_mind.feedback import MAX_TOTAL_SCORE, FeedbackData, clamp_part, error_feedback
from grok_mind.locales import Locale, normalize_locale
from grok_mind.messages import ErrorType
from grok_mind.resources import load_yaml

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
_env = jinja2.Environment(undefined=jinja2.Undefined, keep_trailing_newline=False)


# ---------------------------------------------------------------------------
# Prompt loading and rendering
# ---------------------------------------------------------------------------


@dataclass
class PromptSpec:
    """Metadata and template content for a prompt.

    Parameters
    ----------
    name : str
        Unique prompt identifier.
    version : str
        Version string.
    description : str
        Human-readable description.
    system_template : str
        Jinja2 template for the system message.
    user_template : str
        Jinja2 template for the user message.
    """

    name: str
    version: str
    description: str
    system_template: str = ""
    user_template: str = ""


def load_prompt_spec(path: Path) -> PromptSpec:
    """Load a PromptSpec from a YAML file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    """
    data = load_yaml(path)
    return PromptSpec(
        name=data.get("name", "unknown"),
        version=str(data.get("version", "0.0")),
        description=data.get("description", ""),
        system_template=data.get("system", "") or "",
        user_template=data.get("user", "") or "",
    )


def render(spec: PromptSpec, variables: dict[str, Any]) -> list[dict[str, str]]:
    """Render a prompt spec into chat messages, skipping empty ones."""
    messages: list[dict[str, str]] = []
    for role, template in (("system", spec.system_template), ("user", spec.user_template)):
        content = _env.from_string(template).render(**variables).strip() if template else ""
        if content:
            messages.append({"role": role, "content": content})
    return messages


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def parse_feedback(response: str) -> FeedbackData:
    """Extract feedback from the first JSON object in an LLM response.

    Part scores are clamped to ``0..50``.  The total is always the sum of
    the parts; a reported ``total_score`` is only compared against it.

    Raises
    ------
    ValueError
        If the response holds no JSON object, or a part score is missing,
        non-numeric or not finite.
    """
    match = _JSON_OBJECT.search(response)
    if not match:
        msg = "No JSON object in evaluation response"
        raise ValueError(msg)
    data = json.loads(match.group(0))
    if not isinstance(data, dict):
        msg = "Evaluation response is not a JSON object"
        raise ValueError(msg)
    try:
        accuracy = _part_score(data, "accuracy_score")
        style = _part_score(data, "style_score")
    except (KeyError, TypeError, OverflowError) as exc:
        msg = f"Evaluation response lacks usable part scores: {exc!r}"
        raise ValueError(msg) from exc

    total = accuracy + style
    reported = data.get("total_score")
    if reported is not None and reported != total:
        logger.debug("Replacing reported total %r with part sum %d", reported, total)

    return FeedbackData(
        accuracy_score=accuracy,
        accuracy_comment=str(data.get("accuracy_comment", "")),
        style_score=style,
        style_comment=str(data.get("style_comment", "")),
        total_score=min(total, MAX_TOTAL_SCORE),
        overall_comment=str(data.get("overall_comment", "")),
    )


def _part_score(data: dict[str, Any], key: str) -> int:
    score = float(data[key])
    if not math.isfinite(score):
        msg = f"{key} is not a finite number: {data[key]!r}"
        raise ValueError(msg)
    return clamp_part(score)


# ---------------------------------------------------------------------------
# AnswerEvaluator
# ---------------------------------------------------------------------------


class AnswerEvaluator:
    """Score answers and produce reference answers with a configured backend.

    Parameters
    ----------
    backend : Backend
        LLM backend for completions.
    backend_config : BackendConfig | None
        Model, temperature and token defaults.  ``None`` uses defaults.
    templates_dir : Path
        Directory holding ``answer_evaluation.yaml`` and ``model_answer.yaml``.
    """

    def __init__(
        self,
        backend: Backend,
        backend_config: BackendConfig | None = None,
        *,
        templates_dir: Path = TEMPLATES_DIR,
    ) -> None:
        self._backend = backend
        self._config = backend_config or BackendConfig()
        self._evaluation_spec = load_prompt_spec(templates_dir / "answer_evaluation.yaml")
        self._model_answer_spec = load_prompt_spec(templates_dir / "model_answer.yaml")

    @classmethod
    def from_config(cls, config: AppConfig | dict | str | None = None) -> AnswerEvaluator:
        """Construct an evaluator from a config object or raw source.

        Raises
        ------
        KeyError
            If the configured backend type is not registered.
        """
        config = load_config(config)
        backend = BackendRegistry.create(
            config.backend.type,
            model=config.backend.model,
            max_tokens=config.backend.max_tokens,
            **config.backend.extra,
        )
        return cls(backend, config.backend)

    def evaluate(
        self,
        quiz: QuizItem,
        style: StyleVariation,
        answer: str,
        locale: Locale | str | bool | None,
        *,
        reference_answer: str | None = None,
    ) -> FeedbackData:
        """Score *answer* for accuracy and fidelity to *style*.

        Backend and parse failures do not propagate: they produce fallback
        feedback tagged with the matching :class:`ErrorType`.

        Parameters
        ----------
        quiz : QuizItem
            The trivia claim being fact-checked.
        style : StyleVariation
            The tone the answer should be written in.
        answer : str
            The user's answer.
        locale : Locale | str | bool | None
            Language of the prompt and of the comments.
        reference_answer : str | None
            Optional model answer given to the grader for comparison.

        Returns
        -------
        FeedbackData
        """
        resolved = normalize_locale(locale) or Locale.EN
        variables = self._variables(quiz, style, resolved)
        variables.update(answer=answer, reference_answer=reference_answer or "")
        messages = render(self._evaluation_spec, variables)
        seed = f"{quiz.id}:{style.id}:{answer}"

        try:
            raw_response = self._complete(messages, temperature=self._config.temperature, json_mode=True)
        except RateLimitError as exc:
            logger.warning("Evaluation rate limited quiz=%s style=%s: %s", quiz.id, style.id, exc)
            return error_feedback(seed, ErrorType.RATE_LIMIT, resolved)
        except Exception as exc:
            logger.warning("Evaluation backend failed quiz=%s style=%s: %s", quiz.id, style.id, exc)
            return error_feedback(seed, ErrorType.NETWORK_ERROR, resolved)

        try:
            feedback = parse_feedback(raw_response)
        except ValueError as exc:
            logger.warning("Unparseable evaluation quiz=%s style=%s: %s", quiz.id, style.id, exc)
            return error_feedback(seed, ErrorType.INVALID_RESPONSE, resolved)

        logger.info(
            "Evaluated quiz=%s style=%s backend=%s total=%d",
            quiz.id,
            style.id,
            self._backend.name,
            feedback.total_score,
        )
        return feedback

    def model_answer(
        self,
        quiz: QuizItem,
        style: StyleVariation,
        locale: Locale | str | bool | None,
    ) -> str | None:
        """Return a reference fact-check of *quiz* written in *style*.

        Returns ``None`` when the backend fails.
        """
        resolved = normalize_locale(locale) or Locale.EN
        messages = render(self._model_answer_spec, self._variables(quiz, style, resolved))
        try:
            text = self._complete(messages, temperature=0.7)
        except Exception as exc:
            logger.warning("Model answer failed quiz=%s style=%s: %s", quiz.id, style.id, exc)
            return None
        return text.strip() or None

    def _complete(self, messages: list[dict[str, str]], *, temperature: float, json_mode: bool = False) -> str:
        return self._backend.complete(
            messages,
            model=self._config.model,
            temperature=temperature,
            max_tokens=self._config.max_tokens,
            json_mode=json_mode,
        )

    @staticmethod
    def _variables(quiz: QuizItem, style: StyleVariation, locale: Locale) -> dict[str, Any]:
        return {
            "locale": locale.value,
            "content": quiz.content(locale),
            "style_name": style.name(locale),
            "style_description": style.description(locale),
        }

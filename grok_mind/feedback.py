"""Feedback on a scored answer: data model, banded comments and fallback scores."""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass

from grok_mind.locales import Locale
from grok_mind.messages import ErrorType, banded_comment, error_message, overall_error_comment

MAX_PART_SCORE = 50
MAX_TOTAL_SCORE = 100
FALLBACK_SCORE_RANGE = (20, 50)


@dataclass
class FeedbackData:
    """Evaluation of one answer.

    Parameters
    ----------
    accuracy_score : int
        Factual accuracy, ``0..50``.
    accuracy_comment : str
        Explanation of the accuracy score.
    style_score : int
        Fidelity to the requested tone, ``0..50``.
    style_comment : str
        Explanation of the style score.
    total_score : int
        Sum of both parts, ``0..100``.
    overall_comment : str
        Summary of the evaluation.
    error_type : str
        Empty for a real evaluation; otherwise the :class:`ErrorType` value
        explaining why fallback feedback was produced.
    """

    accuracy_score: int
    accuracy_comment: str
    style_score: int
    style_comment: str
    total_score: int
    overall_comment: str
    error_type: str = ""

    @property
    def is_fallback(self) -> bool:
        return bool(self.error_type)


def clamp_part(score: float) -> int:
    """Round and clamp a part score into ``0..50``."""
    return max(0, min(MAX_PART_SCORE, int(round(score))))


def split_score(score: int) -> tuple[int, int]:
    """Split a total score into ``(accuracy, style)`` parts.

    Accuracy takes the floor of half, style the remainder.
    """
    accuracy = score // 2
    return accuracy, score - accuracy


def feedback_from_score(score: int, locale: Locale | str | bool | None, style_name: str) -> FeedbackData:
    """Rebuild feedback for a result page from its total score alone.

    Parameters
    ----------
    score : int
        Total score decoded from a result id.
    locale : Locale | str | bool | None
        Output language.
    style_name : str
        Localized name of the requested style, quoted in the style comment.

    Returns
    -------
    FeedbackData
    """
    accuracy, style = split_score(score)
    return FeedbackData(
        accuracy_score=accuracy,
        accuracy_comment=banded_comment("accuracy", accuracy, locale),
        style_score=style,
        style_comment=banded_comment("style", style, locale, style=style_name),
        total_score=score,
        overall_comment=banded_comment("overall", score, locale),
    )


def _stable_seed(s: str) -> int:
    """Return a deterministic 32-bit seed from a string, stable across processes."""
    return int(hashlib.md5(s.encode()).hexdigest(), 16) % 2**32


def fallback_scores(seed: str) -> tuple[int, int]:
    """Draw reproducible ``(accuracy, style)`` scores in ``20..50`` for *seed*."""
    rng = random.Random(_stable_seed(seed))
    low, high = FALLBACK_SCORE_RANGE
    return rng.randint(low, high), rng.randint(low, high)


def mock_feedback(seed: str, locale: Locale | str | bool | None, style_name: str) -> FeedbackData:
    """Feedback used when answers are not scored by the LLM.

    Scores are drawn deterministically from *seed*, comments follow the
    usual score bands.
    """
    accuracy, style = fallback_scores(seed)
    total = accuracy + style
    return FeedbackData(
        accuracy_score=accuracy,
        accuracy_comment=banded_comment("accuracy", accuracy, locale),
        style_score=style,
        style_comment=banded_comment("style", style, locale, style=style_name),
        total_score=total,
        overall_comment=banded_comment("overall", total, locale),
    )


def error_feedback(seed: str, error_type: ErrorType, locale: Locale | str | bool | None) -> FeedbackData:
    """Fallback feedback for a failed evaluation, tagged with *error_type*.

    A rate-limited evaluation scores a flat 25/25, any other failure draws
    scores deterministically from *seed*.
    """
    if error_type is ErrorType.RATE_LIMIT:
        accuracy, style = 25, 25
    else:
        accuracy, style = fallback_scores(seed)
    message = error_message(error_type, locale)
    return FeedbackData(
        accuracy_score=accuracy,
        accuracy_comment=message,
        style_score=style,
        style_comment=message,
        total_score=accuracy + style,
        overall_comment=overall_error_comment(error_type, locale),
        error_type=error_type.value,
    )

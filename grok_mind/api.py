"""Package-level entry points: submit_answer() and load_result()."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from grok_mind.assigner import AssignmentError, PersonaAssignment, materialize, resolve_pair
from grok_mind.catalog import Catalog, QuizItem, StyleVariation, load_catalog
from grok_mind.codec import DecodeError, ScoredResult, decode_result_id, encode_result_id
from grok_mind.config import AppConfig, load_config
from grok_mind.evaluate import AnswerEvaluator
from grok_mind.feedback import FeedbackData, feedback_from_score, mock_feedback
from grok_mind.locales import Locale, resolve_locale
from grok_mind.messages import text
from grok_mind.roster import PersonaView, Roster, grok_persona, load_roster
from grok_mind.share import COMPRESSED_PARAM, build_result_url, expand_params, share_text

logger = logging.getLogger(__name__)


@dataclass
class Submission:
    """Outcome of submitting an answer.

    Parameters
    ----------
    result_id : str
        Encoded identifier of the scored result.
    feedback : FeedbackData
        Evaluation shown right after submitting.
    result_url : str
        Absolute share URL of the result page.
    personas : PersonaAssignment
        Persona ids pinned into *result_url*.
    model_answer : str | None
        Reference answer from the LLM, when requested and available.
    """

    result_id: str
    feedback: FeedbackData
    result_url: str
    personas: PersonaAssignment
    model_answer: str | None = None


@dataclass
class Redirect:
    """Instruction to send the visitor elsewhere instead of rendering a page."""

    location: str
    reason: str = ""


@dataclass
class ResultView:
    """Everything a result page renders, rebuilt from the result id."""

    result_id: str
    result: ScoredResult
    locale: Locale
    quiz: QuizItem
    style: StyleVariation
    answer: str
    feedback: FeedbackData
    poster: PersonaView
    requester: PersonaView
    grok: PersonaView
    page_title: str
    result_url: str
    share_text: str
    is_shared_view: bool
    personas: PersonaAssignment = field(init=False)

    def __post_init__(self) -> None:
        self.personas = PersonaAssignment(self.poster.id, self.requester.id)


def submit_answer(
    quiz_id: int,
    style_id: int,
    answer: str,
    *,
    locale: Locale | str | None = None,
    config: AppConfig | dict | str | Path | None = None,
    catalog: Catalog | None = None,
    roster: Roster | None = None,
    evaluator: AnswerEvaluator | None = None,
    timestamp: int | None = None,
    with_model_answer: bool = False,
) -> Submission:
    """Score an answer and mint its shareable result.

    The answer is scored by *evaluator* when given, by an evaluator built
    from *config* when ``config.use_llm`` is set, and by deterministic mock
    feedback otherwise.

    Parameters
    ----------
    quiz_id : int
        Trivia prompt answered.
    style_id : int
        Requested tone.
    answer : str
        The user's answer.
    locale : Locale | str | None
        Language of the session.  Defaults to ``config.default_locale``.
    config : AppConfig | dict | str | Path | None
        Application configuration or a source for :func:`load_config`.
    catalog : Catalog | None
        Quiz/style catalog.  Defaults to the packaged catalog.
    roster : Roster | None
        Persona roster.  Defaults to the packaged roster.
    evaluator : AnswerEvaluator | None
        Explicit evaluator, overriding ``config.use_llm``.
    timestamp : int | None
        Creation time in milliseconds; defaults to now.
    with_model_answer : bool
        Also request a reference answer and pass it to the grader.

    Returns
    -------
    Submission

    Raises
    ------
    KeyError
        If *quiz_id* or *style_id* is not in the catalog.
    ValueError
        If *roster* holds fewer than two personas.
    """
    config = load_config(config)
    catalog = catalog if catalog is not None else load_catalog()
    roster = roster if roster is not None else load_roster()
    resolved = resolve_locale([locale], default=config.default_locale)

    quiz = catalog.quiz(quiz_id)
    style = catalog.style(style_id)
    if quiz is None or style is None:
        msg = f"Unknown quiz/style combination: quiz_id={quiz_id} style_id={style_id}"
        raise KeyError(msg)

    if evaluator is None and config.use_llm:
        evaluator = AnswerEvaluator.from_config(config)

    model_answer: str | None = None
    if evaluator is not None:
        if with_model_answer:
            model_answer = evaluator.model_answer(quiz, style, resolved)
        feedback = evaluator.evaluate(quiz, style, answer, resolved, reference_answer=model_answer)
    else:
        feedback = mock_feedback(f"{quiz.id}:{style.id}:{answer}", resolved, style.name(resolved))

    result_id = encode_result_id(quiz.id, style.id, feedback.total_score, timestamp)
    poster_id, requester_id = resolve_pair(result_id, quiz.id, roster_size=len(roster))
    result_url = build_result_url(
        result_id,
        config.host,
        answer=answer,
        locale=resolved,
        quiz_user_id=poster_id,
        reply_user_id=requester_id,
    )

    logger.info(
        "Submitted answer quiz=%s style=%s total=%d result_id=%s fallback=%s",
        quiz.id,
        style.id,
        feedback.total_score,
        result_id,
        feedback.is_fallback,
    )
    return Submission(
        result_id=result_id,
        feedback=feedback,
        result_url=result_url,
        personas=PersonaAssignment(poster_id, requester_id),
        model_answer=model_answer,
    )


def load_result(
    result_id: str,
    query: Mapping[str, str] | None = None,
    *,
    config: AppConfig | dict | str | Path | None = None,
    catalog: Catalog | None = None,
    roster: Roster | None = None,
    referer: str = "",
    host: str | None = None,
) -> ResultView | Redirect:
    """Rebuild a result page from its identifier and query parameters.

    Parameters
    ----------
    result_id : str
        Identifier taken from the ``/result/{id}`` path.
    query : Mapping[str, str] | None
        Query parameters.  A compressed ``c`` parameter is expanded first;
        ``lang``, ``answer``, ``quizUserId``, ``replyUserId`` and ``direct``
        are honoured.
    config : AppConfig | dict | str | Path | None
        Application configuration or a source for :func:`load_config`.
    catalog : Catalog | None
        Quiz/style catalog.  Defaults to the packaged catalog.
    roster : Roster | None
        Persona roster.  Defaults to the packaged roster.
    referer : str
        ``Referer`` header of the request, used to tell shared visits apart.
    host : str | None
        Host serving the request.  Defaults to ``config.host``.

    Returns
    -------
    ResultView | Redirect
        A redirect to the home page when the id is malformed or references
        an unknown quiz or style.

    Raises
    ------
    ValueError
        If *roster* holds fewer than two personas.
    """
    config = load_config(config)
    catalog = catalog if catalog is not None else load_catalog()
    roster = roster if roster is not None else load_roster()
    host = host or config.host

    params = dict(query or {})
    if params.get(COMPRESSED_PARAM):
        params.update(expand_params(params.pop(COMPRESSED_PARAM)))

    locale = resolve_locale([params.get("lang")], default=config.default_locale)
    home = f"/?lang={locale.value}"

    try:
        scored = decode_result_id(result_id)
    except DecodeError as exc:
        logger.warning("Redirecting malformed result id: %s", exc)
        return Redirect(home, reason="malformed result id")

    quiz = catalog.quiz(scored.quiz_id)
    style = catalog.style(scored.style_id)
    if quiz is None or style is None:
        logger.warning(
            "Redirecting result id %r: unknown quiz_id=%s or style_id=%s",
            result_id,
            scored.quiz_id,
            scored.style_id,
        )
        return Redirect(home, reason="unknown quiz or style")

    quiz_user_id = _positive_int(params.get("quizUserId"))
    reply_user_id = _positive_int(params.get("replyUserId"))
    pair = resolve_pair(result_id, scored.quiz_id, quiz_user_id, reply_user_id, roster_size=len(roster))
    poster, requester = _personas_or_defaults(pair, locale, roster)

    style_name = style.name(locale)
    feedback = feedback_from_score(scored.score, locale, style_name)
    result_url = build_result_url(
        result_id,
        host,
        answer=params.get("answer"),
        locale=locale,
        quiz_user_id=quiz_user_id,
        reply_user_id=reply_user_id,
    )
    is_shared_view = params.get("direct") != "1" and host.split(":")[0] not in referer
    view_key = "shared_result_view" if is_shared_view else "result_title"

    view = ResultView(
        result_id=result_id,
        result=scored,
        locale=locale,
        quiz=quiz,
        style=style,
        answer=params.get("answer") or text("default_answer", locale),
        feedback=feedback,
        poster=poster,
        requester=requester,
        grok=grok_persona(locale),
        page_title=text(
            "page_title",
            locale,
            app_title=text("app_title", locale),
            view=text(view_key, locale),
            score=scored.score,
        ),
        result_url=result_url,
        share_text=share_text(quiz, style, scored.score, locale, result_url),
        is_shared_view=is_shared_view,
    )
    logger.info(
        "Loaded result %s quiz=%s style=%s score=%d shared=%s",
        result_id,
        quiz.id,
        style.id,
        scored.score,
        is_shared_view,
    )
    return view


def _positive_int(value: str | int | None) -> int | None:
    """Parse a URL parameter as a positive integer; anything else is absent."""
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-integer persona parameter %r", value)
        return None
    return number if number > 0 else None


def _personas_or_defaults(
    pair: tuple[int, int],
    locale: Locale,
    roster: Roster,
) -> tuple[PersonaView, PersonaView]:
    """Materialize *pair*, substituting unused roster personas for unknown ids."""
    try:
        return materialize(pair, locale, roster)
    except AssignmentError as exc:
        logger.warning("Substituting default persona: %s", exc)

    known = {persona_id for persona_id in pair if persona_id in roster}
    spare = (persona for persona in roster if persona.id not in known)
    views = []
    for persona_id in pair:
        persona = roster.get(persona_id)
        if persona is None:
            persona = next(spare)
        views.append(PersonaView.of(persona, locale))
    poster, requester = views
    return poster, requester

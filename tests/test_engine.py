"""Tests for prompt rendering, response parsing and AnswerEvaluator."""

import pytest

from grok_mind.evaluate import AnswerEvaluator, BackendRegistry, PromptSpec, RateLimitError, parse_feedback, render
from grok_mind.evaluate.backends.base import Backend
from grok_mind.evaluate.engine import TEMPLATES_DIR, load_prompt_spec
from grok_mind.feedback import fallback_scores


class _RecordingBackend(Backend):
    """Backend returning a canned response and recording calls."""

    name = "recording"

    def __init__(self, response="", error=None, **kwargs):
        self._response = response
        self._error = error
        self.kwargs = kwargs
        self.calls = []

    def complete(self, messages, *, model=None, temperature=0.0, max_tokens=1024, json_mode=False):
        self.calls.append({"messages": messages, "model": model, "temperature": temperature, "json_mode": json_mode})
        if self._error is not None:
            raise self._error
        return self._response


# -- render -----------------------------------------------------------------


def test_render_substitutes_variables():
    spec = PromptSpec(name="t", version="1", description="", system_template="Be {{ tone }}.", user_template="Q: {{ q }}")
    messages = render(spec, {"tone": "brief", "q": "why?"})
    assert messages == [
        {"role": "system", "content": "Be brief."},
        {"role": "user", "content": "Q: why?"},
    ]


def test_render_skips_empty_messages():
    spec = PromptSpec(name="t", version="1", description="", user_template="{% if x %}x{% endif %}")
    assert render(spec, {"x": False}) == []


def test_packaged_prompts_load():
    spec = load_prompt_spec(TEMPLATES_DIR / "answer_evaluation.yaml")
    assert spec.name == "answer_evaluation"
    assert spec.user_template


def test_packaged_prompt_renders_per_locale():
    spec = load_prompt_spec(TEMPLATES_DIR / "answer_evaluation.yaml")
    variables = {
        "content": "CLAIM",
        "style_name": "STYLE",
        "style_description": "DESC",
        "answer": "ANSWER",
        "reference_answer": "",
    }
    en = "\n".join(m["content"] for m in render(spec, {**variables, "locale": "en"}))
    ja = "\n".join(m["content"] for m in render(spec, {**variables, "locale": "ja"}))
    for rendered in (en, ja):
        assert "CLAIM" in rendered
        assert "STYLE" in rendered
        assert "ANSWER" in rendered
    assert en != ja


# -- parse_feedback ---------------------------------------------------------


def test_parse_feedback(evaluation_json):
    feedback = parse_feedback(evaluation_json)
    assert feedback.accuracy_score == 41
    assert feedback.style_score == 33
    assert feedback.total_score == 74
    assert feedback.overall_comment == "Solid."
    assert not feedback.is_fallback


def test_parse_feedback_in_code_fence(evaluation_json):
    feedback = parse_feedback(f"Here you go:\n```json\n{evaluation_json}\n```")
    assert feedback.total_score == 74


def test_parse_feedback_clamps_and_recomputes_total():
    feedback = parse_feedback('{"accuracy_score": 60, "style_score": -4, "total_score": 99}')
    assert feedback.accuracy_score == 50
    assert feedback.style_score == 0
    assert feedback.total_score == 50


@pytest.mark.parametrize("response", ["no json here", '{"accuracy_score": 10}', '{"style_score": "x", "accuracy_score": 1}'])
def test_parse_feedback_rejects_bad_responses(response):
    with pytest.raises(ValueError):
        parse_feedback(response)


_UNUSABLE_PART_SCORES = [
    '{"accuracy_score": 1e999, "style_score": 30}',
    '{"accuracy_score": -1e999, "style_score": 30}',
    '{"accuracy_score": Infinity, "style_score": 30}',
    '{"accuracy_score": NaN, "style_score": 30}',
    '{"accuracy_score": "forty", "style_score": 30}',
    '{"accuracy_score": null, "style_score": 30}',
    '{"accuracy_score": [40], "style_score": 30}',
    '{"accuracy_score": 40, "style_score": {}}',
    '{"accuracy_score": 1' + "0" * 400 + ', "style_score": 30}',
]


@pytest.mark.parametrize("response", _UNUSABLE_PART_SCORES)
def test_parse_feedback_rejects_unusable_part_scores(response):
    with pytest.raises(ValueError):
        parse_feedback(response)


@pytest.mark.parametrize("total", ["[70]", "{}", '"seventy"', "1e999", "null", "99"])
def test_parse_feedback_recomputes_unusable_total(total):
    feedback = parse_feedback(f'{{"accuracy_score": 40, "style_score": 30, "total_score": {total}}}')
    assert feedback.total_score == 70


# -- AnswerEvaluator --------------------------------------------------------


def test_evaluate_uses_backend(catalog, evaluation_json):
    backend = _RecordingBackend(response=evaluation_json)
    evaluator = AnswerEvaluator(backend)
    feedback = evaluator.evaluate(catalog.quiz(1), catalog.style(1), "They could not leave.", "en")

    assert feedback.total_score == 74
    (call,) = backend.calls
    assert call["model"] == "gemini/gemini-2.0-flash"
    assert call["temperature"] == 0.2
    prompt = "\n".join(m["content"] for m in call["messages"])
    assert "They could not leave." in prompt
    assert "Tsundere Style" in prompt


def test_evaluate_rate_limit_fallback(catalog):
    evaluator = AnswerEvaluator(_RecordingBackend(error=RateLimitError("429")))
    feedback = evaluator.evaluate(catalog.quiz(1), catalog.style(1), "answer", "ja")
    assert feedback.error_type == "RATE_LIMIT"
    assert feedback.total_score == 50


def test_evaluate_backend_failure_fallback(catalog):
    evaluator = AnswerEvaluator(_RecordingBackend(error=ConnectionError("down")))
    feedback = evaluator.evaluate(catalog.quiz(2), catalog.style(3), "answer", "en")
    assert feedback.error_type == "NETWORK_ERROR"
    assert (feedback.accuracy_score, feedback.style_score) == fallback_scores("2:3:answer")


def test_evaluate_invalid_response_fallback(catalog):
    evaluator = AnswerEvaluator(_RecordingBackend(response="I cannot grade this."))
    feedback = evaluator.evaluate(catalog.quiz(1), catalog.style(1), "answer", "en")
    assert feedback.error_type == "INVALID_RESPONSE"


def test_model_answer(catalog):
    backend = _RecordingBackend(response="  Actually, Dejima was tightly controlled.  \n")
    answer = AnswerEvaluator(backend).model_answer(catalog.quiz(1), catalog.style(2), "en")
    assert answer == "Actually, Dejima was tightly controlled."
    assert backend.calls[0]["temperature"] == 0.7


def test_model_answer_failure_returns_none(catalog):
    evaluator = AnswerEvaluator(_RecordingBackend(error=RuntimeError("boom")))
    assert evaluator.model_answer(catalog.quiz(1), catalog.style(2), "en") is None


def test_from_config_builds_registered_backend():
    BackendRegistry.register("_test_recording")(_RecordingBackend)
    try:
        evaluator = AnswerEvaluator.from_config(
            {"backend": {"type": "_test_recording", "model": "m1", "max_tokens": 99, "response": "{}"}}
        )
        backend = evaluator._backend
        assert isinstance(backend, _RecordingBackend)
        assert backend.kwargs == {"model": "m1", "max_tokens": 99}
        assert backend._response == "{}"
    finally:
        del BackendRegistry._backends["_test_recording"]


def test_from_config_unknown_backend():
    with pytest.raises(KeyError, match="Unknown backend"):
        AnswerEvaluator.from_config({"backend": {"type": "nonexistent_backend_xyz"}})


@pytest.mark.parametrize("response", _UNUSABLE_PART_SCORES)
def test_evaluate_unusable_part_scores_fall_back(catalog, response):
    evaluator = AnswerEvaluator(_RecordingBackend(response=response))
    feedback = evaluator.evaluate(catalog.quiz(1), catalog.style(1), "answer", "en")
    assert feedback.error_type == "INVALID_RESPONSE"
    assert 40 <= feedback.total_score <= 100


def test_evaluate_list_total_uses_part_sum(catalog):
    response = '{"accuracy_score": 40, "style_score": 30, "total_score": [70]}'
    evaluator = AnswerEvaluator(_RecordingBackend(response=response))
    feedback = evaluator.evaluate(catalog.quiz(1), catalog.style(1), "answer", "en")
    assert not feedback.is_fallback
    assert feedback.total_score == 70


def test_evaluation_requests_json_but_model_answer_does_not(catalog, evaluation_json):
    backend = _RecordingBackend(response=evaluation_json)
    evaluator = AnswerEvaluator(backend)
    evaluator.evaluate(catalog.quiz(1), catalog.style(1), "answer", "en")
    evaluator.model_answer(catalog.quiz(1), catalog.style(1), "en")
    assert [call["json_mode"] for call in backend.calls] == [True, False]

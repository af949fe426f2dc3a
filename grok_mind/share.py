"""Share links and share text for result pages."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from urllib.parse import quote, urlencode

from grok_mind.catalog import QuizItem, StyleVariation
from grok_mind.locales import Locale
from grok_mind.messages import text

logger = logging.getLogger(__name__)

# Query parameter name → short key inside the compressed ``c`` token.
_SHORT_KEYS = {
    "answer": "a",
    "lang": "l",
    "quizUserId": "qu",
    "replyUserId": "ru",
    "direct": "d",
}
COMPRESSED_PARAM = "c"


def compress_params(params: dict[str, str]) -> str:
    """Pack the known result-page query parameters into one URL-safe token.

    Unknown keys are dropped; empty values are kept as empty strings.
    """
    payload = {short: str(params.get(name) or "") for name, short in _SHORT_KEYS.items()}
    raw = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def expand_params(token: str) -> dict[str, str]:
    """Unpack a token from :func:`compress_params`.

    Only non-empty values are returned.  A corrupt token is logged and
    yields an empty dict, so the page renders with defaults.
    """
    padded = token + "=" * (-len(token) % 4)
    try:
        data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        logger.warning("Could not expand share parameters %r: %s", token, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Share parameters are not a mapping: %r", token)
        return {}
    return {name: str(data[short]) for name, short in _SHORT_KEYS.items() if data.get(short)}


def base_url(host: str) -> str:
    """Return ``http://host`` for localhost, ``https://host`` otherwise."""
    protocol = "http" if "localhost" in host else "https"
    return f"{protocol}://{host}"


def build_result_url(
    result_id: str,
    host: str,
    *,
    answer: str | None = None,
    locale: Locale | str | None = None,
    quiz_user_id: int | str | None = None,
    reply_user_id: int | str | None = None,
    direct: bool = False,
) -> str:
    """Build the absolute share URL of a result page.

    Optional parameters are packed into the compressed ``c`` query parameter.

    Parameters
    ----------
    result_id : str
        Encoded result identifier.
    host : str
        Host (with optional port) serving the application.
    answer : str | None
        The user's answer text.
    locale : Locale | str | None
        Language the result was produced in.
    quiz_user_id, reply_user_id : int | str | None
        Persona ids to pin on the shared page.
    direct : bool
        Mark the link as opened by its author rather than a share recipient.

    Returns
    -------
    str
    """
    url = f"{base_url(host)}/result/{quote(result_id, safe='')}"
    if isinstance(locale, Locale):
        locale = locale.value
    params = {
        "answer": answer or "",
        "lang": locale or "",
        "quizUserId": "" if quiz_user_id is None else str(quiz_user_id),
        "replyUserId": "" if reply_user_id is None else str(reply_user_id),
        "direct": "1" if direct else "",
    }
    if not any(params.values()):
        return url
    return f"{url}?{urlencode({COMPRESSED_PARAM: compress_params(params)})}"


def share_text(
    quiz: QuizItem,
    style: StyleVariation,
    score: int,
    locale: Locale | str | bool | None,
    url: str | None = None,
) -> str:
    """Return the text posted when sharing a result.

    With a *url* the text names the total score and links the result page;
    without one a compact variant is used.
    """
    if url:
        return text(
            "share_text_with_url",
            locale,
            content=quiz.content(locale),
            style=style.name(locale),
            total_score=score,
            url=url,
        )
    return text("share_text_compact", locale, total_score=score)

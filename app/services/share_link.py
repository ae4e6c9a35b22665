"""
Share links for quizzes.

Two forms exist: ``/?id=<quiz id>`` for stored quizzes, and ``/?v=<payload>``
where the payload is the quiz itself as URL-safe base64 JSON. Images are
removed from the embedded form since they would not fit in a URL.
"""
import base64
import binascii
import json
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, quote, urlsplit

from pydantic import ValidationError as ModelValidationError

from app.schemas.quiz.quiz_base import ValentineQuiz, strip_images


@dataclass(frozen=True)
class LaunchContext:
    id_param: Optional[str] = None
    v_param: Optional[str] = None


def encode_quiz(quiz: ValentineQuiz) -> str:
    payload = strip_images(quiz).model_dump(by_alias=True, exclude_none=True)
    raw = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return (
        base64.b64encode(raw).decode("ascii")
        .replace("+", "-")
        .replace("/", "_")
        .rstrip("=")
    )


def decode_quiz(encoded: str) -> Optional[ValentineQuiz]:
    try:
        b64 = encoded.replace("-", "+").replace("_", "/")
        b64 += "=" * (-len(b64) % 4)
        parsed = json.loads(base64.b64decode(b64, validate=True).decode("utf-8"))
    except (AttributeError, TypeError, ValueError, RecursionError, binascii.Error):
        return None

    if (
        not isinstance(parsed, dict)
        or not isinstance(parsed.get("partnerName"), str)
        or not isinstance(parsed.get("senderName"), str)
        or not isinstance(parsed.get("questions"), list)
        or not parsed["questions"]
    ):
        return None

    try:
        return ValentineQuiz.model_validate(parsed)
    except ModelValidationError:
        return None


def _origin(base_url: str) -> str:
    return base_url.rstrip("/")


def build_share_url_from_quiz(quiz: ValentineQuiz, base_url: str) -> str:
    return f"{_origin(base_url)}/?v={encode_quiz(quiz)}"


def build_share_url_from_id(quiz_id: str, base_url: str) -> str:
    return f"{_origin(base_url)}/?id={quote(quiz_id, safe='')}"


def _query_param(location: str, name: str) -> Optional[str]:
    values = parse_qs(urlsplit(location).query).get(name)
    if not values or not values[0]:
        return None
    return values[0]


def launch_context_from_location(location: str) -> LaunchContext:
    return LaunchContext(
        id_param=_query_param(location, "id"),
        v_param=_query_param(location, "v"),
    )


def extract_from_location(location: str) -> Optional[ValentineQuiz]:
    encoded = _query_param(location, "v")
    if encoded is None:
        return None
    return decode_quiz(encoded)

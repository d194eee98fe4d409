# File: src/app/utils/ai_response.py
import json
import logging
import re
from typing import Any, Iterator, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")
_ARRAY_SPAN = re.compile(r"\[[\s\S]*\]")


class AIResponseParseError(Exception):
    """The model's reply held no usable JSON of the expected shape."""

    def __init__(self, reason: str, raw: str):
        super().__init__(reason)
        self.reason = reason
        self.raw = raw


def json_candidates(content: str) -> Iterator[str]:
    """
    Spans of a free-text reply that may hold the JSON payload, best first:
    a ```json fenced block, the widest {...} span, the widest [...] span,
    then the whole reply.
    """
    fenced = _FENCED_JSON.search(content)
    if fenced:
        yield fenced.group(1)
    for pattern in (_OBJECT_SPAN, _ARRAY_SPAN):
        span = pattern.search(content)
        if span:
            yield span.group(0)
    yield content.strip()


def _reject_constant(name: str):
    # NaN and Infinity are not JSON numbers
    raise ValueError(f"non-finite number {name}")


def extract_json(content: str) -> Any:
    error = None
    for text in json_candidates(content):
        try:
            return json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            error = error or e
    raise AIResponseParseError(f"invalid JSON: {error}", content)


def parse_ai_json(content: str, schema: Type[ModelT]) -> ModelT:
    """Extract JSON from ``content`` and validate it against ``schema``."""
    data = extract_json(content)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.warning(f"AI response did not match {schema.__name__}: {e.error_count()} error(s)")
        raise AIResponseParseError(f"unexpected shape for {schema.__name__}", content)

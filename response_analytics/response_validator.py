"""
Domain validation for response candidates
"""
from typing import Any, Mapping, Union

import pydantic

from response_analytics.errors import ValidationError
from response_analytics.models import ResponseCandidate, ResponseEvent


def validate_response(candidate: Union[ResponseCandidate, Mapping[str, Any]]) -> ResponseEvent:
    """
    Check a candidate against the response invariants.
    Stops at the first violation and raises ValidationError naming the field.
    """
    if not isinstance(candidate, ResponseCandidate):
        candidate = coerce_candidate(candidate)

    # Answer index
    if candidate.answerIndex < 0:
        raise ValidationError("answerIndex", "must be at least 0", candidate.answerIndex)

    # Response time
    if candidate.responseTimeMs < 0:
        raise ValidationError("responseTimeMs", "must be non-negative", candidate.responseTimeMs)

    # Difficulty and ability are both unit-interval values
    if not _in_unit_interval(candidate.difficulty):
        raise ValidationError("difficulty", "must be between 0 and 1", candidate.difficulty)

    if not _in_unit_interval(candidate.studentAbility):
        raise ValidationError("studentAbility", "must be between 0 and 1", candidate.studentAbility)

    # Topic
    if candidate.topic is None or not candidate.topic.strip():
        raise ValidationError("topic", "is required and must not be blank", candidate.topic)

    # Identifiers
    for field in ("sessionId", "questionId"):
        value = getattr(candidate, field)
        if value is None or not value.strip():
            raise ValidationError(field, "is required", value)

    # Position in session
    if candidate.questionNumber < 1:
        raise ValidationError("questionNumber", "must be at least 1", candidate.questionNumber)

    data = candidate.model_dump()
    data["topic"] = candidate.topic.strip()
    return ResponseEvent(**data)


def coerce_candidate(data: Mapping[str, Any]) -> ResponseCandidate:
    """Build a candidate from raw data, reporting type problems as ValidationError"""
    try:
        return ResponseCandidate.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "response"
        if first["type"] == "missing":
            raise ValidationError(field, "is required") from e
        raise ValidationError(field, first["msg"], first.get("input")) from e


def _in_unit_interval(value: float) -> bool:
    # NaN fails both comparisons
    return 0.0 <= value <= 1.0

"""
core/meal_parser.py
────────────────────────────────────────────────────────────────────────
Reduce a vision model's free-text reply to a validated `MealCandidate`.

The reply is untrusted: it is first reduced to one JSON object, then
checked field by field.  The outcome is a tagged result

    MealParsed | MalformedPayload | InvalidPayload

so callers decide how to surface each case.
"""
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from numbers import Real
from typing import Any, Union

from core.models.meal import MealCandidate, MealType

REQUIRED_FIELDS = ("name", "calories", "protein", "carbs", "fat", "meal_type")
NUMERIC_FIELDS = ("calories", "protein", "carbs", "fat")

_FENCE = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```")


# ───────── tagged result ─────────────────────────────────────────────
@dataclass(frozen=True)
class MealParsed:
    meal: MealCandidate


@dataclass(frozen=True)
class MalformedPayload:
    reason: str


@dataclass(frozen=True)
class InvalidPayload:
    field: str
    reason: str


MealParseResult = Union[MealParsed, MalformedPayload, InvalidPayload]


# ───────── step 1: text → dict ───────────────────────────────────────
def extract_json_object(raw: str) -> dict[str, Any]:
    """
    Strip code fences, keep the span from the first `{` to the last `}`
    and decode it.  Raises ValueError when no JSON object comes out.
    """
    text = raw.strip()

    match = _FENCE.search(text)
    if match:
        text = match.group(1).strip()

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end != -1:
        text = text[start : end + 1]

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc.msg}") from exc

    if not isinstance(data, dict):
        raise ValueError("response is not a JSON object")
    return data


# ───────── step 2: dict → MealCandidate ──────────────────────────────
def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _is_non_negative_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    try:
        return math.isfinite(float(value)) and value >= 0
    except OverflowError:
        return False


def validate_meal(data: dict[str, Any]) -> MealParsed | InvalidPayload:
    for field in REQUIRED_FIELDS:
        if _is_missing(data.get(field)):
            return InvalidPayload(field, f"missing required field: {field}")

    for field in NUMERIC_FIELDS:
        if not _is_non_negative_number(data[field]):
            return InvalidPayload(field, f'field "{field}" must be a non-negative number')

    allowed = [m.value for m in MealType]
    if data["meal_type"] not in allowed:
        return InvalidPayload("meal_type", f"meal_type must be one of: {', '.join(allowed)}")

    name = data["name"]
    if not isinstance(name, str) or not name.strip():
        return InvalidPayload("name", "name must be non-empty text")

    description = data.get("description")
    if description is not None and not isinstance(description, str):
        return InvalidPayload("description", "description must be text")

    return MealParsed(
        MealCandidate(
            name=name,
            calories=data["calories"],
            protein=data["protein"],
            carbs=data["carbs"],
            fat=data["fat"],
            meal_type=data["meal_type"],
            description=description or "",
        )
    )


def parse_meal_response(raw: str) -> MealParseResult:
    try:
        data = extract_json_object(raw)
    except ValueError as exc:
        return MalformedPayload(str(exc))
    return validate_meal(data)

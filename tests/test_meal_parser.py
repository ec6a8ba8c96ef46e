# tests/test_meal_parser.py
from __future__ import annotations

import json
import pytest

from core.meal_parser import (
    InvalidPayload,
    MalformedPayload,
    MealParsed,
    extract_json_object,
    parse_meal_response,
    validate_meal,
)
from tests.conftest import VALID_REPLY

BASE = json.loads(VALID_REPLY)


def _with(**overrides):
    data = dict(BASE)
    for k, v in overrides.items():
        if v is ...:
            data.pop(k, None)
        else:
            data[k] = v
    return data


# ── extraction ───────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "wrapped",
    [
        f"```json\n{VALID_REPLY}\n```",
        f"```\n{VALID_REPLY}\n```",
        f"Here is the analysis:\n```json\n{VALID_REPLY}\n```\nEnjoy!",
        f"Sure! {VALID_REPLY} Let me know if you need more.",
    ],
)
def test_fenced_and_chatty_replies_extract_like_plain_json(wrapped):
    assert extract_json_object(wrapped) == extract_json_object(VALID_REPLY) == BASE


def test_parsed_meal_keeps_exact_values():
    outcome = parse_meal_response(f"```json\n{VALID_REPLY}\n```")
    assert isinstance(outcome, MealParsed)
    meal = outcome.meal
    assert meal.name == "Grilled chicken with rice"
    assert (meal.calories, meal.protein, meal.carbs, meal.fat) == (450, 35, 48, 12)
    assert meal.meal_type == "lunch"
    assert meal.description == "A balanced plate"


@pytest.mark.parametrize(
    "raw",
    ["", "I cannot identify this meal.", "{not json}", "[1, 2, 3]", "```json\n{\"name\": \n```"],
)
def test_unparsable_replies_are_malformed(raw):
    assert isinstance(parse_meal_response(raw), MalformedPayload)


# ── validation ───────────────────────────────────────────────────────
@pytest.mark.parametrize("field", ["name", "calories", "protein", "carbs", "fat", "meal_type"])
def test_missing_required_field_is_named(field):
    outcome = validate_meal(_with(**{field: ...}))
    assert isinstance(outcome, InvalidPayload)
    assert outcome.field == field


def test_empty_string_counts_as_missing():
    outcome = validate_meal(_with(name=""))
    assert isinstance(outcome, InvalidPayload) and outcome.field == "name"


@pytest.mark.parametrize("field", ["calories", "protein", "carbs", "fat"])
def test_negative_values_fail_instead_of_clamping(field):
    outcome = validate_meal(_with(**{field: -1}))
    assert isinstance(outcome, InvalidPayload)
    assert outcome.field == field


@pytest.mark.parametrize("value", ["450", True, [450]])
def test_non_numeric_calories_fail(value):
    outcome = validate_meal(_with(calories=value))
    assert isinstance(outcome, InvalidPayload) and outcome.field == "calories"


def test_integer_beyond_float_range_fails():
    outcome = validate_meal(_with(calories=10**400))
    assert isinstance(outcome, InvalidPayload) and outcome.field == "calories"


@pytest.mark.parametrize("meal_type", ["brunch", "Lunch", 3])
def test_unknown_meal_type_is_not_defaulted(meal_type):
    outcome = validate_meal(_with(meal_type=meal_type))
    assert isinstance(outcome, InvalidPayload)
    assert outcome.field == "meal_type"


def test_blank_name_fails():
    outcome = validate_meal(_with(name="   "))
    assert isinstance(outcome, InvalidPayload) and outcome.field == "name"


def test_description_defaults_to_empty():
    outcome = validate_meal(_with(description=...))
    assert isinstance(outcome, MealParsed)
    assert outcome.meal.description == ""


def test_zero_and_fractional_values_are_valid():
    outcome = validate_meal(_with(calories=0, fat=0.5))
    assert isinstance(outcome, MealParsed)
    assert outcome.meal.fat == 0.5

"""
Conditional logic service

Evaluates branching conditions against the current responses and derives
which question blocks / questions are visible
"""
import logging
import math
import re
from typing import Any, Dict, List, Mapping

from pydantic import TypeAdapter

from intake_engine.core.errors import IntakeConfigurationError
from intake_engine.database.schemas import (
    Condition,
    EqualsCondition,
    NotEqualsCondition,
    ContainsCondition,
    NotContainsCondition,
    GreaterThanCondition,
    LessThanCondition,
    GreaterThanOrEqualCondition,
    LessThanOrEqualCondition,
    IsEmptyCondition,
    IsNotEmptyCondition,
    AndCondition,
    OrCondition,
    NotCondition,
    ConditionalRule,
    Question,
    QuestionBlock,
)
from intake_engine.services.validation import is_empty, is_number

logger = logging.getLogger(__name__)

_condition_adapter = TypeAdapter(Condition)

# Numeric text accepted by JS Number(): decimal literals, Infinity and 0x/0o/0b integers
DECIMAL_TEXT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*(?:[eE][+-]?[0-9]+)?|\.[0-9]+(?:[eE][+-]?[0-9]+)?|Infinity)")
RADIX_TEXT = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def parse_condition(data: Any) -> Condition:
    """
    Parse a condition definition (camelCase JSON shape) into a Condition model

    Raises:
        pydantic.ValidationError: If the definition has an unknown type or missing fields
    """
    return _condition_adapter.validate_python(data)


def values_equal(actual: Any, expected: Any) -> bool:
    """
    Strict equality: no coercion between strings, numbers and booleans
    """
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual == expected
    if is_number(actual) and is_number(expected):
        return actual == expected
    if isinstance(actual, str) and isinstance(expected, str):
        return actual == expected
    if actual is None or expected is None:
        return actual is None and expected is None
    # Lists and mappings only equal themselves
    return actual is expected


def to_number(value: Any) -> float:
    """
    Numeric view of a response; NaN when absent or non-numeric

    NaN makes every ordering comparison false, so a missing answer never
    satisfies greaterThan/lessThan.
    """
    if isinstance(value, bool):
        return float(value)
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return math.nan
        if DECIMAL_TEXT.fullmatch(text):
            return float(text)
        if RADIX_TEXT.fullmatch(text):
            try:
                return float(int(text, 0))
            except OverflowError:
                return math.inf
        return math.nan
    return math.nan


def check_equals(actual: Any, expected: Any) -> bool:
    if isinstance(expected, list):
        return any(values_equal(actual, option) for option in expected)
    return values_equal(actual, expected)


def check_contains(actual: Any, expected: Any) -> bool:
    if isinstance(actual, list):
        return any(values_equal(item, expected) for item in actual)
    if isinstance(actual, str):
        return isinstance(expected, str) and expected in actual
    return False


def evaluate_condition(condition: Condition, responses: Mapping[str, Any]) -> bool:
    """
    Evaluate a condition tree against the current responses

    Args:
        condition: Condition node (leaf comparison or and/or/not composite)
        responses: question_id -> response; missing ids count as unanswered

    Returns:
        True if the condition holds

    Raises:
        IntakeConfigurationError: If the node is not a known condition type
    """
    if isinstance(condition, (AndCondition, OrCondition, NotCondition)):
        if isinstance(condition, AndCondition):
            return all(evaluate_condition(child, responses) for child in condition.conditions)
        if isinstance(condition, OrCondition):
            return any(evaluate_condition(child, responses) for child in condition.conditions)
        return not evaluate_condition(condition.condition, responses)

    question_id = getattr(condition, "question_id", None)
    actual = responses.get(question_id) if question_id is not None else None

    if isinstance(condition, EqualsCondition):
        return check_equals(actual, condition.value)
    if isinstance(condition, NotEqualsCondition):
        return not check_equals(actual, condition.value)
    if isinstance(condition, ContainsCondition):
        return check_contains(actual, condition.value)
    if isinstance(condition, NotContainsCondition):
        return not check_contains(actual, condition.value)
    if isinstance(condition, GreaterThanCondition):
        return to_number(actual) > to_number(condition.value)
    if isinstance(condition, LessThanCondition):
        return to_number(actual) < to_number(condition.value)
    if isinstance(condition, GreaterThanOrEqualCondition):
        return to_number(actual) >= to_number(condition.value)
    if isinstance(condition, LessThanOrEqualCondition):
        return to_number(actual) <= to_number(condition.value)
    if isinstance(condition, IsEmptyCondition):
        return is_empty(actual)
    if isinstance(condition, IsNotEmptyCondition):
        return not is_empty(actual)

    raise IntakeConfigurationError(f"Unknown condition type: {getattr(condition, 'type', condition)!r}")


def get_visible_questions(questions: List[Question], responses: Mapping[str, Any]) -> List[Question]:
    """
    Questions whose own display condition is absent or currently true (input order kept)
    """
    return [
        question for question in questions
        if question.conditional_display is None
        or evaluate_condition(question.conditional_display, responses)
    ]


def get_visible_blocks(
    blocks: List[QuestionBlock],
    branching_rules: List[ConditionalRule],
    responses: Mapping[str, Any],
) -> List[str]:
    """
    Determine which question blocks are visible

    Starts from every block, applies branching rules whose condition holds
    ('show' adds targets, 'hide'/'skip' remove them, 'require' does not affect
    visibility), then drops blocks whose own display condition is false.

    Returns:
        Ordered list of visible block ids
    """
    # dict keeps insertion order, used as an ordered set
    visible: Dict[str, None] = {block.id: None for block in blocks}

    for rule in branching_rules:
        if not evaluate_condition(rule.condition, responses):
            continue
        targets = rule.action.target_block_ids
        if rule.action.type == "show":
            for block_id in targets:
                visible[block_id] = None
        elif rule.action.type in ("hide", "skip"):
            for block_id in targets:
                visible.pop(block_id, None)
        logger.debug(f"Branching rule {rule.id} applied: {rule.action.type} {targets}")

    for block in blocks:
        if block.conditional_display is not None and not evaluate_condition(block.conditional_display, responses):
            visible.pop(block.id, None)

    return list(visible)

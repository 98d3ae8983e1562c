"""
Intake evaluation service

Composes branching and validation over a whole intake: skips questions that
are not currently shown and collects every failing question's messages
"""
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from intake_engine.database.schemas import (
    Condition,
    IntakePathConfig,
    IntakeResponses,
    IntakeValidationResult,
    Question,
    QuestionBlock,
)
from intake_engine.services.conditions import (
    evaluate_condition,
    get_visible_blocks,
    get_visible_questions,
)
from intake_engine.services.validation import is_number, validate_response

logger = logging.getLogger(__name__)


def is_question_applicable(
    question: Question,
    responses: Mapping[str, Any],
    conditions: Optional[Mapping[str, Condition]] = None,
) -> bool:
    """
    Whether a question is currently shown (and therefore validated)

    A condition supplied by the branching system takes precedence over the
    question's own display condition.
    """
    condition = None
    if conditions is not None:
        condition = conditions.get(question.id)
    if condition is None:
        condition = question.conditional_display
    if condition is None:
        return True
    return evaluate_condition(condition, responses)


def validate_intake(
    questions: List[Question],
    responses: Mapping[str, Any],
    conditions: Optional[Mapping[str, Condition]] = None,
) -> IntakeValidationResult:
    """
    Validate every applicable question of an intake in one pass

    Args:
        questions: Questions to check, evaluated by their order field (ties keep list order)
        responses: question_id -> response
        conditions: Optional question_id -> visibility condition from the branching system

    Returns:
        IntakeValidationResult; errors only has entries for failing questions
    """
    errors: Dict[str, List[str]] = {}
    skipped = 0

    for question in sorted(questions, key=lambda q: q.order):
        if not is_question_applicable(question, responses, conditions):
            skipped += 1
            continue

        result = validate_response(question, responses.get(question.id))
        if result.errors:
            errors[question.id] = result.errors

    logger.debug(
        f"Validated intake: {len(questions) - skipped} applicable, {skipped} skipped, {len(errors)} failing"
    )

    return IntakeValidationResult(is_valid=len(errors) == 0, errors=errors)


def validate_intake_completion(responses: Mapping[str, Any], blocks: List[QuestionBlock]) -> IntakeValidationResult:
    """
    Validate all questions of the given blocks, without block-level branching
    """
    questions = [question for block in blocks for question in block.questions]
    return validate_intake(questions, responses)


CLIENT_TYPE_QUESTION_ID = "client-type"


def path_context(path: IntakePathConfig, responses: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Responses as seen by a path's conditions

    Branching rules key off the chosen client type, exposed as the
    'client-type' answer unless the responses already carry one.
    """
    context = {CLIENT_TYPE_QUESTION_ID: path.client_type}
    context.update(responses)
    return context


def get_path_questions(
    path: IntakePathConfig,
    blocks: List[QuestionBlock],
    responses: Mapping[str, Any],
) -> List[Question]:
    """
    Questions currently shown for an intake path

    Blocks are restricted to the path's block ids (in the path's order), then
    filtered by the path's branching rules and each block's display condition;
    questions are filtered by their own display condition.
    """
    responses = path_context(path, responses)
    blocks_by_id = {block.id: block for block in blocks}
    path_blocks = [blocks_by_id[block_id] for block_id in path.question_block_ids if block_id in blocks_by_id]
    visible_ids = set(get_visible_blocks(path_blocks, path.branching_rules, responses))

    questions: List[Question] = []
    for block in path_blocks:
        if block.id in visible_ids:
            questions.extend(get_visible_questions(block.questions, responses))
    return questions


def validate_path(
    path: IntakePathConfig,
    blocks: List[QuestionBlock],
    responses: Mapping[str, Any],
) -> IntakeValidationResult:
    """
    Validate responses against the questions an intake path currently shows
    """
    questions = get_path_questions(path, blocks, responses)
    return validate_intake(questions, path_context(path, responses))


def sanitize_responses(responses: Mapping[str, Any]) -> IntakeResponses:
    """
    Drop unanswered entries and trim whitespace from text answers
    """
    sanitized: IntakeResponses = {}
    for key, value in responses.items():
        if value is None:
            continue
        if isinstance(value, str):
            sanitized[key] = value.strip()
        elif isinstance(value, list):
            sanitized[key] = [item.strip() if isinstance(item, str) else item for item in value]
        else:
            sanitized[key] = value
    return sanitized


def sanitize_input(value: Any, question_type: str) -> Any:
    """
    Normalize a raw answer to the shape its question type expects

    Returns None for numbers and dates that cannot be parsed.
    """
    if value is None:
        return None

    if question_type in ("text", "textarea"):
        return str(value).strip()

    if question_type in ("number", "range"):
        if is_number(value):
            return value
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
        if math.isnan(number):
            return None
        return int(number) if number.is_integer() else number

    if question_type in ("select", "radio"):
        return str(value)

    if question_type in ("multiselect", "checkbox"):
        return value if isinstance(value, list) else [value]

    if question_type == "date":
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        try:
            return datetime.fromisoformat(str(value).strip()).date().isoformat()
        except ValueError:
            return None

    return value


def get_default_value(question: Question) -> Any:
    if question.default_value is not None:
        return question.default_value

    if question.type in ("text", "textarea", "select", "radio"):
        return ""
    if question.type in ("number", "range"):
        if question.min is None:
            return 0
        return int(question.min) if question.min.is_integer() else question.min
    if question.type in ("multiselect", "checkbox"):
        return []
    return None

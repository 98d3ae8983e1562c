"""
Question validation service

Applies a question's declarative validation rules to a single response
"""
import logging
import re
from functools import lru_cache
from typing import Any, Callable, Dict, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from intake_engine.core.errors import IntakeConfigurationError
from intake_engine.database.schemas import Question, ValidationRule, ValidationResult

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+\Z")

_url_adapter = TypeAdapter(AnyUrl)

# Custom validators referenced by name from 'custom' rules
_custom_validators: Dict[str, Callable[[Any], bool]] = {}


def register_validator(name: str, func: Callable[[Any], bool]):
    """
    Register a named predicate for 'custom' rules

    Args:
        name: Name used as the rule value (e.g. {"type": "custom", "value": "us-zip"})
        func: Returns True when the response is acceptable
    """
    _custom_validators[name] = func


def unregister_validator(name: str):
    _custom_validators.pop(name, None)


@lru_cache(maxsize=256)
def compile_pattern(source: str) -> re.Pattern:
    """
    Compile a rule's regex source as-is (no flags)

    Raises:
        IntakeConfigurationError: If the source is not a valid regular expression
    """
    try:
        return re.compile(source)
    except re.error as e:
        raise IntakeConfigurationError(f"Invalid pattern {source!r}: {e}")


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a numeric answer
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, list) and len(value) == 0)


def is_valid_url(value: str) -> bool:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def rule_threshold(rule: ValidationRule) -> float:
    if not is_number(rule.value):
        raise IntakeConfigurationError(f"Rule '{rule.type}' needs a numeric value, got {rule.value!r}")
    return rule.value


def validate_rule(rule: ValidationRule, value: Any) -> Optional[str]:
    """
    Check one rule against a response

    Returns:
        The rule's message if violated, None otherwise
    """
    rule_type = rule.type

    if rule_type == "required":
        violated = is_empty(value)

    elif rule_type == "minLength":
        violated = isinstance(value, (str, list)) and len(value) < rule_threshold(rule)

    elif rule_type == "maxLength":
        violated = isinstance(value, (str, list)) and len(value) > rule_threshold(rule)

    elif rule_type == "min":
        violated = is_number(value) and value < rule_threshold(rule)

    elif rule_type == "max":
        violated = is_number(value) and value > rule_threshold(rule)

    elif rule_type == "email":
        violated = isinstance(value, str) and EMAIL_PATTERN.search(value) is None

    elif rule_type == "pattern":
        if not isinstance(rule.value, str):
            raise IntakeConfigurationError(f"Rule 'pattern' needs a regex string, got {rule.value!r}")
        pattern = compile_pattern(rule.value)
        if isinstance(value, str):
            violated = pattern.search(value) is None
        elif is_number(value):
            violated = pattern.search(str(value)) is None
        else:
            violated = False

    elif rule_type == "url":
        violated = isinstance(value, str) and not is_valid_url(value)

    elif rule_type == "custom":
        func = _custom_validators.get(rule.value) if isinstance(rule.value, str) else None
        if func is None:
            raise IntakeConfigurationError(f"Unknown custom validator: {rule.value!r}")
        violated = not func(value)

    else:
        raise IntakeConfigurationError(f"Unknown validation rule type: {rule_type!r}")

    return rule.message if violated else None


def validate_response(question: Question, value: Any) -> ValidationResult:
    """
    Validate a single response against every rule of a question

    All rules are evaluated in order; every violated rule contributes its
    message (no stop at the first failure).

    Args:
        question: Question carrying the validation rules
        value: Raw response (None when the question was not answered)

    Returns:
        ValidationResult with is_valid and the ordered error messages
    """
    if not question.validation:
        return ValidationResult(is_valid=True, errors=[])

    errors = []
    for rule in question.validation:
        error = validate_rule(rule, value)
        if error is not None:
            errors.append(error)

    if errors:
        logger.debug(f"Question {question.id} failed {len(errors)} rule(s)")

    return ValidationResult(is_valid=len(errors) == 0, errors=errors)

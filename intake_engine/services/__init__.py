"""
Intake services

Validation, conditional logic and intake composition.
"""

from intake_engine.services.validation import (
    validate_response,
    validate_rule,
    register_validator,
    unregister_validator,
)
from intake_engine.services.conditions import (
    evaluate_condition,
    parse_condition,
    get_visible_blocks,
    get_visible_questions,
)
from intake_engine.services.intake import (
    validate_intake,
    validate_intake_completion,
    validate_path,
    get_path_questions,
    sanitize_responses,
    sanitize_input,
    get_default_value,
)

__all__ = [
    "validate_response",
    "validate_rule",
    "register_validator",
    "unregister_validator",
    "evaluate_condition",
    "parse_condition",
    "get_visible_blocks",
    "get_visible_questions",
    "validate_intake",
    "validate_intake_completion",
    "validate_path",
    "get_path_questions",
    "sanitize_responses",
    "sanitize_input",
    "get_default_value",
]

"""
Validation rule tests - single response against a question's rules
"""
import pytest

from intake_engine.core.errors import IntakeConfigurationError
from intake_engine.database.schemas import Question, ValidationRule
from intake_engine.services.validation import (
    register_validator,
    unregister_validator,
    validate_response,
    validate_rule,
)


def make_question(*rules, **kwargs):
    return Question(
        id=kwargs.pop("id", "q"),
        type=kwargs.pop("type", "text"),
        label="Question",
        order=kwargs.pop("order", 1),
        validation=[ValidationRule(**rule) for rule in rules],
        **kwargs,
    )


REQUIRED = {"type": "required", "message": "Email is required"}
EMAIL = {"type": "email", "message": "Please enter a valid email address"}


def test_no_rules_is_valid():
    """Question without rules accepts anything"""
    result = validate_response(make_question(), None)
    assert result.is_valid
    assert result.errors == []


@pytest.mark.parametrize("value", [None, "", []])
def test_required_rejects_empty(value):
    """Absent, empty string and empty list all violate required"""
    result = validate_response(make_question(REQUIRED), value)
    assert not result.is_valid
    assert result.errors == ["Email is required"]


@pytest.mark.parametrize("value", [0, False, " ", ["a"]])
def test_required_accepts_falsy_answers(value):
    """Zero, False and whitespace are answers"""
    assert validate_response(make_question(REQUIRED), value).is_valid


def test_required_and_email():
    """Empty string violates both rules; malformed email only reports email"""
    question = make_question(REQUIRED, EMAIL)

    assert validate_response(question, "").errors == ["Email is required", "Please enter a valid email address"]
    assert validate_response(question, None).errors == ["Email is required"]
    assert validate_response(question, "not-an-email").errors == ["Please enter a valid email address"]
    assert validate_response(question, "a@b.co").is_valid


@pytest.mark.parametrize("value", ["a@b", "a b@c.d", "@b.c", "a@.c", "a@b.co\n"])
def test_email_rejects_malformed(value):
    assert validate_rule(ValidationRule(**EMAIL), value) == EMAIL["message"]


def test_max_days_per_week():
    """Numeric bounds are inclusive"""
    question = make_question(
        {"type": "required", "message": "Please select training frequency"},
        {"type": "max", "value": 7, "message": "Cannot exceed 7 days"},
        type="number",
    )
    assert validate_response(question, 7).is_valid
    assert validate_response(question, 8).errors == ["Cannot exceed 7 days"]


def test_min_max_ignore_non_numbers():
    """min/max only apply to numbers (strings and booleans are not checked)"""
    rule = ValidationRule(type="min", value=5, message="Too small")
    assert validate_rule(rule, "3") is None
    assert validate_rule(rule, True) is None
    assert validate_rule(rule, None) is None
    assert validate_rule(rule, 3) == "Too small"
    assert validate_rule(rule, 4.5) == "Too small"


def test_length_rules_apply_to_strings_and_lists():
    min_length = ValidationRule(type="minLength", value=2, message="Too short")
    max_length = ValidationRule(type="maxLength", value=3, message="Too long")

    assert validate_rule(min_length, "a") == "Too short"
    assert validate_rule(min_length, ["x"]) == "Too short"
    assert validate_rule(min_length, "ab") is None
    assert validate_rule(max_length, "abcd") == "Too long"
    assert validate_rule(max_length, ["a", "b", "c", "d"]) == "Too long"
    # Not applicable to numbers
    assert validate_rule(min_length, 1) is None


def test_all_rules_reported_in_order():
    """Every violated rule contributes its message, in rule order"""
    question = make_question(
        {"type": "minLength", "value": 5, "message": "Too short"},
        {"type": "pattern", "value": "^[0-9]+$", "message": "Digits only"},
    )
    result = validate_response(question, "ab")
    assert not result.is_valid
    assert result.errors == ["Too short", "Digits only"]


def test_pattern_is_unanchored_search():
    """Pattern source is used as written; anchors only when the source has them"""
    rule = ValidationRule(type="pattern", value="[0-9]{3}", message="Needs 3 digits")
    assert validate_rule(rule, "abc123def") is None
    assert validate_rule(rule, "ab12") == "Needs 3 digits"
    assert validate_rule(rule, 12345) is None


def test_pattern_skips_absent_value():
    rule = ValidationRule(type="pattern", value="^x$", message="Bad")
    assert validate_rule(rule, None) is None


def test_invalid_pattern_is_configuration_error():
    rule = ValidationRule(type="pattern", value="([a-z", message="Bad")
    with pytest.raises(IntakeConfigurationError):
        validate_rule(rule, "abc")


def test_non_numeric_threshold_is_configuration_error():
    rule = ValidationRule(type="max", value="seven", message="Bad")
    with pytest.raises(IntakeConfigurationError):
        validate_rule(rule, 8)


def test_url_rule():
    rule = ValidationRule(type="url", message="Please enter a valid URL")
    assert validate_rule(rule, "https://example.com/profile") is None
    assert validate_rule(rule, "not a url") == "Please enter a valid URL"
    assert validate_rule(rule, None) is None


def test_custom_rule():
    """Custom rules call a registered validator by name"""
    register_validator("us-zip", lambda value: isinstance(value, str) and len(value) == 5 and value.isdigit())
    try:
        rule = ValidationRule(type="custom", value="us-zip", message="Enter a 5-digit ZIP code")
        assert validate_rule(rule, "02139") is None
        assert validate_rule(rule, "2139") == "Enter a 5-digit ZIP code"
    finally:
        unregister_validator("us-zip")


def test_unknown_custom_validator_is_configuration_error():
    rule = ValidationRule(type="custom", value="does-not-exist", message="Bad")
    with pytest.raises(IntakeConfigurationError):
        validate_rule(rule, "anything")


def test_unknown_rule_type_rejected_at_parse_time():
    """Rule kinds outside the closed set never make it into a Question"""
    with pytest.raises(ValueError):
        ValidationRule(type="phone", message="Bad")

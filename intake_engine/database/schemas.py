"""
Intake data models

- Questions, validation rules and branching conditions for the intake wizard
- Pydantic provides parsing of the JSON definitions (camelCase on the wire)
- Condition is a closed tagged union: unknown tags are rejected at parse time
- Responses stay a loose Dict (question ids are data, not fields)
"""
from typing import Optional, Dict, Any, List, Literal, Union, Annotated
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


IntakeResponses = Dict[str, Any]

QuestionType = Literal[
    "text", "number", "select", "multiselect", "radio",
    "checkbox", "textarea", "date", "range",
]

ValidationType = Literal[
    "required", "minLength", "maxLength", "min", "max",
    "pattern", "email", "url", "custom",
]

QuestionBlockCategory = Literal[
    "DEMOGRAPHICS", "NUTRITION", "TRAINING", "HEALTH", "PERFORMANCE",
    "YOUTH", "WELLNESS", "SITUATION_BASED", "GOALS", "PREFERENCES",
]

ConditionScalar = Union[bool, int, float, str, None]


class IntakeModel(BaseModel):
    """
    Base for all intake models

    Accepts both camelCase (wire) and snake_case (Python) field names
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Validation
# ============================================================================

class ValidationRule(IntakeModel):
    """
    Single declarative check attached to a question
    """
    type: ValidationType = Field(...,  description="Rule kind")
    value: Optional[Any] = Field(None, description="Rule parameter (threshold, regex source, custom validator name)")
    message: str         = Field(...,  description="Message surfaced verbatim when the rule is violated")


class ValidationResult(IntakeModel):
    is_valid: bool    = Field(...,               description="True when no rule was violated")
    errors: List[str] = Field(default_factory=list, description="Messages of every violated rule, in rule order")


class IntakeValidationResult(IntakeModel):
    is_valid: bool              = Field(...,               description="True when every applicable question passed")
    errors: Dict[str, List[str]] = Field(default_factory=dict, description="question_id -> messages, only for failing questions")


# ============================================================================
# Conditions
# ============================================================================

class EqualsCondition(IntakeModel):
    type: Literal["equals"]
    question_id: str
    value: Union[List[ConditionScalar], ConditionScalar] = None


class NotEqualsCondition(IntakeModel):
    type: Literal["notEquals"]
    question_id: str
    value: Union[List[ConditionScalar], ConditionScalar] = None


class ContainsCondition(IntakeModel):
    type: Literal["contains"]
    question_id: str
    value: ConditionScalar = None


class NotContainsCondition(IntakeModel):
    type: Literal["notContains"]
    question_id: str
    value: ConditionScalar = None


class GreaterThanCondition(IntakeModel):
    type: Literal["greaterThan"]
    question_id: str
    value: Union[int, float, str]


class LessThanCondition(IntakeModel):
    type: Literal["lessThan"]
    question_id: str
    value: Union[int, float, str]


class GreaterThanOrEqualCondition(IntakeModel):
    type: Literal["greaterThanOrEqual"]
    question_id: str
    value: Union[int, float, str]


class LessThanOrEqualCondition(IntakeModel):
    type: Literal["lessThanOrEqual"]
    question_id: str
    value: Union[int, float, str]


class IsEmptyCondition(IntakeModel):
    type: Literal["isEmpty"]
    question_id: str


class IsNotEmptyCondition(IntakeModel):
    type: Literal["isNotEmpty"]
    question_id: str


class AndCondition(IntakeModel):
    type: Literal["and"]
    conditions: List["Condition"] = Field(default_factory=list)


class OrCondition(IntakeModel):
    type: Literal["or"]
    conditions: List["Condition"] = Field(default_factory=list)


class NotCondition(IntakeModel):
    """
    Negation of exactly one child

    The list shape {"type": "not", "conditions": [child]} is accepted on input
    """
    type: Literal["not"]
    condition: "Condition"

    @model_validator(mode="before")
    @classmethod
    def unwrap_condition_list(cls, data: Any) -> Any:
        if isinstance(data, dict) and "condition" not in data and "conditions" in data:
            children = data.get("conditions") or []
            if len(children) != 1:
                raise ValueError("'not' condition requires exactly one child condition")
            data = {key: value for key, value in data.items() if key != "conditions"}
            data["condition"] = children[0]
        return data


Condition = Annotated[
    Union[
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
    ],
    Field(discriminator="type"),
]

AndCondition.model_rebuild()
OrCondition.model_rebuild()
NotCondition.model_rebuild()


# ============================================================================
# Questions, blocks and paths
# ============================================================================

class QuestionOption(IntakeModel):
    value: str
    label: str
    description: Optional[str] = None


class Question(IntakeModel):
    """
    One prompt in the intake form
    """
    id: str                                   = Field(...,  description="Stable question key, used to look up responses")
    type: QuestionType                        = Field(...,  description="Expected answer shape (informational)")
    label: str                                = Field(...,  description="Prompt text")
    order: int                                = Field(...,  description="Display/evaluation order")
    validation: List[ValidationRule]          = Field(default_factory=list, description="Rules evaluated in listed order")
    conditional_display: Optional[Condition]  = Field(None, description="Question is shown only when this holds")
    placeholder: Optional[str]                = Field(None, description="Input placeholder")
    help_text: Optional[str]                  = Field(None, description="Helper text under the prompt")
    options: Optional[List[QuestionOption]]   = Field(None, description="Choices for select/radio/multiselect/checkbox")
    default_value: Optional[Any]              = Field(None, description="Initial value for the wizard")
    min: Optional[float]                      = Field(None, description="Lower bound for range/number inputs")
    max: Optional[float]                      = Field(None, description="Upper bound for range/number inputs")
    step: Optional[float]                     = Field(None, description="Step for range inputs")
    unit: Optional[str]                       = Field(None, description="Unit label for number inputs")
    is_required: Optional[bool]               = Field(None, description="Rendering hint; 'required' rules drive validation")


class QuestionBlock(IntakeModel):
    """
    Reusable group of related questions shared between intake paths
    """
    id: str
    name: str
    title: str
    description: Optional[str]               = None
    category: QuestionBlockCategory
    questions: List[Question]                = Field(default_factory=list)
    order: int
    is_active: bool                          = True
    conditional_display: Optional[Condition] = None


class Action(IntakeModel):
    type: Literal["show", "hide", "skip", "require"]
    target_block_ids: List[str]    = Field(default_factory=list)
    target_question_ids: List[str] = Field(default_factory=list)


class ConditionalRule(IntakeModel):
    id: str
    condition: Condition
    action: Action


class IntakePathConfig(IntakeModel):
    """
    Intake path for one client type: which blocks to show and how to branch
    """
    id: str
    client_type: str
    name: str
    description: str
    estimated_time: str
    question_block_ids: List[str]          = Field(default_factory=list)
    branching_rules: List[ConditionalRule] = Field(default_factory=list)
    is_active: bool                        = True


# ============================================================================
# Stored records
# ============================================================================

class IntakeProgress(IntakeModel):
    """
    Saved wizard progress for a device
    """
    selected_path: Optional[str]     = Field(None, description="Client type of the chosen path")
    current_step: int                = Field(0,    description="Index of the current wizard step")
    total_steps: Optional[int]       = Field(None, description="Number of steps in the chosen path")
    responses: IntakeResponses       = Field(default_factory=dict, description="Answers collected so far")
    is_complete: bool                = Field(False, description="Whether the intake was submitted")
    last_saved_at: Optional[datetime] = Field(default_factory=datetime.now, description="Timestamp of the last save")


class IntakeSubmission(IntakeModel):
    """
    Accepted intake submission (validated, sanitized responses)
    """
    id: Optional[str]                = Field(None, description="Submission ID (auto-generated)")
    client_type: str                 = Field(..., description="Client type of the intake path")
    responses: IntakeResponses       = Field(..., description="Sanitized responses")
    submitted_at: Optional[datetime] = Field(default_factory=datetime.now, description="Timestamp when the intake was submitted")

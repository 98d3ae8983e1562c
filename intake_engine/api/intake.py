"""
Intake validation and branching endpoints
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import Field

from intake_engine.api.utils import get_device_id
from intake_engine.database import storage as database
from intake_engine.database.schemas import (
    Condition,
    IntakeModel,
    IntakePathConfig,
    IntakeResponses,
    IntakeSubmission,
    IntakeValidationResult,
    Question,
    QuestionBlock,
    ValidationResult,
)
from intake_engine.services.conditions import evaluate_condition, get_visible_blocks
from intake_engine.services.intake import (
    get_path_questions,
    path_context,
    sanitize_responses,
    validate_intake,
    validate_path,
)
from intake_engine.services.library import get_intake_path, get_question_blocks, load_intake_paths
from intake_engine.services.validation import validate_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/intake", tags=["intake"])


class ValidateIntakeRequest(IntakeModel):
    questions: List[Question]                    = Field(..., description="Questions to validate")
    responses: IntakeResponses                   = Field(default_factory=dict, description="question_id -> response")
    conditions: Optional[Dict[str, Condition]]   = Field(None, description="question_id -> visibility condition")


class ValidateResponseRequest(IntakeModel):
    question: Question = Field(..., description="Question carrying the validation rules")
    value: Any         = Field(None, description="Response to validate")


class EvaluateConditionRequest(IntakeModel):
    condition: Condition       = Field(..., description="Condition tree to evaluate")
    responses: IntakeResponses = Field(default_factory=dict, description="question_id -> response")


class EvaluateConditionResponse(IntakeModel):
    result: bool


class IntakePathResponse(IntakeModel):
    path: IntakePathConfig
    blocks: List[QuestionBlock]


class VisibilityRequest(IntakeModel):
    responses: IntakeResponses = Field(default_factory=dict, description="Answers collected so far")


class VisibilityResponse(IntakeModel):
    block_ids: List[str]
    question_ids: List[str]


class SubmitIntakeRequest(IntakeModel):
    client_type: str           = Field(..., description="Client type of the chosen intake path")
    responses: IntakeResponses = Field(..., description="All answers of the intake")


def require_path(client_type: str) -> IntakePathConfig:
    path = get_intake_path(client_type)
    if not path:
        raise HTTPException(status_code=404, detail=f"Intake path not found for client type '{client_type}'")
    return path


@router.post("/validate", response_model=IntakeValidationResult)
async def validate(body: ValidateIntakeRequest):
    """
    Validate a set of responses against the given questions

    Questions hidden by their visibility condition are skipped
    """
    return validate_intake(body.questions, body.responses, body.conditions)


@router.post("/validate-response", response_model=ValidationResult)
async def validate_single_response(body: ValidateResponseRequest):
    """
    Validate one response against one question's rules
    """
    return validate_response(body.question, body.value)


@router.post("/conditions/evaluate", response_model=EvaluateConditionResponse)
async def evaluate(body: EvaluateConditionRequest):
    """
    Evaluate a branching condition against the current responses
    """
    return EvaluateConditionResponse(result=evaluate_condition(body.condition, body.responses))


@router.get("/paths", response_model=List[IntakePathConfig])
async def list_paths():
    """
    Active intake paths
    """
    return [path for path in load_intake_paths() if path.is_active]


@router.get("/paths/{client_type}", response_model=IntakePathResponse)
async def get_path(client_type: str):
    """
    Intake path for a client type with its question blocks (in path order)
    """
    path = require_path(client_type)
    return IntakePathResponse(path=path, blocks=get_question_blocks(path.question_block_ids))


@router.post("/paths/{client_type}/visible", response_model=VisibilityResponse)
async def get_visible(client_type: str, body: VisibilityRequest):
    """
    Blocks and questions currently shown for a path, given the answers so far

    Used by the wizard to decide which step comes next
    """
    path = require_path(client_type)
    blocks = get_question_blocks(path.question_block_ids)
    context = path_context(path, body.responses)
    visible_blocks = set(get_visible_blocks(blocks, path.branching_rules, context))

    return VisibilityResponse(
        block_ids=[block.id for block in blocks if block.id in visible_blocks],
        question_ids=[question.id for question in get_path_questions(path, blocks, body.responses)],
    )


@router.post("/submit", response_model=IntakeSubmission)
async def submit_intake(body: SubmitIntakeRequest, request: Request):
    """
    Submit a completed intake

    Sanitizes the responses, validates them against the questions the path
    currently shows, and stores the submission. Rejects with 400 and the
    per-question error map when anything is invalid.
    """
    device_id = get_device_id(request)
    path = require_path(body.client_type)
    blocks = get_question_blocks(path.question_block_ids)

    responses = sanitize_responses(body.responses)
    result = validate_path(path, blocks, responses)
    if not result.is_valid:
        logger.info(f"Rejected intake submission for {body.client_type}: {len(result.errors)} invalid question(s)")
        raise HTTPException(
            status_code=400,
            detail={"message": "Intake responses are invalid", "errors": result.errors},
        )

    submission = IntakeSubmission(
        id=str(uuid.uuid4()),
        client_type=path.client_type,
        responses=responses,
    )
    database.save_submission(submission.model_dump(mode="json", by_alias=True), device_id)

    # Mark saved progress complete so the wizard does not resume it
    progress = database.get_progress(device_id)
    if progress:
        progress["isComplete"] = True
        database.save_progress(progress, device_id)

    logger.info(f"Accepted intake submission {submission.id} for {path.client_type}")
    return submission

"""
Database module

Contains both data models (schemas) and storage operations.
"""

# Export schemas
from intake_engine.database.schemas import (
    Question,
    ValidationRule,
    ValidationResult,
    IntakeValidationResult,
    Condition,
    QuestionBlock,
    ConditionalRule,
    Action,
    IntakePathConfig,
    IntakeProgress,
    IntakeSubmission,
    IntakeResponses,
)

# Export storage functions for convenience
from intake_engine.database.storage import (
    read_json,
    write_json,
    save_progress,
    get_progress,
    delete_progress,
    save_submission,
    get_submissions,
)

from intake_engine.database import storage

__all__ = [
    # Schemas
    "Question",
    "ValidationRule",
    "ValidationResult",
    "IntakeValidationResult",
    "Condition",
    "QuestionBlock",
    "ConditionalRule",
    "Action",
    "IntakePathConfig",
    "IntakeProgress",
    "IntakeSubmission",
    "IntakeResponses",
    # Storage functions
    "read_json",
    "write_json",
    "save_progress",
    "get_progress",
    "delete_progress",
    "save_submission",
    "get_submissions",
    # Storage module
    "storage",
]

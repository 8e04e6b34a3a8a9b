"""Domain layer: errors and schemas."""

from .errors import ErrorCodes, WorkflowError
from .schemas import (
    GenerationResult,
    RunLog,
    SourceFile,
    TemplateSession,
    WorkflowFailure,
    WorkflowSnapshot,
    WorkflowState,
    WorkflowStatus,
)

__all__ = [
    "ErrorCodes",
    "WorkflowError",
    "SourceFile",
    "TemplateSession",
    "GenerationResult",
    "WorkflowFailure",
    "WorkflowStatus",
    "WorkflowState",
    "WorkflowSnapshot",
    "RunLog",
]

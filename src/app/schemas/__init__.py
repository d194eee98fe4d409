# src/app/schemas/__init__.py

from .quiz import GenerateQuizRequest, GenerateQuizResponse, QuizRead
from .assignment import GenerateAssignmentsRequest, GenerateAssignmentsResponse
from .submission import (
    SubmissionTargetRequest,
    EvaluationResponse,
    PlagiarismResponse,
)
from .student import EligibilityResponse, GpaResponse

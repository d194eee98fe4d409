# File: src/app/routers/ai_router.py

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..config.settings import Settings
from ..controllers.assignment_controller import generate_assignments
from ..controllers.evaluation_controller import evaluate_submission
from ..controllers.plagiarism_controller import check_plagiarism
from ..controllers.quiz_controller import generate_quiz
from ..controllers.student_controller import get_learning_path
from ..db.session import get_db
from ..models.user import User
from ..schemas.assignment import GenerateAssignmentsRequest, GenerateAssignmentsResponse
from ..schemas.quiz import GenerateQuizRequest, GenerateQuizResponse
from ..schemas.submission import EvaluationResponse, PlagiarismResponse, SubmissionTargetRequest
from ..utils.ai_gateway import AIGatewayClient
from ..utils.dependencies import (
    get_ai_gateway,
    get_app_settings,
    get_current_staff_user,
    get_current_user,
)

router = APIRouter(tags=["AI"])


@router.post("/generate-quiz", response_model=GenerateQuizResponse)
def generate_quiz_endpoint(
    payload: GenerateQuizRequest,
    user: User = Depends(get_current_staff_user),
    db: Session = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    """Generate multiple-choice questions and save them as an unpublished quiz."""
    return generate_quiz(db, gateway, user, payload)


@router.post("/generate-assignments", response_model=GenerateAssignmentsResponse)
def generate_assignments_endpoint(
    payload: GenerateAssignmentsRequest,
    user: User = Depends(get_current_staff_user),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    """Draft assignments from syllabus text. Nothing is saved."""
    return generate_assignments(gateway, user, payload)


@router.post("/check-plagiarism", response_model=PlagiarismResponse)
def check_plagiarism_endpoint(
    payload: SubmissionTargetRequest,
    user: User = Depends(get_current_staff_user),
    db: Session = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
    settings: Settings = Depends(get_app_settings),
):
    return check_plagiarism(db, gateway, settings, user, payload)


@router.post("/evaluate-submission", response_model=EvaluationResponse)
def evaluate_submission_endpoint(
    payload: SubmissionTargetRequest,
    user: User = Depends(get_current_staff_user),
    db: Session = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    return evaluate_submission(db, gateway, user, payload)


@router.post("/learning-path")
def learning_path_endpoint(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    """Personalized recommendations for the calling student."""
    return get_learning_path(db, gateway, user)

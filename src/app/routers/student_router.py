# File: src/app/routers/student_router.py

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..config.settings import Settings
from ..controllers.student_controller import get_exam_eligibility, get_gpa
from ..db.session import get_db
from ..schemas.student import EligibilityResponse, GpaResponse
from ..utils.dependencies import get_app_settings, get_current_user

router = APIRouter(tags=["Student"])


@router.get("/eligibility", response_model=EligibilityResponse)
def exam_eligibility(
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return get_exam_eligibility(db, settings, user)


@router.get("/gpa", response_model=GpaResponse)
def student_gpa(
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_gpa(db, user)

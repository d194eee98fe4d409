# File: src/app/controllers/student_controller.py
#
# Everything here is scoped to the calling student's own id.

import logging
from collections import OrderedDict
from typing import Iterable, List

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..config.settings import Settings
from ..models.assignment import Assignment, Submission
from ..models.grade import Grade
from ..models.user import User
from ..schemas.student import (
    EligibilityResponse,
    GpaResponse,
    LearningPathPayload,
    SubjectEligibility,
    SubjectPerformance,
)
from ..utils.ai_gateway import AIGatewayClient
from ..utils.prompts import build_learning_path_prompt
from .pipeline import LEARNING_PATH, PipelineRun, Stage

NO_DATA_MESSAGE = "No performance data available yet. Complete some assignments to get personalized recommendations!"
RECENT_GRADE_COUNT = 3
DEFAULT_MAX_SCORE = 100


def summarize_performance(grades: Iterable[Grade], submissions: Iterable[Submission]) -> List[SubjectPerformance]:
    """
    Per-subject aggregate fed to the learning-path prompt.

    ``grades`` are expected newest semester first.
    """
    buckets: "OrderedDict[str, dict]" = OrderedDict()

    def bucket(subject: str) -> dict:
        return buckets.setdefault(subject, {"total": 0.0, "max": 0.0, "count": 0, "grades": []})

    for grade in grades:
        bucket(grade.subject)["grades"].append(grade.grade_letter)

    for sub in submissions:
        subject = sub.assignment.subject if sub.assignment else None
        if not subject or sub.score is None:
            continue
        data = bucket(subject)
        data["total"] += sub.score
        data["max"] += (sub.assignment.max_score or DEFAULT_MAX_SCORE)
        data["count"] += 1

    return [
        SubjectPerformance(
            subject=subject,
            assignment_average=round(data["total"] / data["max"] * 100) if data["max"] > 0 else None,
            assignment_count=data["count"],
            recent_grades=data["grades"][:RECENT_GRADE_COUNT],
        )
        for subject, data in buckets.items()
    ]


def get_learning_path(db: Session, gateway: AIGatewayClient, student: User) -> dict:
    run = PipelineRun(LEARNING_PATH, gateway)

    grades = db.exec(
        select(Grade).where(Grade.student_id == student.id).order_by(Grade.semester.desc())
    ).all()
    submissions = db.exec(
        select(Submission)
        .where(Submission.student_id == student.id)
        .options(selectinload(Submission.assignment))
    ).all()

    summary = summarize_performance(grades, submissions)
    if not summary:
        logging.info(f"No performance data for student {student.id}; skipping AI call")
        run.advance(Stage.RESPONDING)
        return {"recommendations": [], "performanceGaps": [], "message": NO_DATA_MESSAGE}

    summary_data = [s.model_dump(by_alias=True) for s in summary]
    raw = run.complete(build_learning_path_prompt(summary_data))
    result = run.parse(raw, LearningPathPayload)

    run.advance(Stage.RESPONDING)
    return {**result.model_dump(by_alias=True), "performanceSummary": summary_data}


def get_exam_eligibility(db: Session, settings: Settings, student: User) -> EligibilityResponse:
    """A student may sit a subject's exam after submitting enough of its assignments."""
    assignments = db.exec(select(Assignment)).all()
    submitted_ids = set(db.exec(
        select(Submission.assignment_id).where(Submission.student_id == student.id)
    ).all())

    per_subject: "OrderedDict[str, List[Assignment]]" = OrderedDict()
    for assignment in sorted(assignments, key=lambda a: a.subject):
        per_subject.setdefault(assignment.subject, []).append(assignment)

    subjects = []
    for subject, items in per_subject.items():
        completed = sum(1 for a in items if a.id in submitted_ids)
        percentage = round(completed / len(items) * 100, 2)
        subjects.append(SubjectEligibility(
            subject=subject,
            completed_assignments=completed,
            total_assignments=len(items),
            percentage=percentage,
            is_eligible=percentage >= settings.exam_eligibility_threshold,
        ))

    return EligibilityResponse(threshold=settings.exam_eligibility_threshold, subjects=subjects)


def calculate_gpa(grades: Iterable[Grade]) -> float:
    grades = list(grades)
    total_credits = sum(g.credits for g in grades)
    if total_credits <= 0:
        return 0.0
    total_points = sum(g.grade_points * g.credits for g in grades)
    return round(total_points / total_credits, 2)


def gpa_standing(gpa: float) -> str:
    if gpa >= 3.7:
        return "Dean's List"
    if gpa >= 3.0:
        return "Good Standing"
    if gpa >= 2.0:
        return "Satisfactory"
    return "Academic Probation"


def get_gpa(db: Session, student: User) -> GpaResponse:
    grades = db.exec(select(Grade).where(Grade.student_id == student.id)).all()
    gpa = calculate_gpa(grades)
    return GpaResponse(
        gpa=gpa,
        standing=gpa_standing(gpa),
        total_credits=sum(g.credits for g in grades),
        grade_count=len(grades),
    )

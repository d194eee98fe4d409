# File: src/app/controllers/evaluation_controller.py

import logging
from typing import Optional

import requests
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..models.assignment import Submission
from ..models.evaluation import SubmissionEvaluation
from ..models.user import User
from ..schemas.submission import (
    EvaluationPayload,
    EvaluationResponse,
    SubmissionEvaluationRead,
    SubmissionTargetRequest,
)
from ..utils.ai_gateway import AIGatewayClient
from ..utils.file import resolve_submission_text
from ..utils.prompts import build_evaluation_prompt
from ..utils.time import utc_now
from .persistence import clamp, upsert_by_submission
from .pipeline import EVALUATE_SUBMISSION, PipelineRun, Stage


def evaluate_submission(
    db: Session,
    gateway: AIGatewayClient,
    evaluator: User,
    payload: SubmissionTargetRequest,
    http: Optional[requests.Session] = None,
) -> EvaluationResponse:
    """
    Grade a submission against its assignment brief and store the result.

    Scores from the model are clamped before writing: instruction and
    correctness to 0-100, the suggested score to 0..max_score.
    """
    run = PipelineRun(EVALUATE_SUBMISSION, gateway)
    if payload.submission_id is None:
        raise run.fail(status.HTTP_400_BAD_REQUEST, "Submission ID is required")

    submission = db.exec(
        select(Submission)
        .where(Submission.id == payload.submission_id)
        .options(selectinload(Submission.assignment))
    ).first()
    if submission is None or submission.assignment is None:
        raise run.fail(status.HTTP_404_NOT_FOUND, "Submission not found")

    assignment = submission.assignment
    try:
        content = resolve_submission_text(submission, http=http)
    except HTTPException as e:
        raise run.fail(e.status_code, e.detail)

    prompt = build_evaluation_prompt(
        title=assignment.title,
        description=assignment.description,
        subject=assignment.subject,
        max_score=assignment.max_score,
        content=content,
    )
    raw = run.complete(prompt)
    result = run.parse(raw, EvaluationPayload)

    values = {
        "follows_instructions": result.follows_instructions,
        "instruction_score": clamp(result.instruction_score, 0, 100),
        "answer_correctness": clamp(result.answer_correctness, 0, 100),
        "strengths": list(result.strengths),
        "improvements": list(result.improvements),
        "detailed_feedback": result.detailed_feedback,
        "suggested_score": clamp(result.suggested_score, 0, assignment.max_score),
        "evaluated_by": evaluator.id,
        "evaluated_at": utc_now(),
    }

    run.advance(Stage.PERSISTING)
    try:
        evaluation = upsert_by_submission(db, SubmissionEvaluation, submission.id, values)
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Failed to save evaluation for {submission.id}: {e}", exc_info=True)
        raise run.fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save evaluation")

    logging.info(f"Evaluation saved for submission {submission.id} by {evaluator.id}")
    run.advance(Stage.RESPONDING)
    return EvaluationResponse(evaluation=SubmissionEvaluationRead.model_validate(evaluation))

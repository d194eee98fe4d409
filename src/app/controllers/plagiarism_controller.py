# File: src/app/controllers/plagiarism_controller.py

import logging
import re
from typing import List, Sequence, Union
from uuid import UUID

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ..config.settings import Settings
from ..models.assignment import Submission
from ..models.evaluation import PlagiarismReport
from ..models.user import User
from ..schemas.submission import (
    PlagiarismPayload,
    PlagiarismReportRead,
    PlagiarismResponse,
    SubmissionTargetRequest,
)
from ..utils.ai_gateway import AIGatewayClient
from ..utils.prompts import ComparisonExcerpt, build_plagiarism_prompt
from ..utils.time import utc_now
from .persistence import clamp, upsert_by_submission
from .pipeline import CHECK_PLAGIARISM, PipelineRun, Stage

_ORDINAL = re.compile(r"\d+")


def build_comparisons(db: Session, submission: Submission, settings: Settings) -> List[ComparisonExcerpt]:
    """Sibling submissions with enough typed text, truncated for prompt size."""
    siblings = db.exec(
        select(Submission)
        .where(
            Submission.assignment_id == submission.assignment_id,
            Submission.id != submission.id,
            Submission.typed_content != None,  # noqa: E711
        )
        .order_by(Submission.submitted_at, Submission.id)
    ).all()

    usable = [s for s in siblings if len(s.typed_content or "") > settings.plagiarism_min_comparison_chars]
    return [
        ComparisonExcerpt(
            ordinal=index,
            submission_id=str(sibling.id),
            text=sibling.typed_content[:settings.plagiarism_excerpt_chars],
        )
        for index, sibling in enumerate(usable, start=1)
    ]


def resolve_matched_ids(
    matches: Sequence[Union[int, str]],
    comparisons: Sequence[ComparisonExcerpt],
) -> List[str]:
    """Map the model's ordinal labels back to submission ids; unknown labels are dropped."""
    by_ordinal = {c.ordinal: c.submission_id for c in comparisons}
    resolved: List[str] = []
    for match in matches:
        if isinstance(match, int):
            ordinal = match
        else:
            found = _ORDINAL.search(match)
            if not found:
                continue
            ordinal = int(found.group(0))
        submission_id = by_ordinal.get(ordinal)
        if submission_id and submission_id not in resolved:
            resolved.append(submission_id)
    return resolved


def unparsed_analysis(raw: str) -> PlagiarismPayload:
    return PlagiarismPayload(
        similarity_percentage=0,
        is_flagged=False,
        matched_submissions=[],
        analysis_details=raw or "Analysis completed but results could not be parsed.",
    )


def check_plagiarism(
    db: Session,
    gateway: AIGatewayClient,
    settings: Settings,
    analyst: User,
    payload: SubmissionTargetRequest,
) -> PlagiarismResponse:
    run = PipelineRun(CHECK_PLAGIARISM, gateway)
    if payload.submission_id is None:
        raise run.fail(status.HTTP_400_BAD_REQUEST, "submissionId is required")

    submission = _get_submission(db, payload.submission_id)
    if submission is None:
        raise run.fail(status.HTTP_404_NOT_FOUND, "Submission not found")
    if not (submission.typed_content or "").strip():
        raise run.fail(status.HTTP_400_BAD_REQUEST, "No text content to analyze")

    comparisons = build_comparisons(db, submission, settings)
    logging.info(f"Comparing submission {submission.id} against {len(comparisons)} sibling(s)")
    prompt = build_plagiarism_prompt(
        submission.typed_content,
        comparisons,
        flag_threshold=settings.plagiarism_flag_threshold,
        assignment_title=submission.assignment.title if submission.assignment else None,
        subject=submission.assignment.subject if submission.assignment else None,
    )

    raw = run.complete(prompt)
    analysis = run.parse(raw, PlagiarismPayload, fallback=unparsed_analysis)

    similarity = clamp(analysis.similarity_percentage, 0, 100)
    values = {
        "similarity_percentage": similarity,
        # one threshold decides the flag, whatever the model said
        "is_flagged": similarity > settings.plagiarism_flag_threshold,
        "matched_submissions": resolve_matched_ids(analysis.matched_submissions, comparisons),
        "analysis_details": analysis.analysis_details,
        "analyzed_by": analyst.id,
        "analyzed_at": utc_now(),
    }

    run.advance(Stage.PERSISTING)
    try:
        report = upsert_by_submission(db, PlagiarismReport, submission.id, values)
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Failed to save plagiarism report for {submission.id}: {e}", exc_info=True)
        raise run.fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save plagiarism report")

    logging.info(f"Plagiarism report saved for {submission.id}: {similarity}% flagged={report.is_flagged}")
    run.advance(Stage.RESPONDING)
    return PlagiarismResponse(report=PlagiarismReportRead.model_validate(report))


def _get_submission(db: Session, submission_id: UUID):
    return db.exec(
        select(Submission)
        .where(Submission.id == submission_id)
        .options(selectinload(Submission.assignment))
    ).first()

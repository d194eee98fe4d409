# File: src/app/controllers/assignment_controller.py

import logging
from fastapi import status

from ..models.user import User
from ..schemas.assignment import (
    GenerateAssignmentsRequest,
    GenerateAssignmentsResponse,
    GeneratedAssignmentsPayload,
)
from ..utils.ai_gateway import AIGatewayClient
from ..utils.prompts import build_assignments_prompt
from .pipeline import GENERATE_ASSIGNMENTS, PipelineRun, Stage

DEFAULT_ASSIGNMENT_COUNT = 5


def generate_assignments(
    gateway: AIGatewayClient,
    requester: User,
    payload: GenerateAssignmentsRequest,
) -> GenerateAssignmentsResponse:
    # Drafts only: faculty pick which ones to save and set due dates themselves.
    run = PipelineRun(GENERATE_ASSIGNMENTS, gateway)
    if not payload.syllabus or not payload.subject:
        raise run.fail(status.HTTP_400_BAD_REQUEST, "Syllabus content and subject are required")

    count = payload.number_of_assignments or DEFAULT_ASSIGNMENT_COUNT
    raw = run.complete(build_assignments_prompt(payload.syllabus, payload.subject, count))
    generated = run.parse(raw, GeneratedAssignmentsPayload)

    logging.info(f"Generated {len(generated.assignments)} assignment drafts for {requester.id} ({payload.subject})")
    run.advance(Stage.RESPONDING)
    return GenerateAssignmentsResponse(assignments=generated.assignments)

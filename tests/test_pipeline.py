import pytest
from fastapi import HTTPException

from src.app.controllers.pipeline import (
    CHECK_PLAGIARISM,
    EVALUATE_SUBMISSION,
    GENERATE_ASSIGNMENTS,
    GENERATE_QUIZ,
    LEARNING_PATH,
    ParseFailurePolicy,
    PipelineRun,
    Stage,
)
from src.app.schemas.submission import PlagiarismPayload
from src.app.utils.ai_gateway import AIPaymentRequiredError, AIRateLimitError
from src.app.utils.prompts import Prompt

from .conftest import FakeGateway

PROMPT = Prompt(system="sys", user="user")


def test_parse_failure_policies_per_task():
    assert CHECK_PLAGIARISM.parse_failure_policy is ParseFailurePolicy.FAIL_OPEN
    for profile in (GENERATE_QUIZ, GENERATE_ASSIGNMENTS, EVALUATE_SUBMISSION, LEARNING_PATH):
        assert profile.parse_failure_policy is ParseFailurePolicy.FAIL_CLOSED


def test_plagiarism_runs_deterministically_and_generation_does_not():
    assert CHECK_PLAGIARISM.temperature == 0
    assert CHECK_PLAGIARISM.seed == 42
    assert GENERATE_QUIZ.temperature > 0


def test_complete_passes_profile_settings_to_gateway():
    gateway = FakeGateway().queue("reply")
    run = PipelineRun(CHECK_PLAGIARISM, gateway)
    assert run.complete(PROMPT) == "reply"
    assert gateway.calls[0]["temperature"] == 0
    assert gateway.calls[0]["seed"] == 42
    assert run.stage is Stage.CALLING_LLM


@pytest.mark.parametrize("error, status_code", [
    (AIRateLimitError(), 429),
    (AIPaymentRequiredError(), 402),
])
def test_gateway_errors_become_http_errors(error, status_code):
    run = PipelineRun(GENERATE_QUIZ, FakeGateway().queue(error))
    with pytest.raises(HTTPException) as excinfo:
        run.complete(PROMPT)
    assert excinfo.value.status_code == status_code
    assert excinfo.value.detail == error.message
    assert run.stage is Stage.FAILED


def test_fail_closed_parse_raises_500():
    run = PipelineRun(EVALUATE_SUBMISSION, FakeGateway())
    with pytest.raises(HTTPException) as excinfo:
        run.parse("not json at all", PlagiarismPayload)
    assert excinfo.value.status_code == 500
    assert excinfo.value.detail == "Failed to process evaluation"
    assert run.parse_failed


def test_fail_open_parse_uses_fallback():
    run = PipelineRun(CHECK_PLAGIARISM, FakeGateway())
    result = run.parse(
        "free text",
        PlagiarismPayload,
        fallback=lambda raw: PlagiarismPayload(similarity_percentage=0, analysis_details=raw),
    )
    assert result.analysis_details == "free text"
    assert run.parse_failed
    assert run.stage is Stage.EXTRACTING


def test_fail_open_without_fallback_is_a_programming_error():
    run = PipelineRun(CHECK_PLAGIARISM, FakeGateway())
    with pytest.raises(ValueError):
        run.parse('{"similarity_percentage": 1}', PlagiarismPayload)

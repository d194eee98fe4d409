# File: src/app/controllers/pipeline.py
"""
Request lifecycle shared by the AI endpoints.

    AUTHENTICATING -> AUTHORIZING -> FETCHING_INPUT -> PROMPTING -> CALLING_LLM
    -> EXTRACTING -> PERSISTING -> RESPONDING

Any stage may drop into FAILED. Authentication and authorization are resolved
by FastAPI dependencies before the controller runs, so a ``PipelineRun``
starts at FETCHING_INPUT. There is no retry and no resume: the caller
re-invokes from the start.

How an unparseable model reply is handled is part of each task's profile
(``ParseFailurePolicy``) rather than something each controller decides.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Type, TypeVar

from fastapi import HTTPException, status
from pydantic import BaseModel

from ..utils.ai_gateway import AIGatewayClient, AIGatewayError
from ..utils.ai_response import AIResponseParseError, parse_ai_json
from ..utils.prompts import Prompt

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Stage(str, Enum):
    AUTHENTICATING = "authenticating"
    AUTHORIZING = "authorizing"
    FETCHING_INPUT = "fetching_input"
    PROMPTING = "prompting"
    CALLING_LLM = "calling_llm"
    EXTRACTING = "extracting"
    PERSISTING = "persisting"
    RESPONDING = "responding"
    FAILED = "failed"


class ParseFailurePolicy(str, Enum):
    # explicit error, nothing written
    FAIL_CLOSED = "fail_closed"
    # default result built from the raw reply, request succeeds
    FAIL_OPEN = "fail_open"


@dataclass(frozen=True)
class TaskProfile:
    name: str
    temperature: float
    parse_failure_policy: ParseFailurePolicy
    seed: Optional[int] = None
    parse_error_message: str = "Failed to process AI response"


GENERATE_QUIZ = TaskProfile("generate-quiz", 0.7, ParseFailurePolicy.FAIL_CLOSED)
GENERATE_ASSIGNMENTS = TaskProfile("generate-assignments", 0.7, ParseFailurePolicy.FAIL_CLOSED)
CHECK_PLAGIARISM = TaskProfile("check-plagiarism", 0.0, ParseFailurePolicy.FAIL_OPEN, seed=42)
EVALUATE_SUBMISSION = TaskProfile(
    "evaluate-submission", 0.3, ParseFailurePolicy.FAIL_CLOSED,
    parse_error_message="Failed to process evaluation",
)
LEARNING_PATH = TaskProfile(
    "learning-path", 0.7, ParseFailurePolicy.FAIL_CLOSED,
    parse_error_message="Failed to process recommendations",
)


class PipelineRun:
    def __init__(self, profile: TaskProfile, gateway: AIGatewayClient):
        self.profile = profile
        self.gateway = gateway
        self.stage = Stage.FETCHING_INPUT
        self.parse_failed = False
        logger.info(f"[{profile.name}] caller authorized; fetching input")

    def advance(self, stage: Stage) -> None:
        logger.debug(f"[{self.profile.name}] {self.stage.value} -> {stage.value}")
        self.stage = stage

    def fail(self, status_code: int, message: str) -> HTTPException:
        """Move to FAILED and build the exception the caller should raise."""
        log = logger.warning if status_code < 500 else logger.error
        log(f"[{self.profile.name}] failed during {self.stage.value}: {status_code} {message}")
        self.stage = Stage.FAILED
        return HTTPException(status_code=status_code, detail=message)

    def complete(self, prompt: Prompt) -> str:
        """PROMPTING -> CALLING_LLM: one outbound call, gateway errors surfaced by kind."""
        self.advance(Stage.PROMPTING)
        messages = prompt.messages()
        self.advance(Stage.CALLING_LLM)
        try:
            return self.gateway.chat(
                messages,
                temperature=self.profile.temperature,
                seed=self.profile.seed,
            )
        except AIGatewayError as e:
            raise self.fail(e.status_code, e.message)

    def parse(
        self,
        raw: str,
        schema: Type[ModelT],
        fallback: Optional[Callable[[str], ModelT]] = None,
    ) -> ModelT:
        """EXTRACTING: validate the reply, applying the task's parse-failure policy."""
        self.advance(Stage.EXTRACTING)
        policy = self.profile.parse_failure_policy
        if policy is ParseFailurePolicy.FAIL_OPEN and fallback is None:
            raise ValueError(f"{self.profile.name} is fail-open and needs a fallback")

        try:
            return parse_ai_json(raw, schema)
        except AIResponseParseError as e:
            self.parse_failed = True
            logger.error(f"[{self.profile.name}] could not parse AI response ({e.reason}): {raw}")
            if policy is ParseFailurePolicy.FAIL_OPEN:
                logger.warning(f"[{self.profile.name}] falling back to default result")
                return fallback(raw)
            raise self.fail(status.HTTP_500_INTERNAL_SERVER_ERROR, self.profile.parse_error_message)

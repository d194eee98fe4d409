# File: src/app/controllers/quiz_controller.py

import logging
from sqlmodel import Session
from sqlalchemy.exc import SQLAlchemyError
from fastapi import status

from ..models.quiz import Quiz, QuizQuestion
from ..models.user import User
from ..schemas.quiz import (
    GenerateQuizRequest,
    GenerateQuizResponse,
    GeneratedQuestionOut,
    GeneratedQuizPayload,
    QuizRead,
)
from ..utils.ai_gateway import AIGatewayClient
from ..utils.prompts import build_quiz_prompt
from .pipeline import GENERATE_QUIZ, PipelineRun, Stage

DEFAULT_QUESTION_COUNT = 10
DEFAULT_TIME_LIMIT_MINUTES = 15


def generate_quiz(
    db: Session,
    gateway: AIGatewayClient,
    creator: User,
    payload: GenerateQuizRequest,
) -> GenerateQuizResponse:
    """
    Generate multiple-choice questions and store them as an unpublished quiz.

    The quiz row and its questions are committed together; if any insert
    fails nothing is kept.
    """
    run = PipelineRun(GENERATE_QUIZ, gateway)
    if not payload.topic or not payload.subject:
        raise run.fail(status.HTTP_400_BAD_REQUEST, "Topic and subject are required")

    count = payload.number_of_questions or DEFAULT_QUESTION_COUNT
    raw = run.complete(build_quiz_prompt(payload.topic, payload.subject, count))
    generated = run.parse(raw, GeneratedQuizPayload)
    if len(generated.questions) != count:
        logging.info(f"Requested {count} questions, model returned {len(generated.questions)}; keeping what was returned.")

    run.advance(Stage.PERSISTING)
    quiz = Quiz(
        title=payload.title or f"{payload.subject} - {payload.topic}",
        topic=payload.topic,
        subject=payload.subject,
        description=payload.description or None,
        time_limit_minutes=payload.time_limit_minutes or DEFAULT_TIME_LIMIT_MINUTES,
        is_published=False,
        created_by=creator.id,
    )
    db.add(quiz)
    for order, question in enumerate(generated.questions):
        db.add(QuizQuestion(
            quiz_id=quiz.id,
            question=question.question,
            options=list(question.options),
            correct_answer=question.correct_answer,
            points=question.points,
            question_order=order,
        ))

    try:
        db.commit()
        db.refresh(quiz)
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Error saving generated quiz: {e}", exc_info=True)
        raise run.fail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save generated quiz")

    logging.info(f"Quiz {quiz.id} created by {creator.id} with {len(generated.questions)} questions")
    run.advance(Stage.RESPONDING)
    return GenerateQuizResponse(
        quiz=QuizRead.model_validate(quiz),
        questions=[GeneratedQuestionOut(**q.model_dump()) for q in generated.questions],
    )

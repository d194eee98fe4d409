# src/app/models/__init__.py

# Centralizes model imports so SQLModel's metadata knows every table before
# create_all runs.

# --- Identity ---
from .user import User, UserRole, AppRole

# --- Coursework ---
from .assignment import Assignment, Submission
from .quiz import Quiz, QuizQuestion
from .grade import Grade

# --- AI results (keyed 1:1 to a submission) ---
from .evaluation import SubmissionEvaluation, PlagiarismReport


__all__ = [
    "User",
    "UserRole",
    "AppRole",
    "Assignment",
    "Submission",
    "Quiz",
    "QuizQuestion",
    "Grade",
    "SubmissionEvaluation",
    "PlagiarismReport",
]

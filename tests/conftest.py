import json
import uuid
from datetime import timedelta

import pytest
from jose import jwt
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.app import models  # noqa: F401
from src.app.config.settings import Settings
from src.app.main import create_app
from src.app.models import AppRole, Assignment, Submission, User, UserRole
from src.app.utils.time import utc_now


def create_access_token(data, settings, expires_delta=None):
    """Sign a token the way the identity service does."""
    expire = utc_now() + (expires_delta or timedelta(minutes=30))
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=settings.jwt_algorithm)


class FakeGateway:
    """Stands in for AIGatewayClient; replies are queued per test."""

    def __init__(self):
        self.replies = []
        self.calls = []

    def queue(self, reply):
        self.replies.append(reply)
        return self

    def queue_json(self, data):
        return self.queue(json.dumps(data))

    def chat(self, messages, temperature, seed=None):
        self.calls.append({"messages": messages, "temperature": temperature, "seed": seed})
        if not self.replies:
            raise AssertionError("FakeGateway called with no reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def last_user_prompt(self):
        return self.calls[-1]["messages"][1]["content"]


@pytest.fixture
def settings():
    return Settings(secret_key="test-secret", ai_gateway_api_key="test-key")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(settings, gateway, engine):
    app = create_app(settings=settings, gateway=gateway, engine=engine)
    with TestClient(app) as client:
        yield client


# --- Data helpers ---

@pytest.fixture
def make_user(session):
    def _make_user(role=AppRole.faculty, full_name="Test User", is_active=True):
        user = User(email=f"{uuid.uuid4().hex}@campus.test",
                    full_name=full_name, is_active=is_active)
        session.add(user)
        session.commit()
        if role is not None:
            session.add(UserRole(user_id=user.id, role=role))
            session.commit()
        session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_assignment(session):
    def _make_assignment(creator, title="Essay on Cells", subject="Biology", max_score=100,
                         description="Explain the structure of a plant cell."):
        assignment = Assignment(
            title=title,
            description=description,
            subject=subject,
            due_date=utc_now() + timedelta(days=7),
            max_score=max_score,
            created_by=creator.id,
        )
        session.add(assignment)
        session.commit()
        session.refresh(assignment)
        return assignment
    return _make_assignment


@pytest.fixture
def make_submission(session):
    def _make_submission(assignment, student, typed_content=None, file_url=None, score=None,
                         submitted_at=None):
        submission = Submission(
            assignment_id=assignment.id,
            student_id=student.id,
            typed_content=typed_content,
            file_url=file_url,
            score=score,
            submitted_at=submitted_at or utc_now(),
        )
        session.add(submission)
        session.commit()
        session.refresh(submission)
        return submission
    return _make_submission


@pytest.fixture
def auth_headers(settings):
    def _auth_headers(user):
        token = create_access_token({"user_id": str(user.id)}, settings)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers

# File location: src/app/db/session.py
import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # FastAPI serves sync routes from a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


def create_db_and_tables(engine: Engine) -> None:
    # Importing the package registers every table on SQLModel.metadata
    from src.app import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables are in place.")


def get_db(request: Request) -> Iterator[Session]:
    """Yield a session bound to the engine the app was started with."""
    with Session(request.app.state.engine) as session:
        yield session

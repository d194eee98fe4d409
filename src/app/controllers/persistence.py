# File: src/app/controllers/persistence.py

import logging
from typing import Any, Dict, Type, TypeVar
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, select

RowT = TypeVar("RowT", bound=SQLModel)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def upsert_by_submission(
    db: Session,
    model: Type[RowT],
    submission_id: UUID,
    values: Dict[str, Any],
) -> RowT:
    """
    Insert or overwrite the single ``model`` row keyed by ``submission_id``.

    Two concurrent calls for the same submission are not serialized; the
    later commit wins.
    """
    statement = select(model).where(model.submission_id == submission_id)
    row = db.exec(statement).first()
    if row is None:
        row = model(submission_id=submission_id, **values)
    else:
        for key, value in values.items():
            setattr(row, key, value)
    db.add(row)

    try:
        db.commit()
    except IntegrityError:
        # Another request inserted the row between our select and commit.
        db.rollback()
        logging.info(f"{model.__name__} for submission {submission_id} was created concurrently; updating it instead")
        row = db.exec(statement).one()
        for key, value in values.items():
            setattr(row, key, value)
        db.add(row)
        db.commit()

    db.refresh(row)
    return row

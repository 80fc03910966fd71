from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Commit on normal exit, roll back and re-raise on any exception.

    Services wrap every mutating operation in exactly one of these; they
    never call commit() themselves.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise

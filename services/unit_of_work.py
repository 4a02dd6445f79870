"""
Transaction Scope

Wraps a block of reads and writes in one database transaction:
commit on normal exit, rollback on any exception.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from models import db
from .errors import InternalError

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work():
    """
    Yield the current session inside a transaction.

    Service errors are re-raised unchanged after the rollback. Database
    errors are logged and re-raised as InternalError so callers never see
    driver details.

    Usage:
        with unit_of_work() as session:
            session.add(ingredient)
    """
    session = db.session
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Transaction rolled back after database error: %s", e, exc_info=True)
        raise InternalError() from e
    except Exception:
        session.rollback()
        raise

"""Unit-of-work scope shared by the services."""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy.exc import SQLAlchemyError

from papertrade.core.exceptions import DependencyFailureError
from papertrade.repositories.protocols import UnitOfWork

logger = logging.getLogger(__name__)

LEDGER_STORE = "ledger store"


@contextmanager
def ledger_store(uow_factory: Callable[[], UnitOfWork], operation: str) -> Iterator[UnitOfWork]:
    """
    Open a unit of work for one operation.

    Any error rolls the unit of work back before it propagates, and the
    unit of work is always closed. Store errors surface as
    ``DependencyFailureError`` so callers only ever see ``AppError``.
    """
    try:
        uow = uow_factory()
    except SQLAlchemyError as exc:
        logger.exception("Could not open the ledger store for %s", operation)
        raise DependencyFailureError(LEDGER_STORE, str(exc)) from exc

    try:
        yield uow
    except SQLAlchemyError as exc:
        _rollback(uow)
        logger.exception("Ledger store failed during %s", operation)
        raise DependencyFailureError(LEDGER_STORE, str(exc)) from exc
    except BaseException:
        _rollback(uow)
        raise
    finally:
        uow.close()


def _rollback(uow: UnitOfWork) -> None:
    try:
        uow.rollback()
    except SQLAlchemyError:
        logger.warning("Rollback failed", exc_info=True)

"""SQLAlchemy repository implementations."""

from papertrade.repositories.sqlalchemy.database import (
    Base,
    build_engine,
    build_session_factory,
    init_db,
)
from papertrade.repositories.sqlalchemy.account_repo import SqlAlchemyAccountRepository
from papertrade.repositories.sqlalchemy.position_repo import SqlAlchemyPositionRepository
from papertrade.repositories.sqlalchemy.trade_repo import SqlAlchemyTradeRepository
from papertrade.repositories.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "init_db",
    "SqlAlchemyAccountRepository",
    "SqlAlchemyPositionRepository",
    "SqlAlchemyTradeRepository",
    "SqlAlchemyUnitOfWork",
]

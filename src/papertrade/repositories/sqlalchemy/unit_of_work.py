"""SQLAlchemy unit of work."""

from sqlalchemy.orm import Session

from papertrade.repositories.sqlalchemy.account_repo import SqlAlchemyAccountRepository
from papertrade.repositories.sqlalchemy.position_repo import SqlAlchemyPositionRepository
from papertrade.repositories.sqlalchemy.trade_repo import SqlAlchemyTradeRepository


class SqlAlchemyUnitOfWork:
    """
    One session shared by the account, position and trade repositories.

    Repositories only flush; ``commit()`` makes the whole operation
    durable and ``rollback()`` discards it.
    """

    def __init__(self, session: Session):
        self.session = session
        self.accounts = SqlAlchemyAccountRepository(session)
        self.positions = SqlAlchemyPositionRepository(session)
        self.trades = SqlAlchemyTradeRepository(session)

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def refresh(self) -> None:
        self.session.expire_all()

    def close(self) -> None:
        self.session.close()

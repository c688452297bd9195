"""SQLAlchemy implementation of PositionRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from papertrade.domain.models import Position
from papertrade.repositories.sqlalchemy.database import from_db_datetime, to_db_datetime
from papertrade.repositories.sqlalchemy.orm_models import PositionORM


class SqlAlchemyPositionRepository:
    """SQLAlchemy-backed position repository."""

    def __init__(self, db: Session):
        self._db = db

    def _get_orm(self, account_id: str, symbol: str) -> Optional[PositionORM]:
        return self._db.query(PositionORM).filter(
            PositionORM.account_id == account_id,
            PositionORM.symbol == symbol,
        ).first()

    def get(self, account_id: str, symbol: str) -> Optional[Position]:
        orm = self._get_orm(account_id, symbol)
        return self._to_domain(orm) if orm else None

    def list_by_account(self, account_id: str) -> list[Position]:
        orm_positions = (
            self._db.query(PositionORM)
            .filter(PositionORM.account_id == account_id)
            .order_by(PositionORM.symbol)
            .all()
        )
        return [self._to_domain(p) for p in orm_positions]

    def save(self, position: Position) -> Position:
        """Insert or update a position."""
        orm = self._get_orm(position.account_id, position.symbol)
        if orm is None:
            orm = PositionORM(account_id=position.account_id, symbol=position.symbol)
            self._db.add(orm)
        orm.quantity = position.quantity
        orm.average_cost = position.average_cost
        orm.total_cost = position.total_cost
        orm.last_price = position.last_price
        orm.market_value = position.market_value
        orm.unrealized_pnl = position.unrealized_pnl
        orm.updated_at_est = to_db_datetime(position.updated_at)
        self._db.flush()
        return self._to_domain(orm)

    def delete(self, account_id: str, symbol: str) -> None:
        self._db.query(PositionORM).filter(
            PositionORM.account_id == account_id,
            PositionORM.symbol == symbol,
        ).delete()
        self._db.flush()

    @staticmethod
    def _to_domain(orm: PositionORM) -> Position:
        """Convert ORM model to domain model."""
        return Position(
            account_id=orm.account_id,
            symbol=orm.symbol,
            quantity=Decimal(str(orm.quantity)),
            average_cost=Decimal(str(orm.average_cost)),
            total_cost=Decimal(str(orm.total_cost)),
            last_price=Decimal(str(orm.last_price)) if orm.last_price is not None else None,
            market_value=Decimal(str(orm.market_value)),
            unrealized_pnl=Decimal(str(orm.unrealized_pnl)),
            updated_at=from_db_datetime(orm.updated_at_est),
        )

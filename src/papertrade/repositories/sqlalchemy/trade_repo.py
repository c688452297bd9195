"""SQLAlchemy implementation of TradeRepository."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from papertrade.domain.models import Trade, TradeSide, TradeStatus
from papertrade.repositories.sqlalchemy.database import from_db_datetime, to_db_datetime
from papertrade.repositories.sqlalchemy.orm_models import TradeORM


class SqlAlchemyTradeRepository:
    """SQLAlchemy-backed trade repository (append-only)."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, trade: Trade) -> Trade:
        """Append a trade record."""
        orm_trade = TradeORM(
            trade_id=trade.trade_id,
            account_id=trade.account_id,
            symbol=trade.symbol,
            side=trade.side,
            quantity=trade.quantity,
            price=trade.price,
            total_amount=trade.total_amount,
            executed_at_est=to_db_datetime(trade.executed_at),
            status=trade.status,
            realized_pnl=trade.realized_pnl,
            is_day_trade=trade.is_day_trade,
            created_at_est=to_db_datetime(trade.created_at),
        )
        self._db.add(orm_trade)
        self._db.flush()
        return self._to_domain(orm_trade)

    def get_by_id(self, trade_id: str) -> Optional[Trade]:
        orm_trade = self._db.query(TradeORM).filter(TradeORM.trade_id == trade_id).first()
        return self._to_domain(orm_trade) if orm_trade else None

    def list_by_account(self, account_id: str) -> list[Trade]:
        """List trades for an account in execution order."""
        orm_trades = (
            self._db.query(TradeORM)
            .filter(TradeORM.account_id == account_id)
            .order_by(TradeORM.executed_at_est, TradeORM.id)
            .all()
        )
        return [self._to_domain(t) for t in orm_trades]

    def exists_between(
        self,
        account_id: str,
        symbol: str,
        side: TradeSide,
        start: datetime,
        end: datetime,
    ) -> bool:
        match = (
            self._db.query(TradeORM.id)
            .filter(
                TradeORM.account_id == account_id,
                TradeORM.symbol == symbol,
                TradeORM.side == side,
                TradeORM.status == TradeStatus.EXECUTED,
                TradeORM.executed_at_est >= to_db_datetime(start),
                TradeORM.executed_at_est <= to_db_datetime(end),
            )
            .first()
        )
        return match is not None

    @staticmethod
    def _to_domain(orm: TradeORM) -> Trade:
        """Convert ORM model to domain model."""
        return Trade(
            trade_id=orm.trade_id,
            account_id=orm.account_id,
            symbol=orm.symbol,
            side=orm.side,
            quantity=Decimal(str(orm.quantity)),
            price=Decimal(str(orm.price)),
            total_amount=Decimal(str(orm.total_amount)),
            executed_at=from_db_datetime(orm.executed_at_est),
            status=orm.status,
            realized_pnl=Decimal(str(orm.realized_pnl)) if orm.realized_pnl is not None else None,
            is_day_trade=orm.is_day_trade,
            created_at=from_db_datetime(orm.created_at_est),
        )

"""SQLAlchemy implementation of AccountRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from papertrade.domain.models import Account
from papertrade.repositories.sqlalchemy.database import from_db_datetime, to_db_datetime
from papertrade.repositories.sqlalchemy.orm_models import AccountORM


class SqlAlchemyAccountRepository:
    """SQLAlchemy-backed account repository. Writes are flushed, not committed."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        orm_account = AccountORM(
            account_id=account.account_id,
            owner_id=account.owner_id,
            account_type=account.account_type,
            initial_cash=account.initial_cash,
            cash_balance=account.cash_balance,
            market_value=account.market_value,
            realized_pnl=account.realized_pnl,
            unrealized_pnl=account.unrealized_pnl,
            day_trade_count=account.day_trade_count,
            last_day_trade_reset_est=to_db_datetime(account.last_day_trade_reset),
            is_active=account.is_active,
            created_at_est=to_db_datetime(account.created_at),
            updated_at_est=to_db_datetime(account.updated_at),
        )
        self._db.add(orm_account)
        self._db.flush()
        return self._to_domain(orm_account)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID."""
        orm_account = self._db.query(AccountORM).filter(
            AccountORM.account_id == account_id
        ).first()
        return self._to_domain(orm_account) if orm_account else None

    def list_all(self, owner_id: Optional[str] = None, active_only: bool = False) -> list[Account]:
        """List accounts ordered by creation time."""
        query = self._db.query(AccountORM)
        if owner_id is not None:
            query = query.filter(AccountORM.owner_id == owner_id)
        if active_only:
            query = query.filter(AccountORM.is_active.is_(True))
        orm_accounts = query.order_by(AccountORM.created_at_est, AccountORM.account_id).all()
        return [self._to_domain(a) for a in orm_accounts]

    def update(self, account: Account) -> Account:
        """Update an existing account."""
        orm_account = self._db.query(AccountORM).filter(
            AccountORM.account_id == account.account_id
        ).first()
        if orm_account is None:
            raise ValueError(f"Account not found: {account.account_id}")
        orm_account.cash_balance = account.cash_balance
        orm_account.market_value = account.market_value
        orm_account.realized_pnl = account.realized_pnl
        orm_account.unrealized_pnl = account.unrealized_pnl
        orm_account.day_trade_count = account.day_trade_count
        orm_account.last_day_trade_reset_est = to_db_datetime(account.last_day_trade_reset)
        orm_account.is_active = account.is_active
        orm_account.updated_at_est = to_db_datetime(account.updated_at)
        self._db.flush()
        return self._to_domain(orm_account)

    @staticmethod
    def _to_domain(orm: AccountORM) -> Account:
        """Convert ORM model to domain model."""
        return Account(
            account_id=orm.account_id,
            owner_id=orm.owner_id,
            account_type=orm.account_type,
            initial_cash=Decimal(str(orm.initial_cash)),
            cash_balance=Decimal(str(orm.cash_balance)),
            market_value=Decimal(str(orm.market_value)),
            realized_pnl=Decimal(str(orm.realized_pnl)),
            unrealized_pnl=Decimal(str(orm.unrealized_pnl)),
            day_trade_count=orm.day_trade_count,
            last_day_trade_reset=from_db_datetime(orm.last_day_trade_reset_est),
            is_active=orm.is_active,
            created_at=from_db_datetime(orm.created_at_est),
            updated_at=from_db_datetime(orm.updated_at_est),
        )

"""
Integration tests for SQLAlchemy repositories with SQLite.

Tests cover:
- Account round trip including Eastern timestamps
- Position upsert and delete
- Trade ordering and same-day lookup
- Unit of work commit and rollback
"""

from decimal import Decimal

import pytest

from papertrade.domain.models import Account, Position, Trade, TradeSide

from tests.conftest import eastern_datetime


def _account(account_id: str = "acc-001") -> Account:
    opened = eastern_datetime(2024, 6, 10, 9, 30)
    return Account(
        account_id=account_id,
        owner_id="alice",
        account_type="DAY_TRADING_PRO",
        initial_cash=Decimal("50000"),
        cash_balance=Decimal("50000"),
        last_day_trade_reset=opened,
        created_at=opened,
        updated_at=opened,
    )


def _trade(trade_id: str, side: str, executed_at, symbol: str = "X") -> Trade:
    return Trade(
        trade_id=trade_id,
        account_id="acc-001",
        symbol=symbol,
        side=side,
        quantity=Decimal("1"),
        price=Decimal("100"),
        total_amount=Decimal("100"),
        executed_at=executed_at,
    )


@pytest.fixture
def uow(context):
    unit = context.unit_of_work()
    unit.accounts.create(_account())
    unit.commit()
    yield unit
    unit.close()


# =============================================================================
# ACCOUNT REPOSITORY TESTS
# =============================================================================


class TestAccountRepository:
    """Tests for SqlAlchemyAccountRepository."""

    def test_account_round_trip(self, context, uow):
        """
        GIVEN an account committed through one unit of work
        WHEN I read it through another
        THEN every field survives, timestamps as US/Eastern
        """
        other = context.unit_of_work()
        try:
            retrieved = other.accounts.get_by_id("acc-001")
        finally:
            other.close()

        assert retrieved is not None
        assert retrieved.owner_id == "alice"
        assert retrieved.cash_balance == Decimal("50000")
        assert retrieved.day_trade_count == 0
        assert retrieved.is_active is True
        assert retrieved.created_at == eastern_datetime(2024, 6, 10, 9, 30)
        assert retrieved.created_at.tzinfo is not None

    def test_update_persists_counters(self, uow):
        account = uow.accounts.get_by_id("acc-001")
        account.day_trade_count = 2
        account.cash_balance = Decimal("49000.12345678")

        uow.accounts.update(account)
        uow.commit()

        reloaded = uow.accounts.get_by_id("acc-001")
        assert reloaded.day_trade_count == 2
        assert reloaded.cash_balance == Decimal("49000.12345678")

    def test_missing_account_is_none(self, uow):
        assert uow.accounts.get_by_id("nope") is None


# =============================================================================
# POSITION REPOSITORY TESTS
# =============================================================================


class TestPositionRepository:
    """Tests for SqlAlchemyPositionRepository."""

    def test_save_inserts_then_updates(self, uow):
        position = Position(account_id="acc-001", symbol="X")
        position.apply_buy(Decimal("10"), Decimal("100"))
        uow.positions.save(position)

        position.apply_buy(Decimal("10"), Decimal("110"))
        uow.positions.save(position)
        uow.commit()

        stored = uow.positions.list_by_account("acc-001")
        assert len(stored) == 1
        assert stored[0].quantity == Decimal("20")
        assert stored[0].total_cost == Decimal("2100")
        assert stored[0].last_price == Decimal("110")

    def test_delete_removes_position(self, uow):
        uow.positions.save(Position(account_id="acc-001", symbol="X", quantity=Decimal("1")))
        uow.commit()

        uow.positions.delete("acc-001", "X")
        uow.commit()

        assert uow.positions.get("acc-001", "X") is None


# =============================================================================
# TRADE REPOSITORY TESTS
# =============================================================================


class TestTradeRepository:
    """Tests for SqlAlchemyTradeRepository."""

    def test_list_orders_by_execution_time(self, uow):
        uow.trades.create(_trade("t2", "SELL", eastern_datetime(2024, 6, 11, 10)))
        uow.trades.create(_trade("t1", "BUY", eastern_datetime(2024, 6, 10, 10)))
        uow.commit()

        trades = uow.trades.list_by_account("acc-001")

        assert [t.trade_id for t in trades] == ["t1", "t2"]
        assert trades[0].side == TradeSide.BUY
        assert uow.trades.get_by_id("t2").executed_at == eastern_datetime(2024, 6, 11, 10)

    def test_exists_between_respects_bounds_side_and_symbol(self, uow):
        """
        GIVEN a BUY of X at 15:59 on 2024-06-10
        WHEN I look for buys on that day and the next
        THEN only the same-day X lookup matches
        """
        uow.trades.create(_trade("t1", "BUY", eastern_datetime(2024, 6, 10, 15, 59)))
        uow.commit()
        day_start = eastern_datetime(2024, 6, 10, 0, 0)
        day_end = eastern_datetime(2024, 6, 10, 23, 59, 59)

        assert uow.trades.exists_between("acc-001", "X", TradeSide.BUY, day_start, day_end) is True
        assert uow.trades.exists_between("acc-001", "X", TradeSide.SELL, day_start, day_end) is False
        assert uow.trades.exists_between("acc-001", "Y", TradeSide.BUY, day_start, day_end) is False
        assert uow.trades.exists_between(
            "acc-001",
            "X",
            TradeSide.BUY,
            eastern_datetime(2024, 6, 11, 0, 0),
            eastern_datetime(2024, 6, 11, 23, 59, 59),
        ) is False


# =============================================================================
# UNIT OF WORK TESTS
# =============================================================================


class TestUnitOfWork:
    """Tests for commit/rollback atomicity."""

    def test_rollback_discards_all_repositories(self, context, uow):
        """
        GIVEN cash, position and trade writes flushed in one unit of work
        WHEN it is rolled back
        THEN none of them are visible afterwards
        """
        account = uow.accounts.get_by_id("acc-001")
        account.cash_balance = Decimal("49900")
        uow.accounts.update(account)
        uow.positions.save(Position(account_id="acc-001", symbol="X", quantity=Decimal("1")))
        uow.trades.create(_trade("t1", "BUY", eastern_datetime(2024, 6, 10, 10)))

        uow.rollback()

        other = context.unit_of_work()
        try:
            assert other.accounts.get_by_id("acc-001").cash_balance == Decimal("50000")
            assert other.positions.list_by_account("acc-001") == []
            assert other.trades.list_by_account("acc-001") == []
        finally:
            other.close()

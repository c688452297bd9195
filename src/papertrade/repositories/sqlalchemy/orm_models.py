"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Boolean,
    Integer,
    ForeignKey,
    Numeric,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from papertrade.repositories.sqlalchemy.database import Base
from papertrade.domain.models.enums import TradeSide, TradeStatus

MONEY = Numeric(precision=28, scale=8)
QUANTITY = Numeric(precision=28, scale=8)


class AccountORM(Base):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"

    account_id = Column(String(36), primary_key=True)
    owner_id = Column(String(64), nullable=False, index=True)
    account_type = Column(String(64), nullable=False)
    initial_cash = Column(MONEY, nullable=False)
    cash_balance = Column(MONEY, nullable=False)
    market_value = Column(MONEY, nullable=False, default=Decimal("0"))
    realized_pnl = Column(MONEY, nullable=False, default=Decimal("0"))
    unrealized_pnl = Column(MONEY, nullable=False, default=Decimal("0"))
    day_trade_count = Column(Integer, nullable=False, default=0)
    last_day_trade_reset_est = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at_est = Column(DateTime, nullable=False)
    updated_at_est = Column(DateTime, nullable=True)

    positions = relationship("PositionORM", back_populates="account")
    trades = relationship("TradeORM", back_populates="account")


class PositionORM(Base):
    """SQLAlchemy model for Position (one row per account and symbol)."""

    __tablename__ = "positions"

    account_id = Column(String(36), ForeignKey("accounts.account_id"), primary_key=True)
    symbol = Column(String(20), primary_key=True)
    quantity = Column(QUANTITY, nullable=False, default=Decimal("0"))
    average_cost = Column(MONEY, nullable=False, default=Decimal("0"))
    total_cost = Column(MONEY, nullable=False, default=Decimal("0"))
    last_price = Column(MONEY, nullable=True)
    market_value = Column(MONEY, nullable=False, default=Decimal("0"))
    unrealized_pnl = Column(MONEY, nullable=False, default=Decimal("0"))
    updated_at_est = Column(DateTime, nullable=True)

    account = relationship("AccountORM", back_populates="positions")


class TradeORM(Base):
    """SQLAlchemy model for Trade (append-only)."""

    __tablename__ = "trades"

    id = Column(Integer, primary_key=True, autoincrement=True)
    trade_id = Column(String(36), unique=True, nullable=False)
    account_id = Column(String(36), ForeignKey("accounts.account_id"), nullable=False, index=True)
    symbol = Column(String(20), nullable=False)
    side = Column(SqlEnum(TradeSide), nullable=False)
    quantity = Column(QUANTITY, nullable=False)
    price = Column(MONEY, nullable=False)
    total_amount = Column(MONEY, nullable=False)
    executed_at_est = Column(DateTime, nullable=False, index=True)
    status = Column(SqlEnum(TradeStatus), nullable=False, default=TradeStatus.EXECUTED)
    realized_pnl = Column(MONEY, nullable=True)
    is_day_trade = Column(Boolean, nullable=False, default=False)
    created_at_est = Column(DateTime, nullable=True)

    account = relationship("AccountORM", back_populates="trades")

"""Pydantic schemas for account endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    """Request schema for opening an account."""

    owner_id: str = Field(..., min_length=1, max_length=64, description="Owner identifier")
    account_type: str = Field(..., min_length=1, max_length=64, description="Account type tag")
    initial_cash: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Starting cash; defaults to the account type's amount",
    )


class PositionResponse(BaseModel):
    model_config = {"from_attributes": True}

    symbol: str
    quantity: Decimal
    average_cost: Decimal
    total_cost: Decimal
    last_price: Optional[Decimal] = None
    market_value: Decimal
    unrealized_pnl: Decimal
    unrealized_return_percent: Decimal
    prev_close: Optional[Decimal] = None
    updated_at: Optional[datetime] = None


class TodayPnlResponse(BaseModel):
    model_config = {"from_attributes": True}

    pnl_dollars: Decimal
    pnl_percent: Optional[Decimal] = None
    prev_close_value: Decimal
    current_value: Decimal
    as_of: Optional[datetime] = None


class AccountResponse(BaseModel):
    """Response schema for a single account."""

    model_config = {"from_attributes": True}

    account_id: str
    owner_id: str
    account_type: str
    initial_cash: Decimal
    cash_balance: Decimal
    market_value: Decimal
    total_value: Decimal
    realized_pnl: Decimal
    unrealized_pnl: Decimal
    total_pnl: Decimal
    total_return_percent: Decimal
    day_trade_count: int
    last_day_trade_reset: Optional[datetime] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    positions: list[PositionResponse] = []
    today_pnl: Optional[TodayPnlResponse] = None


class AccountSummaryResponse(BaseModel):
    """Account row without positions, used in listings."""

    model_config = {"from_attributes": True}

    account_id: str
    owner_id: str
    account_type: str
    cash_balance: Decimal
    market_value: Decimal
    total_value: Decimal
    day_trade_count: int
    is_active: bool
    created_at: Optional[datetime] = None


class AccountListResponse(BaseModel):
    """Response schema for listing accounts."""

    accounts: list[AccountSummaryResponse]
    count: int

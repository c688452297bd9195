"""Pydantic schemas for trade endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from papertrade.domain.models.enums import TradeSide, TradeStatus


class TradeCreateRequest(BaseModel):
    """Request schema for submitting an order."""

    symbol: str = Field(..., min_length=1, max_length=20, description="Ticker symbol")
    side: str = Field(..., description="buy or sell")
    quantity: Decimal = Field(..., description="Number of shares (positive)")

    @field_validator("symbol")
    @classmethod
    def uppercase_symbol(cls, v: str) -> str:
        return v.strip().upper()


class TradeResponse(BaseModel):
    """Response schema for a single trade."""

    model_config = {"from_attributes": True}

    trade_id: str
    account_id: str
    symbol: str
    side: TradeSide
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    executed_at: datetime
    status: TradeStatus
    realized_pnl: Optional[Decimal] = None
    is_day_trade: bool


class TradeListResponse(BaseModel):
    trades: list[TradeResponse]
    count: int

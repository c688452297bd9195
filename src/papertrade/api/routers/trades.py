"""Trade endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends

from papertrade.api.deps import get_ledger_service
from papertrade.api.schemas import TradeCreateRequest, TradeResponse, TradeListResponse
from papertrade.services import LedgerService

router = APIRouter(prefix="/accounts/{account_id}/trades", tags=["trades"])


@router.post("", response_model=TradeResponse, status_code=201)
def execute_trade(
    account_id: str,
    data: TradeCreateRequest,
    ledger: LedgerService = Depends(get_ledger_service),
) -> TradeResponse:
    """Execute a market order at the current price."""
    trade = ledger.execute_trade(account_id, data.symbol, data.side, data.quantity)
    return TradeResponse.model_validate(trade)


@router.get("", response_model=TradeListResponse)
def list_trades(
    account_id: str,
    since: Optional[str] = None,
    until: Optional[str] = None,
    ledger: LedgerService = Depends(get_ledger_service),
) -> TradeListResponse:
    """List executed trades, oldest first, optionally within [since, until]."""
    trades = ledger.list_trades(account_id, since=since, until=until)
    return TradeListResponse(
        trades=[TradeResponse.model_validate(t) for t in trades],
        count=len(trades),
    )

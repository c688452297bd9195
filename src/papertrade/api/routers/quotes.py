"""Market quote endpoints."""

from fastapi import APIRouter, Depends, Query

from papertrade.api.deps import get_price_service
from papertrade.api.schemas import QuoteResponse
from papertrade.services import PriceService

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.get("", response_model=list[QuoteResponse])
def get_quotes(
    symbols: str = Query(..., description="Comma-separated symbols"),
    refresh: bool = Query(False, description="Bypass cached prices"),
    prices: PriceService = Depends(get_price_service),
) -> list[QuoteResponse]:
    """Current price and previous close for each symbol, in request order."""
    symbol_list = [s for s in (part.strip() for part in symbols.split(",")) if s]
    quotes = []
    for symbol in symbol_list:
        if refresh:
            prices.invalidate(symbol)
        quotes.append(QuoteResponse.model_validate(prices.get_quote(symbol)))
    return quotes

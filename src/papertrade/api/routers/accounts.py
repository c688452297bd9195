"""Account management endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from papertrade.api.deps import get_ledger_service
from papertrade.api.schemas import (
    AccountCreate,
    AccountResponse,
    AccountSummaryResponse,
    AccountListResponse,
)
from papertrade.services import LedgerService

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    data: AccountCreate,
    ledger: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    """Open a new account."""
    account = ledger.create_account(
        owner_id=data.owner_id,
        account_type=data.account_type,
        initial_cash=data.initial_cash,
    )
    return AccountResponse.model_validate(ledger.get_account_view(account.account_id))


@router.get("", response_model=AccountListResponse)
def list_accounts(
    owner_id: Optional[str] = Query(None, description="Only accounts of this owner"),
    active_only: bool = Query(False, description="Hide closed accounts"),
    ledger: LedgerService = Depends(get_ledger_service),
) -> AccountListResponse:
    """List accounts."""
    accounts = ledger.list_accounts(owner_id=owner_id, active_only=active_only)
    return AccountListResponse(
        accounts=[AccountSummaryResponse.model_validate(a) for a in accounts],
        count=len(accounts),
    )


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    ledger: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    """Get an account with its positions and today's P&L."""
    return AccountResponse.model_validate(ledger.get_account_view(account_id))


@router.delete("/{account_id}", response_model=AccountSummaryResponse)
def close_account(
    account_id: str,
    ledger: LedgerService = Depends(get_ledger_service),
) -> AccountSummaryResponse:
    """Close an account. History is kept; new trades are rejected."""
    return AccountSummaryResponse.model_validate(ledger.close_account(account_id))

"""/v1/transactions - ledger entries and cash-flow summary"""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from fingrip_gateway.api.dependencies import get_localization
from fingrip_gateway.api.v1.schemas import (
    TransactionCreate,
    TransactionListResponse,
    TransactionSchema,
    TransactionSummaryResponse,
)
from fingrip_gateway.domain.models import FinancialCategory, Transaction, TransactionType
from fingrip_gateway.domain.scoring import analyze_transactions
from fingrip_gateway.infrastructure.database.repositories import TransactionRepository
from fingrip_gateway.infrastructure.database.session import get_db
from fingrip_gateway.localization.manager import LocalizationManager
from fingrip_gateway.utils.date_utils import month_bounds

router = APIRouter()


def to_schema(txn: Transaction, l10n: LocalizationManager) -> TransactionSchema:
    return TransactionSchema(
        id=txn.id,
        date=txn.date,
        amount=txn.amount,
        type=txn.type,
        category=txn.category,
        description=txn.description,
        merchant=txn.merchant,
        location=txn.location,
        is_recurring=txn.is_recurring,
        tags=txn.tags,
        external_id=txn.external_id,
        month_year=txn.month_year,
        formatted_amount=l10n.format_currency(txn.amount),
    )


def _month_range(month: Optional[str]):
    if month is None:
        return None, None
    try:
        return month_bounds(month)
    except ValueError:
        raise HTTPException(status_code=400, detail="month must be formatted as YYYY-MM")


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    user_id: str = Query(..., min_length=1),
    type: Optional[TransactionType] = None,
    category: Optional[FinancialCategory] = None,
    month: Optional[str] = Query(None, description="YYYY-MM"),
    db: Session = Depends(get_db),
    l10n: LocalizationManager = Depends(get_localization),
):
    """List transactions newest first, optionally filtered by type, category and month"""
    start, end = _month_range(month)
    transactions = TransactionRepository(db).list(user_id, type=type, category=category, start=start, end=end)
    return TransactionListResponse(user_id=user_id, transactions=[to_schema(t, l10n) for t in transactions])


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
def create_transaction(
    body: TransactionCreate,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    l10n: LocalizationManager = Depends(get_localization),
):
    txn = TransactionRepository(db).add(user_id, Transaction(**body.model_dump()))
    db.commit()
    return to_schema(txn, l10n)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: UUID,
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    TransactionRepository(db).delete(user_id, transaction_id)
    db.commit()


@router.get("/transactions/summary", response_model=TransactionSummaryResponse)
def transaction_summary(
    user_id: str = Query(..., min_length=1),
    month: Optional[str] = Query(None, description="YYYY-MM"),
    db: Session = Depends(get_db),
    l10n: LocalizationManager = Depends(get_localization),
):
    """Income, expenses and balance; transfers are excluded"""
    start, end = _month_range(month)
    factors = analyze_transactions(TransactionRepository(db).list(user_id, start=start, end=end))
    return TransactionSummaryResponse(
        user_id=user_id,
        income=factors.total_income,
        expenses=factors.total_expenses,
        balance=factors.net_cash_flow,
        formatted_balance=l10n.format_currency(factors.net_cash_flow),
        expenses_by_category=factors.expenses_by_category,
        transaction_count=factors.transaction_count,
    )

"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from pocketledger.dependencies import get_db, get_config
from pocketledger.models.transaction import Transaction, TransactionType
from pocketledger.schemas.transaction import (
    TransactionResponse,
    TransactionUpdate,
    TransactionListResponse
)
from pocketledger.services.detection_config import DetectionConfig
from pocketledger.services.recurring_service import process_recurring_transactions
from pocketledger.services.transaction_filters import (
    SORT_OPTIONS,
    TransactionFilters,
    apply_transaction_filters,
    apply_transaction_sort,
)

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    search: Optional[str] = None,
    category: Optional[List[str]] = Query(None),
    type: Optional[TransactionType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    amount_min: Optional[float] = Query(None, ge=0),
    amount_max: Optional[float] = Query(None, ge=0),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = None,
    is_recurring: Optional[bool] = None,
    sort: str = Query("date-desc"),
    db: Session = Depends(get_db)
):
    """List transactions with filtering and pagination"""
    if sort not in SORT_OPTIONS:
        raise HTTPException(status_code=400, detail=f"sort must be one of {', '.join(SORT_OPTIONS)}")

    filters = TransactionFilters(
        search=search,
        categories=category,
        type=type,
        date_from=start_date,
        date_to=end_date,
        amount_min=amount_min,
        amount_max=amount_max,
        month=month,
        year=year,
        is_recurring=is_recurring,
    )
    query = apply_transaction_filters(db.query(Transaction), filters)

    total = query.count()

    query = apply_transaction_sort(query, sort)
    query = query.offset((page - 1) * per_page).limit(per_page)

    transactions = query.all()
    pages = (total + per_page - 1) // per_page

    return TransactionListResponse(
        items=[TransactionResponse.model_validate(t) for t in transactions],
        total=total,
        page=page,
        pages=pages
    )


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    db: Session = Depends(get_db)
):
    """Get a single transaction"""
    transaction = db.get(Transaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionResponse.model_validate(transaction)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    update: TransactionUpdate,
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Recategorize a transaction and refresh recurring detection"""
    transaction = db.get(Transaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    if update.category is not None:
        if update.category not in config.categories:
            raise HTTPException(status_code=400, detail=f"Unknown category: {update.category}")
        transaction.category = update.category
        transaction.ai_categorized = False
        db.commit()
        process_recurring_transactions(db, config)

    db.refresh(transaction)
    return TransactionResponse.model_validate(transaction)

"""API endpoints for user subscription overrides."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from pocketledger.dependencies import get_db, get_config
from pocketledger.services.detection_config import DetectionConfig
from pocketledger.models.transaction import Transaction
from pocketledger.schemas.recurring import RecurringGroupResponse
from pocketledger.schemas.subscription import (
    UserSubscriptionResponse,
    AddFromTransactionRequest,
    AddFromVendorRequest,
    UnconfirmedStatusResponse,
)
from pocketledger.services import subscription_service

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("", response_model=List[RecurringGroupResponse])
def get_merged_subscriptions(
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Detected groups merged with confirmed, hidden and manual subscriptions."""
    groups = subscription_service.get_merged_subscriptions(db, config)
    return [RecurringGroupResponse.model_validate(g) for g in groups]


@router.get("/unconfirmed", response_model=List[RecurringGroupResponse])
def get_unconfirmed_subscriptions(
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Detected groups the user has not confirmed or hidden yet."""
    groups = subscription_service.get_unconfirmed_subscriptions(db, config)
    return [RecurringGroupResponse.model_validate(g) for g in groups]


@router.get("/unconfirmed/exists", response_model=UnconfirmedStatusResponse)
def has_unconfirmed_subscriptions(
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    groups = subscription_service.get_unconfirmed_subscriptions(db, config)
    return UnconfirmedStatusResponse(has_unconfirmed=len(groups) > 0, count=len(groups))


@router.get("/user", response_model=List[UserSubscriptionResponse])
def get_user_subscriptions(
    include_hidden: bool = Query(True),
    db: Session = Depends(get_db)
):
    """Stored user subscription rows."""
    if include_hidden:
        subs = subscription_service.get_user_subscriptions(db)
    else:
        subs = subscription_service.get_visible_user_subscriptions(db)
    return [UserSubscriptionResponse.model_validate(s) for s in subs]


@router.post("/from-transaction", response_model=UserSubscriptionResponse, status_code=201)
def add_from_transaction(
    request: AddFromTransactionRequest,
    db: Session = Depends(get_db)
):
    """Mark a single transaction as a subscription."""
    transaction = db.get(Transaction, request.transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    subscription = subscription_service.add_subscription_from_transaction(
        db, transaction, request.frequency
    )
    return UserSubscriptionResponse.model_validate(subscription)


@router.post("/from-vendor", response_model=UserSubscriptionResponse, status_code=201)
def add_from_vendor(
    request: AddFromVendorRequest,
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Add a subscription from several transactions of the same vendor."""
    transactions = []
    if request.transaction_ids:
        transactions = db.query(Transaction).filter(
            Transaction.id.in_(request.transaction_ids)
        ).all()
        missing = set(request.transaction_ids) - {t.id for t in transactions}
        if missing:
            raise HTTPException(status_code=404, detail=f"Transactions not found: {', '.join(sorted(missing))}")

    try:
        subscription = subscription_service.add_subscription_from_vendor(
            db, request.vendor_name, transactions, config
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return UserSubscriptionResponse.model_validate(subscription)


@router.post("/{group_id:path}/confirm", response_model=UserSubscriptionResponse)
def confirm_subscription(
    group_id: str,
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Accept an auto-detected group as a subscription."""
    group = subscription_service.find_detected_group(db, group_id, config)
    if not group:
        raise HTTPException(status_code=404, detail="Recurring group not found")

    subscription = subscription_service.confirm_subscription(db, group)
    return UserSubscriptionResponse.model_validate(subscription)


@router.post("/{subscription_id:path}/hide", response_model=UserSubscriptionResponse)
def hide_subscription(
    subscription_id: str,
    db: Session = Depends(get_db)
):
    """Hide a subscription. Works for detected groups without a stored row."""
    subscription = subscription_service.remove_subscription(db, subscription_id)
    return UserSubscriptionResponse.model_validate(subscription)


@router.post("/{subscription_id:path}/restore", response_model=UserSubscriptionResponse)
def restore_subscription(
    subscription_id: str,
    db: Session = Depends(get_db)
):
    """Restore a hidden subscription."""
    subscription = subscription_service.restore_subscription(db, subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return UserSubscriptionResponse.model_validate(subscription)


@router.delete("/{subscription_id:path}")
def delete_subscription(
    subscription_id: str,
    db: Session = Depends(get_db)
):
    """Permanently delete a stored subscription row."""
    deleted = subscription_service.delete_subscription(db, subscription_id)
    return {"deleted": deleted}

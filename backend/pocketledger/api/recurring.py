"""API endpoints for recurring transaction detection."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from pocketledger.dependencies import get_db, get_config
from pocketledger.services.detection_config import DetectionConfig
from pocketledger.schemas.recurring import (
    RecurringGroupResponse,
    RecurringSummaryResponse,
    ProcessRecurringResponse,
)
from pocketledger.services import recurring_service, subscription_service
from pocketledger.services.recurring_detector import get_recurring_summary

router = APIRouter(prefix="/recurring", tags=["recurring"])


@router.get("", response_model=List[RecurringGroupResponse])
def get_recurring_groups(
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Auto-detected recurring groups, without user overrides applied."""
    groups = recurring_service.get_recurring_groups(db, config)
    return [RecurringGroupResponse.model_validate(g) for g in groups]


@router.get("/summary", response_model=RecurringSummaryResponse)
def get_summary(
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Projected monthly and yearly cost of the visible subscription list."""
    groups = subscription_service.get_merged_subscriptions(db, config)
    return get_recurring_summary(groups, config)


@router.post("/process", response_model=ProcessRecurringResponse)
def process_recurring(
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Re-run detection and persist recurring annotations on transactions."""
    groups = recurring_service.process_recurring_transactions(db, config)
    return ProcessRecurringResponse(
        total_found=len(groups),
        groups=[RecurringGroupResponse.model_validate(g) for g in groups],
    )

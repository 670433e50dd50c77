"""
Statement API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from pocketledger.dependencies import get_db, get_config
from pocketledger.services.detection_config import DetectionConfig
from pocketledger.schemas.statement import (
    StatementImportRequest,
    StatementImportResponse,
    StatementResponse,
    StatementDetailResponse,
)
from pocketledger.services import statement_service

router = APIRouter(prefix="/statements", tags=["statements"])


@router.post("", response_model=StatementImportResponse, status_code=201)
async def import_statement(
    request: StatementImportRequest,
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Import a parsed statement, categorize it and refresh recurring detection."""
    statement, categorized, groups = await statement_service.import_statement(db, request, config=config)
    return StatementImportResponse(
        statement=StatementResponse.model_validate(statement),
        transaction_count=len(statement.transactions),
        categorized_count=categorized,
        recurring_group_count=len(groups),
    )


@router.get("", response_model=List[StatementResponse])
def list_statements(db: Session = Depends(get_db)):
    """List imported statements"""
    return [StatementResponse.model_validate(s) for s in statement_service.get_statements(db)]


@router.get("/{statement_id}", response_model=StatementDetailResponse)
def get_statement(
    statement_id: str,
    db: Session = Depends(get_db)
):
    """Get a statement with its transactions"""
    statement = statement_service.get_statement(db, statement_id)
    if not statement:
        raise HTTPException(status_code=404, detail="Statement not found")
    return StatementDetailResponse.model_validate(statement)


@router.delete("/{statement_id}")
def delete_statement(
    statement_id: str,
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Delete a statement and its transactions"""
    if not statement_service.delete_statement(db, statement_id, config):
        raise HTTPException(status_code=404, detail="Statement not found")
    return {"deleted": True}

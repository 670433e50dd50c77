"""
Category rule API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
import re
import uuid

from pocketledger.dependencies import get_db, get_config
from pocketledger.models.category_rule import CategoryRule
from pocketledger.schemas.category_rule import CategoryRuleCreate, CategoryRuleResponse
from pocketledger.services.detection_config import DetectionConfig

router = APIRouter(prefix="/category-rules", tags=["category-rules"])


@router.get("/categories", response_model=List[str])
def list_categories(config: DetectionConfig = Depends(get_config)):
    """The category vocabulary"""
    return list(config.categories)


@router.get("", response_model=List[CategoryRuleResponse])
def list_rules(db: Session = Depends(get_db)):
    """List local categorization rules"""
    rules = db.query(CategoryRule).order_by(CategoryRule.created_at).all()
    return [CategoryRuleResponse.model_validate(r) for r in rules]


@router.post("", response_model=CategoryRuleResponse, status_code=201)
def create_rule(
    rule: CategoryRuleCreate,
    db: Session = Depends(get_db),
    config: DetectionConfig = Depends(get_config),
):
    """Create a categorization rule"""
    if rule.category not in config.categories:
        raise HTTPException(status_code=400, detail=f"Unknown category: {rule.category}")
    if rule.is_regex:
        try:
            re.compile(rule.pattern)
        except re.error as e:
            raise HTTPException(status_code=400, detail=f"Invalid regex: {e}")

    db_rule = CategoryRule(
        id=str(uuid.uuid4()),
        pattern=rule.pattern,
        category=rule.category,
        is_regex=rule.is_regex,
    )
    db.add(db_rule)
    db.commit()
    db.refresh(db_rule)
    return CategoryRuleResponse.model_validate(db_rule)


@router.delete("/{rule_id}", status_code=204)
def delete_rule(
    rule_id: str,
    db: Session = Depends(get_db)
):
    """Delete a categorization rule"""
    rule = db.get(CategoryRule, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Category rule not found")
    db.delete(rule)
    db.commit()
    return None

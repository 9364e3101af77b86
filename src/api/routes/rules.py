"""Masking Rule Endpoints"""

from fastapi import APIRouter, HTTPException, Response
from typing import List, Optional
import structlog

from src.models.masking import MaskingRule, MaskingRuleCreate, MaskingStrategy, PiiType
from src.services.rule_service import (
    MaskingRuleService,
    RuleConflictError,
    RuleNotFoundError
)

router = APIRouter()
logger = structlog.get_logger()

rule_service = MaskingRuleService()


@router.get("/rules", response_model=List[MaskingRule])
async def get_masking_rules(strategy: Optional[MaskingStrategy] = None):
    """Get all configured masking rules, optionally only those using a strategy"""
    if strategy:
        return await rule_service.find_by_strategy(strategy)
    return await rule_service.list_rules()


@router.get("/rules/active", response_model=List[MaskingRule])
async def get_active_masking_rules():
    """Get the active rule of every PII type that has one"""
    return await rule_service.find_all_active()


@router.get("/rules/{pii_type}", response_model=MaskingRule)
async def get_masking_rule(pii_type: PiiType):
    """
    Get the masking rule for a PII type

    The active rule is preferred; an inactive rule is returned only when
    the type has no active one.
    """
    rule = await rule_service.find_active_by_pii_type(pii_type)
    if not rule:
        rule = await rule_service.find_by_pii_type(pii_type)
    if not rule:
        raise HTTPException(status_code=404, detail="Masking rule not found")
    return rule


@router.post("/rules", response_model=MaskingRule)
async def create_masking_rule(rule: MaskingRuleCreate):
    """Create a new masking rule"""
    logger.info("create_masking_rule", pii_type=rule.pii_type.value)

    try:
        return await rule_service.create_rule(rule)
    except RuleConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/rules/{rule_id}", response_model=MaskingRule)
async def update_masking_rule(rule_id: int, rule: MaskingRuleCreate):
    """Update an existing masking rule"""
    try:
        return await rule_service.update_rule(rule_id, rule)
    except RuleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RuleConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/rules/{rule_id}", status_code=204)
async def delete_masking_rule(rule_id: int):
    """Delete a masking rule"""
    try:
        await rule_service.delete_rule(rule_id)
    except RuleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)

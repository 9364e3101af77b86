"""Masking Rule Service"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
import structlog

from src.models.masking import MaskingRule, MaskingRuleCreate, MaskingStrategy, PiiType
from src.rules.default_rules import load_default_rules

logger = structlog.get_logger()

PII_TYPE_ORDER = {pii_type: index for index, pii_type in enumerate(PiiType)}


class MaskingRuleError(Exception):
    """Base error for rule catalog operations"""


class RuleNotFoundError(MaskingRuleError):
    """No rule with the requested id"""

    def __init__(self, rule_id: int):
        super().__init__(f"Masking rule {rule_id} not found")
        self.rule_id = rule_id


class RuleConflictError(MaskingRuleError):
    """A second active rule for the same PII type was requested"""

    def __init__(self, pii_type: PiiType, existing_id: int):
        super().__init__(
            f"An active masking rule for {pii_type.value} already exists (id={existing_id})"
        )
        self.pii_type = pii_type
        self.existing_id = existing_id


class MaskingRuleService:
    """
    Catalog of masking rules keyed by PII type

    At most one rule per PII type may be active at a time; the active
    rule supplies defaults for masking requests that leave options unset.
    Returned rules are copies, so callers cannot mutate the catalog.
    """

    def __init__(self):
        # In-memory store (use a relational store in production)
        self.rules: Dict[int, MaskingRule] = {}
        self._next_id = 1

    async def find_active_by_pii_type(self, pii_type: PiiType) -> Optional[MaskingRule]:
        """Return the active rule for a PII type, if any"""
        for rule in self.rules.values():
            if rule.pii_type == pii_type and rule.is_active:
                return rule.model_copy()
        return None

    async def find_by_pii_type(self, pii_type: PiiType) -> Optional[MaskingRule]:
        for rule in self.rules.values():
            if rule.pii_type == pii_type:
                return rule.model_copy()
        return None

    async def find_all_active(self) -> List[MaskingRule]:
        """Active rules in PII type declaration order"""
        active = [r for r in self.rules.values() if r.is_active]
        active.sort(key=lambda r: PII_TYPE_ORDER[r.pii_type])
        return [r.model_copy() for r in active]

    async def find_by_strategy(self, strategy: MaskingStrategy) -> List[MaskingRule]:
        return [r.model_copy() for r in self.rules.values() if r.strategy == strategy]

    async def exists_by_pii_type(self, pii_type: PiiType) -> bool:
        return any(r.pii_type == pii_type for r in self.rules.values())

    async def list_rules(self) -> List[MaskingRule]:
        return [self.rules[rule_id].model_copy() for rule_id in sorted(self.rules)]

    async def get_rule(self, rule_id: int) -> Optional[MaskingRule]:
        rule = self.rules.get(rule_id)
        return rule.model_copy() if rule else None

    async def create_rule(self, rule: MaskingRuleCreate) -> MaskingRule:
        """
        Store a new rule

        Raises:
            RuleConflictError: rule is active and another active rule
                exists for the same PII type
        """
        if rule.is_active:
            self._check_active_conflict(rule.pii_type)

        now = datetime.now(timezone.utc)
        stored = MaskingRule(
            id=self._next_id,
            created_at=now,
            updated_at=now,
            **rule.model_dump()
        )
        self.rules[stored.id] = stored
        self._next_id += 1

        logger.info(
            "masking_rule_created",
            rule_id=stored.id,
            pii_type=stored.pii_type.value,
            strategy=stored.strategy.value
        )

        return stored.model_copy()

    async def update_rule(self, rule_id: int, rule: MaskingRuleCreate) -> MaskingRule:
        """
        Replace the fields of an existing rule

        Raises:
            RuleNotFoundError: no rule with this id
            RuleConflictError: update would activate a second rule for the type
        """
        existing = await self.get_rule(rule_id)
        if not existing:
            raise RuleNotFoundError(rule_id)

        if rule.is_active:
            self._check_active_conflict(rule.pii_type, exclude_id=rule_id)

        updated = MaskingRule(
            id=rule_id,
            created_at=existing.created_at,
            updated_at=datetime.now(timezone.utc),
            **rule.model_dump()
        )
        self.rules[rule_id] = updated

        logger.info(
            "masking_rule_updated",
            rule_id=rule_id,
            pii_type=updated.pii_type.value,
            strategy=updated.strategy.value
        )

        return updated.model_copy()

    async def delete_rule(self, rule_id: int) -> None:
        if rule_id not in self.rules:
            raise RuleNotFoundError(rule_id)

        del self.rules[rule_id]
        logger.info("masking_rule_deleted", rule_id=rule_id)

    async def seed_defaults(self) -> int:
        """
        Create the default rule for every PII type without a rule

        Returns:
            Number of rules created
        """
        created = 0
        for rule in load_default_rules():
            if await self.exists_by_pii_type(rule.pii_type):
                logger.info("masking_rule_seed_skipped", pii_type=rule.pii_type.value)
                continue
            await self.create_rule(rule)
            created += 1

        logger.info("masking_rules_seeded", created=created)

        return created

    def _check_active_conflict(self, pii_type: PiiType, exclude_id: Optional[int] = None):
        for rule in self.rules.values():
            if rule.id == exclude_id:
                continue
            if rule.pii_type == pii_type and rule.is_active:
                raise RuleConflictError(pii_type, rule.id)

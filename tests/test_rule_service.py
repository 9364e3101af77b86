"""Tests for the masking rule catalog and rule defaults"""

import random

import pytest

from src.models.masking import MaskingRequest, MaskingRuleCreate, MaskingStrategy, PiiType
from src.services.masking_service import MaskingService
from src.services.random_source import RandomSource
from src.services.rule_service import (
    MaskingRuleService,
    RuleConflictError,
    RuleNotFoundError
)


@pytest.fixture
def rule_service():
    return MaskingRuleService()


@pytest.fixture
def masking_service(rule_service):
    return MaskingService(
        rule_service=rule_service,
        random_source=RandomSource(random.Random(0)),
        apply_rule_defaults=True
    )


def email_rule(**overrides):
    fields = {"pii_type": PiiType.EMAIL, "strategy": MaskingStrategy.ASTERISK}
    fields.update(overrides)
    return MaskingRuleCreate(**fields)


class TestMaskingRuleService:
    """Rule catalog operations"""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, rule_service):
        rule = await rule_service.create_rule(email_rule(description="emails"))

        assert rule.id == 1
        assert rule.created_at == rule.updated_at
        assert rule.preserve_length is True
        assert rule.preserve_format is True
        assert rule.is_active is True
        assert rule.description == "emails"

    @pytest.mark.asyncio
    async def test_second_active_rule_for_type_is_rejected(self, rule_service):
        await rule_service.create_rule(email_rule())

        with pytest.raises(RuleConflictError) as exc_info:
            await rule_service.create_rule(email_rule(strategy=MaskingStrategy.HASH))

        assert exc_info.value.pii_type == PiiType.EMAIL
        assert exc_info.value.existing_id == 1

    @pytest.mark.asyncio
    async def test_inactive_rules_do_not_conflict(self, rule_service):
        await rule_service.create_rule(email_rule())
        inactive = await rule_service.create_rule(
            email_rule(strategy=MaskingStrategy.HASH, is_active=False)
        )

        active = await rule_service.find_active_by_pii_type(PiiType.EMAIL)

        assert inactive.id == 2
        assert active.strategy == MaskingStrategy.ASTERISK

    @pytest.mark.asyncio
    async def test_find_active_by_pii_type(self, rule_service):
        await rule_service.create_rule(email_rule(is_active=False))

        assert await rule_service.find_active_by_pii_type(PiiType.EMAIL) is None
        assert await rule_service.find_active_by_pii_type(PiiType.PHONE) is None
        assert (await rule_service.find_by_pii_type(PiiType.EMAIL)).is_active is False

    @pytest.mark.asyncio
    async def test_update_activating_second_rule_is_rejected(self, rule_service):
        await rule_service.create_rule(email_rule())
        inactive = await rule_service.create_rule(email_rule(is_active=False))

        with pytest.raises(RuleConflictError):
            await rule_service.update_rule(inactive.id, email_rule(is_active=True))

    @pytest.mark.asyncio
    async def test_update_same_rule_keeps_created_at(self, rule_service):
        created = await rule_service.create_rule(email_rule())

        updated = await rule_service.update_rule(
            created.id, email_rule(strategy=MaskingStrategy.PARTIAL)
        )

        assert updated.strategy == MaskingStrategy.PARTIAL
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_unknown_rule(self, rule_service):
        with pytest.raises(RuleNotFoundError):
            await rule_service.update_rule(42, email_rule())

    @pytest.mark.asyncio
    async def test_delete(self, rule_service):
        created = await rule_service.create_rule(email_rule())

        await rule_service.delete_rule(created.id)

        assert await rule_service.get_rule(created.id) is None
        with pytest.raises(RuleNotFoundError):
            await rule_service.delete_rule(created.id)

    @pytest.mark.asyncio
    async def test_returned_rules_are_copies(self, rule_service):
        created = await rule_service.create_rule(email_rule())
        created.strategy = MaskingStrategy.NULLIFY

        stored = await rule_service.get_rule(created.id)

        assert stored.strategy == MaskingStrategy.ASTERISK

    @pytest.mark.asyncio
    async def test_find_all_active_in_type_order(self, rule_service):
        await rule_service.create_rule(
            MaskingRuleCreate(pii_type=PiiType.IP_ADDRESS, strategy=MaskingStrategy.HASH)
        )
        await rule_service.create_rule(email_rule())
        await rule_service.create_rule(
            MaskingRuleCreate(pii_type=PiiType.PHONE, strategy=MaskingStrategy.ASTERISK,
                              is_active=False)
        )

        active = await rule_service.find_all_active()

        assert [r.pii_type for r in active] == [PiiType.EMAIL, PiiType.IP_ADDRESS]

    @pytest.mark.asyncio
    async def test_find_by_strategy(self, rule_service):
        await rule_service.seed_defaults()

        placeholders = await rule_service.find_by_strategy(MaskingStrategy.PLACEHOLDER)

        assert {r.pii_type for r in placeholders} == {PiiType.ADDRESS, PiiType.DATE_OF_BIRTH}

    @pytest.mark.asyncio
    async def test_seed_defaults_is_idempotent(self, rule_service):
        first = await rule_service.seed_defaults()
        second = await rule_service.seed_defaults()

        assert first == 8
        assert second == 0
        assert len(await rule_service.list_rules()) == 8

    @pytest.mark.asyncio
    async def test_seed_defaults_skips_configured_types(self, rule_service):
        await rule_service.create_rule(email_rule(strategy=MaskingStrategy.HASH))

        created = await rule_service.seed_defaults()
        email = await rule_service.find_active_by_pii_type(PiiType.EMAIL)

        assert created == 7
        assert email.strategy == MaskingStrategy.HASH
        assert await rule_service.exists_by_pii_type(PiiType.IP_ADDRESS)


class TestRuleDefaults:
    """Active rules fill options the request left unset"""

    @pytest.mark.asyncio
    async def test_rule_supplies_strategy_and_flags(self, rule_service, masking_service):
        await rule_service.create_rule(email_rule(preserve_format=False))

        response = await masking_service.mask_with_rules(
            MaskingRequest(data="john.doe@example.com", pii_type=PiiType.EMAIL)
        )

        assert response.success
        assert response.strategy == "ASTERISK"
        assert response.masked_data == "***@example.com"

    @pytest.mark.asyncio
    async def test_request_values_win(self, rule_service, masking_service):
        await rule_service.create_rule(email_rule(preserve_format=False))

        response = await masking_service.mask_with_rules(
            MaskingRequest(data="john.doe@example.com", pii_type=PiiType.EMAIL,
                           preserve_format=True)
        )

        assert response.masked_data == "j******e@example.com"

    @pytest.mark.asyncio
    async def test_request_strategy_overrides_rule(self, rule_service, masking_service):
        await rule_service.create_rule(email_rule())

        response = await masking_service.mask_with_rules(
            MaskingRequest(data="john.doe@example.com", pii_type=PiiType.EMAIL,
                           strategy=MaskingStrategy.NULLIFY)
        )

        assert response.strategy == "NULLIFY"
        assert response.masked_data is None

    @pytest.mark.asyncio
    async def test_rule_replacement_value(self, rule_service, masking_service):
        await rule_service.seed_defaults()

        response = await masking_service.mask_with_rules(
            MaskingRequest(data="1990-01-15", pii_type=PiiType.DATE_OF_BIRTH)
        )

        assert response.masked_data == "[DOB_MASKED]"

    @pytest.mark.asyncio
    async def test_inactive_rule_is_ignored(self, rule_service, masking_service):
        await rule_service.create_rule(email_rule(is_active=False))

        response = await masking_service.mask_with_rules(
            MaskingRequest(data="john.doe@example.com", pii_type=PiiType.EMAIL)
        )

        assert not response.success
        assert response.error_message == "Masking strategy is required"

    @pytest.mark.asyncio
    async def test_no_rule_without_strategy_fails(self, masking_service):
        response = await masking_service.mask_with_rules(
            MaskingRequest(data="anything", pii_type=PiiType.TEXT)
        )

        assert not response.success

    @pytest.mark.asyncio
    async def test_rule_defaults_disabled(self, rule_service):
        await rule_service.create_rule(email_rule())
        service = MaskingService(rule_service=rule_service, apply_rule_defaults=False)

        response = await service.mask_with_rules(
            MaskingRequest(data="john.doe@example.com", pii_type=PiiType.EMAIL)
        )

        assert not response.success

    @pytest.mark.asyncio
    async def test_resolve_request_leaves_original_untouched(self, rule_service, masking_service):
        await rule_service.create_rule(email_rule())
        request = MaskingRequest(data="john.doe@example.com", pii_type=PiiType.EMAIL)

        resolved = await masking_service.resolve_request(request)

        assert resolved.strategy == MaskingStrategy.ASTERISK
        assert resolved.preserve_length is True
        assert request.strategy is None

    @pytest.mark.asyncio
    async def test_get_default_rule(self, rule_service, masking_service):
        await rule_service.seed_defaults()

        rule = await masking_service.get_default_rule(PiiType.IP_ADDRESS)

        assert rule.strategy == MaskingStrategy.HASH
        assert await masking_service.get_default_rule(PiiType.PASSPORT) is None

"""Data Masking Service"""

import hashlib
import re
import uuid
from datetime import datetime, timezone
from typing import Optional
import structlog

from src.models.masking import (
    BatchMaskingRequest,
    BatchMaskingResponse,
    MaskingRequest,
    MaskingResponse,
    MaskingRule,
    MaskingStrategy,
    PiiType,
)
from src.services.random_source import RandomSource
from src.services.rule_service import MaskingRuleService
from src.utils.config import settings

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9+_.-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")
DIGIT_PATTERN = re.compile(r"[0-9]")
NON_DIGIT_PATTERN = re.compile(r"[^0-9]")

NAME_TYPES = (PiiType.FULL_NAME, PiiType.FIRST_NAME, PiiType.LAST_NAME)

HASH_ERROR = "HASH_ERROR"

# Output width when the input length is not preserved
FALLBACK_LENGTH = 8

# Request fields the active rule may fill when the caller left them unset
RULE_DEFAULT_FIELDS = (
    "strategy",
    "custom_pattern",
    "replacement_value",
    "preserve_length",
    "preserve_format",
)


class MaskingService:
    """
    Masking engine for PII values

    Supported strategies:
    - ASTERISK: Replace informative characters with *
    - RANDOM: Replace with random letters/digits of the same shape
    - PLACEHOLDER: Replace with a literal such as [EMAIL_MASKED]
    - HASH: SHA-256 hex digest
    - NULLIFY: Drop the value
    - PARTIAL: Keep the first and last quarter, star the middle
    - FORMAT_PRESERVING: RANDOM with the length always kept

    HASH and FORMAT_PRESERVING are not cryptographic protection: hashes of
    low-entropy values fall to a dictionary attack and the random strategies
    leak the value's shape.
    """

    hash_algorithm = "sha256"

    def __init__(
        self,
        rule_service: Optional[MaskingRuleService] = None,
        random_source: Optional[RandomSource] = None,
        apply_rule_defaults: Optional[bool] = None
    ):
        self.rule_service = rule_service or MaskingRuleService()
        self.random_source = random_source or RandomSource()
        self.apply_rule_defaults = (
            settings.APPLY_RULE_DEFAULTS if apply_rule_defaults is None else apply_rule_defaults
        )

    def mask_data(self, request: MaskingRequest) -> MaskingResponse:
        """
        Mask a single value

        Never raises: failures are reported through ``success`` and
        ``error_message`` on the response.
        """
        pii_type = request.pii_type.value
        strategy = request.strategy.value if request.strategy else None

        try:
            logger.info("masking_data", pii_type=pii_type, strategy=strategy)
            if settings.log_original_data:
                logger.debug("masking_input", pii_type=pii_type, original_data=request.data)

            masked_data = self._apply_strategy(
                data=request.data,
                pii_type=request.pii_type,
                strategy=request.strategy,
                replacement_value=request.replacement_value,
                preserve_length=_flag(request.preserve_length),
                preserve_format=_flag(request.preserve_format)
            )

            return MaskingResponse(
                original_data=request.data,
                masked_data=masked_data,
                pii_type=pii_type,
                strategy=strategy,
                processed_at=datetime.now(timezone.utc),
                success=True
            )

        except Exception as e:
            logger.error(
                "masking_failed",
                pii_type=pii_type,
                strategy=strategy,
                error=str(e),
                exc_info=True
            )
            return MaskingResponse(
                original_data=request.data,
                masked_data=None,
                pii_type=pii_type,
                strategy=strategy,
                processed_at=datetime.now(timezone.utc),
                success=False,
                error_message=str(e) or type(e).__name__
            )

    async def mask_with_rules(self, request: MaskingRequest) -> MaskingResponse:
        """Mask a value, filling unset options from the active rule first"""
        if self.apply_rule_defaults:
            request = await self.resolve_request(request)
        return self.mask_data(request)

    async def mask_batch(self, request: BatchMaskingRequest) -> BatchMaskingResponse:
        """
        Mask a list of values independently

        A failing item does not stop the batch; it is counted in
        ``total_failed`` and reported in its own response.
        """
        job_id = str(uuid.uuid4())
        results = [await self.mask_with_rules(item) for item in request.items]
        total_failed = sum(1 for result in results if not result.success)

        logger.info(
            "batch_masked",
            job_id=job_id,
            total_processed=len(results),
            total_failed=total_failed
        )

        return BatchMaskingResponse(
            job_id=job_id,
            results=results,
            total_processed=len(results),
            total_failed=total_failed
        )

    async def get_default_rule(self, pii_type: PiiType) -> Optional[MaskingRule]:
        """Get the active masking rule for a PII type"""
        return await self.rule_service.find_active_by_pii_type(pii_type)

    async def resolve_request(self, request: MaskingRequest) -> MaskingRequest:
        """
        Merge the active rule into a request

        Values set on the request win; the rule only fills fields the
        request left as None. Flags still unset afterwards default to true
        in ``mask_data``.
        """
        rule = await self.get_default_rule(request.pii_type)
        if not rule:
            return request

        updates = {
            field: getattr(rule, field)
            for field in RULE_DEFAULT_FIELDS
            if getattr(request, field) is None
        }

        logger.info(
            "masking_rule_applied",
            rule_id=rule.id,
            pii_type=request.pii_type.value,
            fields=sorted(updates)
        )

        return request.model_copy(update=updates)

    def _apply_strategy(
        self,
        data: Optional[str],
        pii_type: PiiType,
        strategy: Optional[MaskingStrategy],
        replacement_value: Optional[str],
        preserve_length: bool,
        preserve_format: bool
    ) -> Optional[str]:
        """Apply masking strategy to a value"""
        if not data:
            return data

        if strategy is None:
            raise ValueError("Masking strategy is required")

        if strategy == MaskingStrategy.ASTERISK:
            return self._mask_with_asterisks(data, pii_type, preserve_length, preserve_format)

        elif strategy == MaskingStrategy.RANDOM:
            return self._mask_with_random(data, pii_type, preserve_length, preserve_format)

        elif strategy == MaskingStrategy.PLACEHOLDER:
            return self._mask_with_placeholder(pii_type, replacement_value)

        elif strategy == MaskingStrategy.HASH:
            return self._mask_with_hash(data)

        elif strategy == MaskingStrategy.NULLIFY:
            return None

        elif strategy == MaskingStrategy.PARTIAL:
            return self._mask_partially(data)

        elif strategy == MaskingStrategy.FORMAT_PRESERVING:
            # Structural only, not FPE in the cryptographic sense
            return self._mask_with_random(data, pii_type, True, preserve_format)

        raise ValueError(f"Unsupported masking strategy: {strategy}")

    def _mask_with_asterisks(
        self,
        data: str,
        pii_type: PiiType,
        preserve_length: bool,
        preserve_format: bool
    ) -> str:
        if pii_type == PiiType.EMAIL:
            return self._mask_email_with_asterisks(data, preserve_format)

        elif pii_type == PiiType.PHONE:
            if preserve_format:
                return DIGIT_PATTERN.sub("*", data)
            return "*" * len(data)

        elif pii_type == PiiType.TC_KIMLIK_NO:
            if len(data) == 11:
                return data[:3] + "****" + data[7:]
            return "*" * len(data)

        elif pii_type == PiiType.CREDIT_CARD:
            # Separators are dropped, so the output is digits only
            cleaned = NON_DIGIT_PATTERN.sub("", data)
            if len(cleaned) >= 4:
                return "*" * (len(cleaned) - 4) + cleaned[-4:]
            return "*" * len(data)

        elif pii_type in NAME_TYPES:
            if len(data) <= 2:
                return "*" * len(data)
            return data[0] + "*" * (len(data) - 1)

        elif pii_type == PiiType.ADDRESS:
            return "*" * len(data)

        return "*" * (len(data) if preserve_length else FALLBACK_LENGTH)

    def _mask_with_random(
        self,
        data: str,
        pii_type: PiiType,
        preserve_length: bool,
        preserve_format: bool
    ) -> str:
        random_string = self.random_source.random_string
        random_numeric = self.random_source.random_numeric

        if pii_type == PiiType.EMAIL:
            return self._mask_email_with_random(data, preserve_format)

        elif pii_type == PiiType.PHONE:
            if preserve_format:
                return DIGIT_PATTERN.sub("X", data)
            return random_string(len(data))

        elif pii_type == PiiType.TC_KIMLIK_NO:
            if len(data) == 11:
                return data[:3] + random_numeric(4) + data[7:]
            return random_numeric(len(data))

        elif pii_type == PiiType.CREDIT_CARD:
            cleaned = NON_DIGIT_PATTERN.sub("", data)
            if len(cleaned) >= 4:
                return random_numeric(len(cleaned) - 4) + cleaned[-4:]
            return random_numeric(len(data))

        elif pii_type in NAME_TYPES or pii_type == PiiType.ADDRESS:
            return random_string(len(data))

        return random_string(len(data) if preserve_length else FALLBACK_LENGTH)

    def _mask_email_with_asterisks(self, email: str, preserve_format: bool) -> str:
        if not EMAIL_PATTERN.fullmatch(email):
            return "*" * len(email)

        local, domain = email.split("@")

        if not preserve_format:
            return "***@" + domain

        if len(local) > 2:
            masked_local = local[0] + "*" * (len(local) - 2) + local[-1]
        else:
            masked_local = "*" * len(local)
        return masked_local + "@" + domain

    def _mask_email_with_random(self, email: str, preserve_format: bool) -> str:
        random_string = self.random_source.random_string

        if not EMAIL_PATTERN.fullmatch(email):
            return random_string(len(email))

        local, domain = email.split("@")

        if preserve_format:
            return random_string(len(local)) + "@" + domain
        return random_string(FALLBACK_LENGTH) + "@" + domain

    def _mask_with_placeholder(self, pii_type: PiiType, replacement_value: Optional[str]) -> str:
        if replacement_value and replacement_value.strip():
            return replacement_value
        return f"[{pii_type.value}_MASKED]"

    def _mask_with_hash(self, data: str) -> str:
        """Lowercase hex digest of the UTF-8 bytes"""
        try:
            digest = hashlib.new(self.hash_algorithm)
        except ValueError:
            logger.error("hash_algorithm_unavailable", algorithm=self.hash_algorithm)
            return HASH_ERROR

        digest.update(data.encode("utf-8"))
        return digest.hexdigest()

    def _mask_partially(self, data: str) -> str:
        length = len(data)
        if length <= 2:
            return "*" * length

        visible = max(1, length // 4)
        return data[:visible] + "*" * (length - 2 * visible) + data[length - visible:]


def _flag(value: Optional[bool]) -> bool:
    """Unset option flags default to true"""
    return True if value is None else value

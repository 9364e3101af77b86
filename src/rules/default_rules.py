"""Default masking rules loaded into an empty catalog"""

from typing import List

from src.models.masking import MaskingRuleCreate, MaskingStrategy, PiiType


def load_default_rules() -> List[MaskingRuleCreate]:
    """Default rule set for the common PII types"""
    return [
        MaskingRuleCreate(
            pii_type=PiiType.EMAIL,
            strategy=MaskingStrategy.ASTERISK,
            description="Mask email addresses with asterisks while preserving domain",
            preserve_length=True,
            preserve_format=True
        ),
        MaskingRuleCreate(
            pii_type=PiiType.PHONE,
            strategy=MaskingStrategy.ASTERISK,
            description="Mask phone numbers with asterisks while preserving format",
            preserve_length=True,
            preserve_format=True
        ),
        MaskingRuleCreate(
            pii_type=PiiType.TC_KIMLIK_NO,
            strategy=MaskingStrategy.ASTERISK,
            description="Mask Turkish National ID, show first 3 and last 4 digits",
            preserve_length=True,
            preserve_format=True
        ),
        MaskingRuleCreate(
            pii_type=PiiType.CREDIT_CARD,
            strategy=MaskingStrategy.ASTERISK,
            description="Mask credit card numbers, show last 4 digits",
            preserve_length=True,
            preserve_format=True
        ),
        MaskingRuleCreate(
            pii_type=PiiType.FULL_NAME,
            strategy=MaskingStrategy.ASTERISK,
            description="Mask full names with asterisks, show first character",
            preserve_length=True,
            preserve_format=False
        ),
        MaskingRuleCreate(
            pii_type=PiiType.ADDRESS,
            strategy=MaskingStrategy.PLACEHOLDER,
            description="Replace addresses with placeholder",
            preserve_length=False,
            preserve_format=False,
            replacement_value="[ADDRESS_MASKED]"
        ),
        MaskingRuleCreate(
            pii_type=PiiType.DATE_OF_BIRTH,
            strategy=MaskingStrategy.PLACEHOLDER,
            description="Replace date of birth with placeholder",
            preserve_length=False,
            preserve_format=False,
            replacement_value="[DOB_MASKED]"
        ),
        MaskingRuleCreate(
            pii_type=PiiType.IP_ADDRESS,
            strategy=MaskingStrategy.HASH,
            description="Hash IP addresses for anonymization",
            preserve_length=False,
            preserve_format=False
        ),
    ]

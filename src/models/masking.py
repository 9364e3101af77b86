"""Data Masking Models"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


class PiiType(str, Enum):
    """Categories of Personally Identifiable Information"""
    EMAIL = "EMAIL"                      # john.doe@company.com
    PHONE = "PHONE"                      # +90 555 123 4567, (555) 123-4567
    TC_KIMLIK_NO = "TC_KIMLIK_NO"        # Turkish National ID, 12345678901
    CREDIT_CARD = "CREDIT_CARD"          # 4532 1234 5678 9012
    SSN = "SSN"                          # 123-45-6789
    ADDRESS = "ADDRESS"
    FULL_NAME = "FULL_NAME"
    FIRST_NAME = "FIRST_NAME"
    LAST_NAME = "LAST_NAME"
    DATE_OF_BIRTH = "DATE_OF_BIRTH"      # 1990-01-15, 15/01/1990
    IP_ADDRESS = "IP_ADDRESS"            # 192.168.1.1, 2001:db8::1
    BANK_ACCOUNT = "BANK_ACCOUNT"        # TR12 0006 4000 0011 2345 6789 01
    PASSPORT = "PASSPORT"                # A1234567
    DRIVERS_LICENSE = "DRIVERS_LICENSE"  # D123456789
    TEXT = "TEXT"                        # Generic text that may contain PII
    NUMERIC = "NUMERIC"                  # Numeric data that may be sensitive


class MaskingStrategy(str, Enum):
    """Available masking strategies"""
    ASTERISK = "ASTERISK"                    # john.doe@email.com -> j******e@email.com
    RANDOM = "RANDOM"                        # Random characters of the same shape
    PLACEHOLDER = "PLACEHOLDER"              # [EMAIL_MASKED]
    HASH = "HASH"                            # SHA-256 hex digest (one-way)
    NULLIFY = "NULLIFY"                      # No value
    PARTIAL = "PARTIAL"                      # 1234567890 -> 12******90
    FORMAT_PRESERVING = "FORMAT_PRESERVING"  # Random, length and skeleton kept


class MaskingRequest(BaseModel):
    """Request to mask a single value"""
    data: Optional[str] = Field(None, description="Value to mask")
    pii_type: PiiType = Field(..., description="PII category of the value")
    strategy: Optional[MaskingStrategy] = Field(
        None,
        description="Masking strategy; taken from the active rule when omitted"
    )
    custom_pattern: Optional[str] = None  # Reserved
    replacement_value: Optional[str] = Field(
        None,
        description="Literal output for PLACEHOLDER"
    )
    preserve_length: Optional[bool] = Field(
        None,
        description="Keep the output length equal to the input length (default true)"
    )
    preserve_format: Optional[bool] = Field(
        None,
        description="Keep structural characters such as @, spaces and dashes (default true)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "data": "john.doe@example.com",
                "pii_type": "EMAIL",
                "strategy": "ASTERISK",
                "preserve_format": True
            }
        }


class MaskingResponse(BaseModel):
    """Result of masking a single value"""
    original_data: Optional[str]
    masked_data: Optional[str] = None
    pii_type: str
    strategy: Optional[str]
    processed_at: datetime
    success: bool
    error_message: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "original_data": "john.doe@example.com",
                "masked_data": "j******e@example.com",
                "pii_type": "EMAIL",
                "strategy": "ASTERISK",
                "processed_at": "2024-01-15T10:30:00Z",
                "success": True
            }
        }


class BatchMaskingRequest(BaseModel):
    """Request to mask several values independently"""
    items: List[MaskingRequest] = Field(..., description="Values to mask")


class BatchMaskingResponse(BaseModel):
    """Result of a batch masking call"""
    job_id: str
    results: List[MaskingResponse]
    total_processed: int
    total_failed: int


class MaskingRuleCreate(BaseModel):
    """Writable fields of a masking rule"""
    pii_type: PiiType
    strategy: MaskingStrategy
    custom_pattern: Optional[str] = None
    replacement_value: Optional[str] = None
    preserve_length: bool = True
    preserve_format: bool = True
    is_active: bool = True
    description: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "pii_type": "EMAIL",
                "strategy": "ASTERISK",
                "preserve_length": True,
                "preserve_format": True,
                "is_active": True,
                "description": "Mask email addresses with asterisks while preserving domain"
            }
        }


class MaskingRule(MaskingRuleCreate):
    """Stored masking rule configuration"""
    id: int
    created_at: datetime
    updated_at: datetime

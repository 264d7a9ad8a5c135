"""
Shared entities between the detector and the generator
Plain data shapes, serializable with model_dump(mode="json")
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransactionStatus(str, Enum):
    """Payment attempt outcome"""
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    PENDING = "pending"
    CANCELED = "canceled"


class Processor(str, Enum):
    """Payment processor a transaction originated from"""
    STRIPE = "stripe"
    PAYPAL = "paypal"
    ADYEN = "adyen"

    @property
    def id_prefix(self) -> str:
        return _PROCESSOR_PREFIXES[self]

    @property
    def currency(self) -> str:
        return _PROCESSOR_CURRENCIES[self]


_PROCESSOR_PREFIXES = {
    Processor.STRIPE: "ch",
    Processor.PAYPAL: "pp",
    Processor.ADYEN: "ady",
}

_PROCESSOR_CURRENCIES = {
    Processor.STRIPE: "usd",
    Processor.PAYPAL: "usd",
    Processor.ADYEN: "eur",
}


class RiskLevel(str, Enum):
    """Ordinal severity of a detected pattern"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.HIGH: 3,
    RiskLevel.CRITICAL: 4,
}


class PatternType(str, Enum):
    """Detector tags, in declaration order"""
    CARD_TESTING = "card_testing"
    VELOCITY_FRAUD = "velocity_fraud"
    HIGH_RISK_GEOGRAPHY = "high_risk_geography"
    ROUND_NUMBER_FRAUD = "round_number_fraud"
    OFF_HOURS_FRAUD = "off_hours_fraud"
    RETRY_ATTACK = "retry_attack"
    HIGH_VALUE_INTERNATIONAL = "high_value_international"
    CRYPTOCURRENCY_FRAUD = "cryptocurrency_fraud"


class TransactionRecord(BaseModel):
    """
    Single payment attempt
    Amount in minor units (cents), created in Unix seconds
    """
    model_config = ConfigDict(frozen=True)

    id: str
    amount: int = Field(..., ge=0)
    currency: str
    status: TransactionStatus
    processor: Optional[Processor] = None
    created: int
    customer: Optional[str] = None
    description: Optional[str] = None
    payment_method: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)

    @field_validator("currency")
    @classmethod
    def _lowercase_currency(cls, value: str) -> str:
        return value.lower()

    @field_validator("processor", mode="before")
    @classmethod
    def _unknown_processor(cls, value: Any) -> Any:
        if value in ("", "unknown"):
            return None
        return value

    @field_validator("metadata", mode="before")
    @classmethod
    def _stringify_metadata(cls, value: Any) -> Dict[str, str]:
        # Processors send numbers and nulls; keep keys, drop nulls
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        return {str(k): str(v) for k, v in value.items() if v is not None}

    @property
    def country(self) -> Optional[str]:
        return self.metadata.get("country") or None

    @property
    def processor_name(self) -> str:
        return self.processor.value if self.processor else "unknown"


class FraudPattern(BaseModel):
    """One detected signal across a batch"""
    model_config = ConfigDict(frozen=True)

    type: PatternType
    description: str
    risk_level: RiskLevel
    indicators: List[str]
    affected_transactions: List[str]
    recommendation: str

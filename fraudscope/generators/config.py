"""
Generator configuration: shape (pydantic) and semantic checks
"""
import math
from datetime import datetime, timezone
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..constants import MAX_TRANSACTION_COUNT, MIN_TRANSACTION_COUNT, PERCENTAGE_TOLERANCE
from ..entities import Processor
from ..errors import (
    InvalidCountError,
    InvalidDateRangeError,
    InvalidFraudMixSumError,
    InvalidPercentageRangeError,
    InvalidProcessorSetError,
    InvalidStatusMixSumError,
)


def _seconds(value: datetime) -> float:
    # Naive datetimes are read as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _to_epoch(value: datetime, round_up: bool = False) -> int:
    seconds = _seconds(value)
    return math.ceil(seconds) if round_up else math.floor(seconds)


class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @property
    def start_ts(self) -> int:
        # First whole second not before start
        return _to_epoch(self.start, round_up=True)

    @property
    def end_ts(self) -> int:
        return _to_epoch(self.end)


class FraudMix(BaseModel):
    """Target percentage per category, legitimate included"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    card_testing: float = Field(0, alias="cardTesting")
    velocity_fraud: float = Field(0, alias="velocityFraud")
    high_risk_country: float = Field(0, alias="highRiskCountry")
    round_number: float = Field(0, alias="roundNumber")
    retry_attack: float = Field(0, alias="retryAttack")
    crypto_fraud: float = Field(0, alias="cryptoFraud")
    night_time: float = Field(0, alias="nightTime")
    high_value: float = Field(0, alias="highValue")
    legitimate: float = 0

    def fraud_shares(self) -> Dict[str, float]:
        """Fraud category percentages, in declaration order, legitimate excluded"""
        shares = self.model_dump()
        shares.pop("legitimate")
        return shares


class StatusDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    succeeded: float = 0
    failed: float = 0
    pending: float = 0
    canceled: float = 0


class GeneratorConfig(BaseModel):
    """
    Declarative generation request

    Accepts the camelCase wire keys (dateRange, fraudMix, statusDistribution,
    preserveCategorySignals) as well as the snake_case field names.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    count: int
    processors: Tuple[Processor, ...]
    date_range: DateRange = Field(..., alias="dateRange")
    fraud_mix: FraudMix = Field(..., alias="fraudMix")
    status_distribution: StatusDistribution = Field(..., alias="statusDistribution")
    # Keep builders' natural statuses and clustered timestamps
    preserve_category_signals: bool = Field(False, alias="preserveCategorySignals")


def _check_percentages(group: str, values: Dict[str, float]) -> None:
    for name, pct in values.items():
        if not math.isfinite(pct) or not 0 <= pct <= 100:
            raise InvalidPercentageRangeError(
                f"{group}.{name} must be between 0 and 100 (got {pct})", value=pct
            )


def validate_config(config: GeneratorConfig) -> None:
    """
    Semantic checks, in order: count, processors, percentage ranges,
    fraud mix sum, status sum, date range.

    Raises:
        GeneratorConfigError subclass naming the failed constraint
    """
    if not MIN_TRANSACTION_COUNT <= config.count <= MAX_TRANSACTION_COUNT:
        raise InvalidCountError(
            f"Transaction count must be between {MIN_TRANSACTION_COUNT} and "
            f"{MAX_TRANSACTION_COUNT:,} (got {config.count})",
            value=config.count,
        )

    if not config.processors:
        raise InvalidProcessorSetError("At least one processor must be selected", value=config.processors)

    fraud_mix = config.fraud_mix.model_dump(by_alias=True)
    status_mix = config.status_distribution.model_dump()
    _check_percentages("fraudMix", fraud_mix)
    _check_percentages("statusDistribution", status_mix)

    fraud_total = sum(fraud_mix.values())
    if abs(fraud_total - 100) > PERCENTAGE_TOLERANCE:
        raise InvalidFraudMixSumError(
            f"Fraud mix must sum to 100% (currently {fraud_total:g}%)", value=fraud_total
        )

    status_total = sum(status_mix.values())
    if abs(status_total - 100) > PERCENTAGE_TOLERANCE:
        raise InvalidStatusMixSumError(
            f"Status distribution must sum to 100% (currently {status_total:g}%)", value=status_total
        )

    date_range = config.date_range
    if _seconds(date_range.start) > _seconds(date_range.end):
        raise InvalidDateRangeError(
            f"Start date must be before end date (start={date_range.start.isoformat()}, "
            f"end={date_range.end.isoformat()})",
            value=(date_range.start, date_range.end),
        )
    if date_range.start_ts > date_range.end_ts:
        raise InvalidDateRangeError(
            f"Date range must contain a whole second (start={date_range.start.isoformat()}, "
            f"end={date_range.end.isoformat()})",
            value=(date_range.start, date_range.end),
        )

"""
fraudscope
Heuristic fraud pattern detection and synthetic payment transactions
"""

from .detectors import FraudPatternCatalog, detect
from .entities import (
    FraudPattern,
    PatternType,
    Processor,
    RiskLevel,
    TransactionRecord,
    TransactionStatus,
)
from .errors import (
    GeneratorConfigError,
    InvalidCountError,
    InvalidDateRangeError,
    InvalidFraudMixSumError,
    InvalidPercentageRangeError,
    InvalidProcessorSetError,
    InvalidStatusMixSumError,
)
from .generators import GeneratorConfig, SyntheticTransactionGenerator

__all__ = [
    "FraudPatternCatalog",
    "detect",
    "FraudPattern",
    "PatternType",
    "Processor",
    "RiskLevel",
    "TransactionRecord",
    "TransactionStatus",
    "GeneratorConfigError",
    "InvalidCountError",
    "InvalidDateRangeError",
    "InvalidFraudMixSumError",
    "InvalidPercentageRangeError",
    "InvalidProcessorSetError",
    "InvalidStatusMixSumError",
    "GeneratorConfig",
    "SyntheticTransactionGenerator",
]

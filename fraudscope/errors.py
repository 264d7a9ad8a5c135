"""
Generator configuration errors
All raised by SyntheticTransactionGenerator before any record is built
"""
from typing import Any


class GeneratorConfigError(ValueError):
    """Base class for rejected generator configurations"""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class InvalidCountError(GeneratorConfigError):
    """count outside the accepted range"""


class InvalidProcessorSetError(GeneratorConfigError):
    """No processor selected"""


class InvalidPercentageRangeError(GeneratorConfigError):
    """A single percentage outside [0, 100]"""


class InvalidFraudMixSumError(GeneratorConfigError):
    """fraudMix does not sum to 100"""


class InvalidStatusMixSumError(GeneratorConfigError):
    """statusDistribution does not sum to 100"""


class InvalidDateRangeError(GeneratorConfigError):
    """dateRange start after end"""

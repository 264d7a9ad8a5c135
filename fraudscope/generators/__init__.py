"""
Synthetic transaction generators for fraudscope
"""
from .base import BaseGenerator, FraudCategory
from .config import DateRange, FraudMix, GeneratorConfig, StatusDistribution, validate_config
from .transactions import SyntheticTransactionGenerator

__all__ = [
    'BaseGenerator',
    'FraudCategory',
    'DateRange',
    'FraudMix',
    'GeneratorConfig',
    'StatusDistribution',
    'validate_config',
    'SyntheticTransactionGenerator',
]

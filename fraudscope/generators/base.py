"""
Base generator with category-driven record building
Categories are mixed across processors, then normalized and shuffled
"""
import random
import string
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from ..entities import Processor, TransactionRecord


class FraudCategory(Enum):
    """Synthetic categories: (fraudMix field, id tag)"""
    CARD_TESTING = ("card_testing", "ct")
    VELOCITY_FRAUD = ("velocity_fraud", "vel")
    HIGH_RISK_COUNTRY = ("high_risk_country", "hrisk")
    ROUND_NUMBER = ("round_number", "round")
    RETRY_ATTACK = ("retry_attack", "retry")
    CRYPTO_FRAUD = ("crypto_fraud", "crypto")
    NIGHT_TIME = ("night_time", "night")
    HIGH_VALUE = ("high_value", "hval")
    LEGITIMATE = ("legitimate", "legit")

    def __init__(self, field_name: str, tag: str):
        self.field_name = field_name
        self.tag = tag

    def is_fraud(self) -> bool:
        return self is not FraudCategory.LEGITIMATE

    @classmethod
    def fraud_categories(cls) -> List['FraudCategory']:
        """Fraud categories in allocation order"""
        return [category for category in cls if category.is_fraud()]


class BaseGenerator(ABC):
    """
    Base generator holding its own random source

    Pass a seed (or a ready random.Random) for reproducible batches;
    generators never share RNG state.
    """

    ID_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random(seed)
        self._issued_ids: set = set()

    @abstractmethod
    def _generate_category_records(self, category: FraudCategory, processor: Processor,
                                   count: int, anchor: int) -> List[Dict[str, Any]]:
        """
        Build `count` raw records for one category

        anchor: Unix seconds the category's natural timestamps cluster before

        Returns: List of record dicts (status/created may be overridden later)
        """
        pass

    @staticmethod
    def split_count(count: int, parts: int) -> List[int]:
        """Floor split; the first `count % parts` shares get one extra"""
        base, remainder = divmod(count, parts)
        return [base + 1 if i < remainder else base for i in range(parts)]

    def _finalize(self, records: List[Dict[str, Any]]) -> List[TransactionRecord]:
        """Interleave processors and categories, then freeze"""
        self.rng.shuffle(records)
        return [TransactionRecord(**record) for record in records]

    def _new_id(self, processor: Processor, category: FraudCategory) -> str:
        """Processor prefix + category tag + random suffix, unique per batch"""
        while True:
            suffix = ''.join(self.rng.choices(self.ID_SUFFIX_ALPHABET, k=13))
            txn_id = f"{processor.id_prefix}_{category.tag}_{suffix}"
            if txn_id not in self._issued_ids:
                self._issued_ids.add(txn_id)
                return txn_id

    def _random_ip(self) -> str:
        """Generate random IP address"""
        return '.'.join(str(self.rng.randint(0, 255)) for _ in range(4))

    def _risk_score(self, low: int, high: int) -> str:
        """Stringified integer in [low, high]"""
        return str(self.rng.randint(low, high))

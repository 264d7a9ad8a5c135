"""
Synthetic payment transaction generator - configurable fraud mix
"""
import logging
import math
import random
from typing import Any, Dict, List, Optional

from ..entities import Processor, TransactionRecord, TransactionStatus
from .base import BaseGenerator, FraudCategory
from .config import GeneratorConfig, validate_config

logger = logging.getLogger(__name__)


class SyntheticTransactionGenerator(BaseGenerator):
    """
    Generates a batch matching a GeneratorConfig

    Strategy:
    1. Split count across processors
    2. Per processor, allocate fraud categories and legitimate traffic
    3. Override statuses and timestamps across the whole batch
       (skipped when preserve_category_signals is set)
    4. Shuffle
    """

    HIGH_RISK_COUNTRIES = ['NG', 'GH', 'ID', 'PK', 'BD', 'VN']
    NIGHT_COUNTRIES = ['RU', 'PK', 'CN']
    HIGH_VALUE_COUNTRIES = ['RO', 'NG', 'CN']
    LEGITIMATE_COUNTRIES = ['US', 'CA', 'GB', 'AU', 'DE', 'FR']
    ROUND_AMOUNTS = [500000, 1000000, 250000, 750000, 2000000]
    LEGITIMATE_AMOUNTS = [1299, 4599, 789, 2150, 3500, 899, 1650, 5200]  # whole dollars
    LEGITIMATE_DESCRIPTIONS = ['Online purchase', 'Subscription', 'Digital download', 'Service fee']

    def __init__(self, config: GeneratorConfig, seed: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        validate_config(config)
        super().__init__(seed=seed, rng=rng)
        self.config = config

    def generate(self) -> List[TransactionRecord]:
        """Produce one batch; aggregate shape is fixed, field values are random"""
        self._issued_ids = set()
        anchor = self.config.date_range.end_ts

        records: List[Dict[str, Any]] = []
        shares = self.split_count(self.config.count, len(self.config.processors))
        for processor, total in zip(self.config.processors, shares):
            logger.debug(f"{processor.value}: {total} transactions")
            records.extend(self._generate_for_processor(processor, total, anchor))

        if self.config.preserve_category_signals:
            self._clamp_to_date_range(records)
        else:
            self._apply_status_distribution(records)
            self._apply_date_range(records)

        batch = self._finalize(records)
        fraud = sum(1 for t in batch if t.metadata.get('fraud_indicators') != 'none')
        logger.info(f"Generated {len(batch)} transactions ({fraud} fraud) "
                    f"across {len(self.config.processors)} processor(s)")
        return batch

    def _generate_for_processor(self, processor: Processor, total: int, anchor: int) -> List[Dict[str, Any]]:
        fraud_mix = self.config.fraud_mix
        fraud_count = math.floor(total * (100 - fraud_mix.legitimate) / 100)
        legitimate_count = total - fraud_count

        # Normalize fraud categories against their own sum, not 100
        shares = fraud_mix.fraud_shares()
        total_fraud_pct = sum(shares.values())

        records = []
        for category in FraudCategory.fraud_categories():
            pct = shares[category.field_name]
            if total_fraud_pct <= 0 or pct <= 0:
                continue
            count = math.floor(fraud_count * pct / total_fraud_pct)
            if count > 0:
                logger.debug(f"{processor.value}/{category.field_name}: {count}")
                records.extend(self._generate_category_records(category, processor, count, anchor))

        if legitimate_count > 0:
            records.extend(
                self._generate_category_records(FraudCategory.LEGITIMATE, processor, legitimate_count, anchor)
            )

        return records

    def _generate_category_records(self, category: FraudCategory, processor: Processor,
                                   count: int, anchor: int) -> List[Dict[str, Any]]:
        if category == FraudCategory.CARD_TESTING:
            return self._card_testing_records(processor, count, anchor)

        elif category == FraudCategory.VELOCITY_FRAUD:
            return self._velocity_records(processor, count, anchor)

        elif category == FraudCategory.HIGH_RISK_COUNTRY:
            return self._high_risk_country_records(processor, count, anchor)

        elif category == FraudCategory.ROUND_NUMBER:
            return self._round_number_records(processor, count, anchor)

        elif category == FraudCategory.RETRY_ATTACK:
            return self._retry_attack_records(processor, count, anchor)

        elif category == FraudCategory.CRYPTO_FRAUD:
            return self._crypto_records(processor, count, anchor)

        elif category == FraudCategory.NIGHT_TIME:
            return self._night_time_records(processor, count, anchor)

        elif category == FraudCategory.HIGH_VALUE:
            return self._high_value_records(processor, count, anchor)

        else:
            return self._legitimate_records(processor, count, anchor)

    # ========================================================================
    # Fraud Categories
    # ========================================================================

    def _card_testing_records(self, processor: Processor, count: int, anchor: int) -> List[Dict[str, Any]]:
        """Card testing: sub-$4 failed probes across three customers"""
        return [
            self._record(
                processor, FraudCategory.CARD_TESTING,
                amount=self.rng.randint(50, 349),  # $0.50-$3.49
                status=TransactionStatus.FAILED,
                created=anchor - self.rng.randrange(3600),
                customer=f"cus_test_{i % 3}",
                description='Card validation',
                payment_method='card_test',
                metadata={
                    'country': 'US',
                    'risk_score': self._risk_score(85, 99),
                    'fraud_indicators': 'card_testing,rapid_succession,small_amounts',
                },
            )
            for i in range(count)
        ]

    def _velocity_records(self, processor: Processor, count: int, anchor: int) -> List[Dict[str, Any]]:
        """Velocity: bursts of digital goods purchases from two customers"""
        return [
            self._record(
                processor, FraudCategory.VELOCITY_FRAUD,
                amount=self.rng.randint(1000, 5999),  # $10-$60
                status=TransactionStatus.SUCCEEDED,
                created=anchor - self.rng.randrange(1800),
                customer=f"cus_velocity_{i % 2}",
                description='Digital goods purchase',
                payment_method='card_velocity',
                metadata={
                    'country': 'US',
                    'risk_score': self._risk_score(80, 94),
                    'fraud_indicators': 'velocity_fraud,same_merchant,rapid_succession',
                    'merchant_category': 'gaming',
                },
            )
            for i in range(count)
        ]

    def _high_risk_country_records(self, processor: Processor, count: int, anchor: int) -> List[Dict[str, Any]]:
        return [
            self._record(
                processor, FraudCategory.HIGH_RISK_COUNTRY,
                amount=self.rng.randint(50000, 149999),  # $500-$1500
                status=TransactionStatus.SUCCEEDED,
                created=anchor - self.rng.randrange(7200),
                customer=f"cus_highrisk_{i}",
                description='International purchase',
                payment_method='card_international',
                metadata={
                    'country': self.HIGH_RISK_COUNTRIES[i % len(self.HIGH_RISK_COUNTRIES)],
                    'risk_score': self._risk_score(85, 94),
                    'fraud_indicators': 'high_risk_country,international_card,new_customer',
                },
            )
            for i in range(count)
        ]

    def _round_number_records(self, processor: Processor, count: int, anchor: int) -> List[Dict[str, Any]]:
        return [
            self._record(
                processor, FraudCategory.ROUND_NUMBER,
                amount=self.ROUND_AMOUNTS[i % len(self.ROUND_AMOUNTS)],
                status=TransactionStatus.SUCCEEDED,
                created=anchor - self.rng.randrange(10800),
                customer=f"cus_round_{i}",
                description='Business transaction',
                payment_method='card_business',
                metadata={
                    'country': 'US',
                    'risk_score': '65',
                    'fraud_indicators': 'round_amount,automated_pattern',
                },
            )
            for i in range(count)
        ]

    def _retry_attack_records(self, processor: Processor, count: int, anchor: int) -> List[Dict[str, Any]]:
        """Retry attack: numbered attempts, every third one succeeds"""
        return [
            self._record(
                processor, FraudCategory.RETRY_ATTACK,
                amount=25000,  # $250
                status=TransactionStatus.SUCCEEDED if i % 3 == 0 else TransactionStatus.FAILED,
                created=anchor - self.rng.randrange(1800),
                customer=f"cus_retry_{i % 2}",
                description='Subscription renewal',
                payment_method=f"card_attempt_{i}",
                metadata={
                    'country': 'US',
                    'risk_score': '80',
                    'fraud_indicators': 'multiple_retries,card_testing,velocity_fraud',
                    'attempt_number': str(i + 1),
                },
            )
            for i in range(count)
        ]

    def _crypto_records(self, processor: Processor, count: int, anchor: int) -> List[Dict[str, Any]]:
        """Crypto: exchange purchases, half without customer, a third over VPN"""
        return [
            self._record(
                processor, FraudCategory.CRYPTO_FRAUD,
                amount=self.rng.randint(300000, 799999),  # $3k-$8k
                status=TransactionStatus.SUCCEEDED,
                created=anchor - self.rng.randrange(3600),
                customer=f"cus_crypto_{i}" if i % 2 == 0 else None,
                description='Cryptocurrency exchange',
                payment_method='card_crypto',
                metadata={
                    'country': 'VPN' if i % 3 == 0 else 'US',
                    'merchant_category': 'cryptocurrency',
                    'risk_score': self._risk_score(85, 94),
                    'fraud_indicators': 'crypto_exchange,high_risk_merchant,money_laundering_risk',
                },
            )
            for i in range(count)
        ]

    def _night_time_records(self, processor: Processor, count: int, anchor: int) -> List[Dict[str, Any]]:
        """Night time: from the last 3 AM UTC before anchor, five minutes apart"""
        night_start = anchor - (anchor % 86400) + 3 * 3600
        if night_start > anchor:
            night_start -= 86400
        return [
            self._record(
                processor, FraudCategory.NIGHT_TIME,
                amount=self.rng.randint(10000, 49999),  # $100-$500
                status=TransactionStatus.SUCCEEDED,
                created=night_start + i * 300,
                customer=f"cus_night_{i}",
                description='Late night purchase',
                payment_method='card_stolen',
                metadata={
                    'country': self.NIGHT_COUNTRIES[i % len(self.NIGHT_COUNTRIES)],
                    'risk_score': self._risk_score(85, 94),
                    'fraud_indicators': 'off_hours,high_risk_country,stolen_card_pattern',
                    'transaction_hour': '03',
                },
            )
            for i in range(count)
        ]

    def _high_value_records(self, processor: Processor, count: int, anchor: int) -> List[Dict[str, Any]]:
        return [
            self._record(
                processor, FraudCategory.HIGH_VALUE,
                amount=self.rng.randint(500000, 1499999),  # $5k-$15k
                status=TransactionStatus.SUCCEEDED,
                created=anchor - self.rng.randrange(7200),
                customer=f"cus_highval_{i}",
                description='High-value purchase',
                payment_method='card_premium',
                metadata={
                    'country': self.HIGH_VALUE_COUNTRIES[i % len(self.HIGH_VALUE_COUNTRIES)],
                    'risk_score': self._risk_score(75, 89),
                    'fraud_indicators': 'high_value,international,new_customer',
                },
            )
            for i in range(count)
        ]

    # ========================================================================
    # Legitimate Traffic
    # ========================================================================

    def _legitimate_records(self, processor: Processor, count: int, anchor: int) -> List[Dict[str, Any]]:
        """Low-risk profile: common countries, familiar amounts, spread over a week"""
        return [
            self._record(
                processor, FraudCategory.LEGITIMATE,
                amount=self.LEGITIMATE_AMOUNTS[i % len(self.LEGITIMATE_AMOUNTS)] * 100,
                status=TransactionStatus.SUCCEEDED,
                created=anchor - self.rng.randrange(86400 * 7),
                customer=f"cus_legit_{i}",
                description=self.LEGITIMATE_DESCRIPTIONS[i % len(self.LEGITIMATE_DESCRIPTIONS)],
                payment_method='card_verified',
                metadata={
                    'country': self.LEGITIMATE_COUNTRIES[i % len(self.LEGITIMATE_COUNTRIES)],
                    'risk_score': self._risk_score(10, 39),
                    'fraud_indicators': 'none',
                },
            )
            for i in range(count)
        ]

    # ========================================================================
    # Batch Normalization
    # ========================================================================

    def _apply_status_distribution(self, records: List[Dict[str, Any]]) -> None:
        """Replace category statuses with a shuffled pool matching statusDistribution"""
        dist = self.config.status_distribution.model_dump()
        total_pct = sum(dist.values())
        n = len(records)

        statuses: List[TransactionStatus] = []
        for name, pct in dist.items():
            statuses.extend([TransactionStatus(name)] * math.floor(n * pct / total_pct))
        statuses.extend([TransactionStatus.SUCCEEDED] * (n - len(statuses)))

        self.rng.shuffle(statuses)
        for record, status in zip(records, statuses):
            record['status'] = status

    def _apply_date_range(self, records: List[Dict[str, Any]]) -> None:
        start, end = self.config.date_range.start_ts, self.config.date_range.end_ts
        for record in records:
            record['created'] = self.rng.randint(start, end)

    def _clamp_to_date_range(self, records: List[Dict[str, Any]]) -> None:
        start, end = self.config.date_range.start_ts, self.config.date_range.end_ts
        for record in records:
            record['created'] = min(max(record['created'], start), end)

    # ========================================================================
    # Helper Methods
    # ========================================================================

    def _record(self, processor: Processor, category: FraudCategory, *, amount: int,
                status: TransactionStatus, created: int, customer: Optional[str],
                description: str, payment_method: str, metadata: Dict[str, str]) -> Dict[str, Any]:
        """Common record fields; every record carries an ip_address"""
        return {
            'id': self._new_id(processor, category),
            'amount': amount,
            'currency': processor.currency,
            'status': status,
            'processor': processor,
            'created': created,
            'customer': customer,
            'description': description,
            'payment_method': payment_method,
            'metadata': {**metadata, 'ip_address': self._random_ip()},
        }

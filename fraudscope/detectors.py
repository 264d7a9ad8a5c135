"""
Fraud Pattern Detection
Eight heuristic detectors run independently over one transaction batch
Used by both:
- Real batches assembled from processor sources
- Synthetic batches from SyntheticTransactionGenerator
"""
import logging
import time
from datetime import datetime, tzinfo
from typing import Callable, Dict, List, Optional, Sequence

from .constants import (
    CARD_TESTING_MAX_AMOUNT,
    CARD_TESTING_MIN_COUNT,
    CARD_TESTING_WINDOW_SEC,
    COMMON_COUNTRIES,
    CRYPTO_ANONYMOUS_COUNTRY,
    CRYPTO_CRITICAL_TOTAL,
    CRYPTO_KEYWORDS,
    CRYPTO_MERCHANT_CATEGORY,
    CRYPTO_MIN_TOTAL,
    HIGH_RISK_COUNTRIES,
    HIGH_RISK_GEOGRAPHY_MIN_COUNT,
    HIGH_VALUE_INTL_MIN_COUNT,
    HIGH_VALUE_MIN_AMOUNT,
    OFF_HOURS_COUNTRIES,
    OFF_HOURS_END,
    OFF_HOURS_MIN_COUNT,
    OFF_HOURS_START,
    RETRY_MIN_FAILURES,
    ROUND_AMOUNT_RULES,
    ROUND_NUMBER_MIN_COUNT,
    VELOCITY_MIN_COUNT,
    VELOCITY_WINDOW_SEC,
)
from .entities import (
    FraudPattern,
    PatternType,
    RiskLevel,
    TransactionRecord,
    TransactionStatus,
)

logger = logging.getLogger(__name__)

Detector = Callable[[Sequence[TransactionRecord]], Optional[FraudPattern]]


def format_dollars(amount: int) -> str:
    """Minor units -> '$1,234.56'"""
    return f"${amount / 100:,.2f}"


def group_by_customer(transactions: Sequence[TransactionRecord]) -> Dict[str, List[TransactionRecord]]:
    """Group by customer in first-seen order; records without customer are skipped"""
    groups: Dict[str, List[TransactionRecord]] = {}
    for txn in transactions:
        if txn.customer:
            groups.setdefault(txn.customer, []).append(txn)
    return groups


def distinct_countries(transactions: Sequence[TransactionRecord]) -> List[str]:
    countries: List[str] = []
    for txn in transactions:
        if txn.country and txn.country not in countries:
            countries.append(txn.country)
    return countries


def is_round_amount(amount: int) -> bool:
    return any(amount % divisor == 0 and amount >= minimum for divisor, minimum in ROUND_AMOUNT_RULES)


def is_crypto_related(txn: TransactionRecord) -> bool:
    if txn.metadata.get("merchant_category") == CRYPTO_MERCHANT_CATEGORY:
        return True
    description = (txn.description or "").lower()
    return any(keyword in description for keyword in CRYPTO_KEYWORDS)


class FraudPatternCatalog:
    """
    Fixed battery of pattern detectors

    Each detector is a plain callable (batch) -> Optional[FraudPattern] and
    yields at most one pattern. detect() never mutates its input and returns
    patterns ordered by severity, ties in declaration order.

    Args:
        clock: returns "now" in Unix seconds, used by the velocity window
        tz: timezone for hour-of-day checks (None = host local time)
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None, tz: Optional[tzinfo] = None):
        self.clock = clock or time.time
        self.tz = tz
        self.detectors: List[Detector] = [
            self.detect_card_testing,
            self.detect_velocity_fraud,
            self.detect_high_risk_geography,
            self.detect_round_number_fraud,
            self.detect_off_hours_transactions,
            self.detect_retry_attacks,
            self.detect_high_value_international,
            self.detect_cryptocurrency_fraud,
        ]

    def detect(self, transactions: Sequence[TransactionRecord]) -> List[FraudPattern]:
        """Run every detector and rank the patterns found"""
        patterns = []
        for detector in self.detectors:
            pattern = detector(transactions)
            if pattern:
                logger.debug(f"{pattern.type.value}: {len(pattern.affected_transactions)} transactions")
                patterns.append(pattern)

        # sort() is stable, so equal severities keep declaration order
        patterns.sort(key=lambda p: p.risk_level.severity, reverse=True)
        logger.info(f"Detected {len(patterns)} fraud pattern(s) in {len(transactions)} transactions")
        return patterns

    # ========================================================================
    # Grouped detectors
    # ========================================================================

    def detect_card_testing(self, transactions: Sequence[TransactionRecord]) -> Optional[FraudPattern]:
        """Multiple small failed transactions from one customer within an hour"""
        small_failed = [
            t for t in transactions
            if t.status == TransactionStatus.FAILED and t.amount < CARD_TESTING_MAX_AMOUNT
        ]

        for customer, txns in group_by_customer(small_failed).items():
            if len(txns) < CARD_TESTING_MIN_COUNT:
                continue

            ordered = sorted(txns, key=lambda t: t.created)
            time_span = ordered[-1].created - ordered[0].created
            if time_span > CARD_TESTING_WINDOW_SEC:
                continue

            return FraudPattern(
                type=PatternType.CARD_TESTING,
                description=(
                    f"Card testing detected: {len(ordered)} small failed transactions "
                    f"in {round(time_span / 60)} minutes"
                ),
                risk_level=RiskLevel.CRITICAL,
                indicators=[
                    'Multiple small-amount failures',
                    'Rapid succession of attempts',
                    'Same customer account',
                    'Pattern consistent with card validation',
                ],
                affected_transactions=[t.id for t in ordered],
                recommendation=(
                    'Block customer immediately and review all associated payment methods. '
                    'Implement rate limiting for failed transactions.'
                ),
            )

        return None

    def detect_velocity_fraud(self, transactions: Sequence[TransactionRecord]) -> Optional[FraudPattern]:
        """Too many transactions from one customer in the last 30 minutes"""
        cutoff = self.clock() - VELOCITY_WINDOW_SEC
        recent = [t for t in transactions if t.created > cutoff]

        for customer, txns in group_by_customer(recent).items():
            if len(txns) < VELOCITY_MIN_COUNT:
                continue

            return FraudPattern(
                type=PatternType.VELOCITY_FRAUD,
                description=(
                    f"Velocity fraud detected: {len(txns)} transactions in 30 minutes "
                    f"from customer {customer}"
                ),
                risk_level=RiskLevel.HIGH,
                indicators=[
                    'High transaction frequency',
                    'Short time window',
                    'Same customer account',
                    'Automated behavior pattern',
                ],
                affected_transactions=[t.id for t in txns],
                recommendation='Apply velocity limits and require additional authentication for this customer.',
            )

        return None

    def detect_retry_attacks(self, transactions: Sequence[TransactionRecord]) -> Optional[FraudPattern]:
        """Card cracking: five or more failures, then a success"""
        attempts = [t for t in transactions if t.customer and t.metadata.get("attempt_number")]

        for customer, txns in group_by_customer(attempts).items():
            ordered = sorted(txns, key=lambda t: t.created)
            failed = [t for t in ordered if t.status == TransactionStatus.FAILED]
            succeeded = [t for t in ordered if t.status == TransactionStatus.SUCCEEDED]

            if len(failed) < RETRY_MIN_FAILURES or not succeeded:
                continue
            if succeeded[0].created <= failed[-1].created:
                continue

            return FraudPattern(
                type=PatternType.RETRY_ATTACK,
                description=(
                    f"Card cracking detected: {len(failed)} failed attempts "
                    f"followed by successful transaction"
                ),
                risk_level=RiskLevel.CRITICAL,
                indicators=[
                    'Multiple sequential failures',
                    'Successful transaction after failures',
                    'Card number enumeration pattern',
                    'Brute force attack signature',
                ],
                affected_transactions=[t.id for t in ordered],
                recommendation=(
                    'Block customer and payment method immediately. Report to card issuer. '
                    'Implement stronger retry limitations.'
                ),
            )

        return None

    # ========================================================================
    # Filter detectors
    # ========================================================================

    def detect_high_risk_geography(self, transactions: Sequence[TransactionRecord]) -> Optional[FraudPattern]:
        matched = [t for t in transactions if t.country in HIGH_RISK_COUNTRIES]
        if len(matched) < HIGH_RISK_GEOGRAPHY_MIN_COUNT:
            return None

        total = sum(t.amount for t in matched)
        return FraudPattern(
            type=PatternType.HIGH_RISK_GEOGRAPHY,
            description=(
                f"{len(matched)} transactions from high-risk countries "
                f"({', '.join(distinct_countries(matched))}) totaling {format_dollars(total)}"
            ),
            risk_level=RiskLevel.HIGH,
            indicators=[
                'Transactions from high-risk countries',
                'Known fraud hotspots',
                'Geographic risk concentration',
                'Potential money laundering',
            ],
            affected_transactions=[t.id for t in matched],
            recommendation=(
                'Require enhanced verification for transactions from these countries. '
                'Consider manual review for amounts over $1000.'
            ),
        )

    def detect_round_number_fraud(self, transactions: Sequence[TransactionRecord]) -> Optional[FraudPattern]:
        """Suspiciously round amounts, often automated"""
        matched = [t for t in transactions if is_round_amount(t.amount)]
        if len(matched) < ROUND_NUMBER_MIN_COUNT:
            return None

        total = sum(t.amount for t in matched)
        return FraudPattern(
            type=PatternType.ROUND_NUMBER_FRAUD,
            description=(
                f"{len(matched)} transactions with suspiciously round amounts "
                f"totaling {format_dollars(total)}"
            ),
            risk_level=RiskLevel.MEDIUM,
            indicators=[
                'Perfectly round transaction amounts',
                'Automated payment patterns',
                'Potential bot activity',
                'Unusual precision in amounts',
            ],
            affected_transactions=[t.id for t in matched],
            recommendation=(
                'Review for automated fraud patterns. '
                'Consider adding transaction amount randomization detection.'
            ),
        )

    def detect_off_hours_transactions(self, transactions: Sequence[TransactionRecord]) -> Optional[FraudPattern]:
        """Transactions between 11 PM and 5 AM from high-risk locations"""
        matched = [
            t for t in transactions
            if self._is_off_hours(t.created) and t.country in OFF_HOURS_COUNTRIES
        ]
        if len(matched) < OFF_HOURS_MIN_COUNT:
            return None

        total = sum(t.amount for t in matched)
        return FraudPattern(
            type=PatternType.OFF_HOURS_FRAUD,
            description=(
                f"{len(matched)} off-hours transactions from high-risk locations "
                f"totaling {format_dollars(total)}"
            ),
            risk_level=RiskLevel.HIGH,
            indicators=[
                'Transactions during unusual hours',
                'High-risk geographic locations',
                'Pattern consistent with stolen cards',
                'Time zone mismatches',
            ],
            affected_transactions=[t.id for t in matched],
            recommendation=(
                'Flag for manual review. '
                'Consider time-based transaction limits for high-risk countries.'
            ),
        )

    def detect_high_value_international(self, transactions: Sequence[TransactionRecord]) -> Optional[FraudPattern]:
        matched = [
            t for t in transactions
            if t.amount >= HIGH_VALUE_MIN_AMOUNT and t.country and t.country not in COMMON_COUNTRIES
        ]
        if len(matched) < HIGH_VALUE_INTL_MIN_COUNT:
            return None

        total = sum(t.amount for t in matched)
        return FraudPattern(
            type=PatternType.HIGH_VALUE_INTERNATIONAL,
            description=(
                f"{len(matched)} high-value international transactions from "
                f"{', '.join(distinct_countries(matched))} totaling {format_dollars(total)}"
            ),
            risk_level=RiskLevel.HIGH,
            indicators=[
                'High transaction amounts',
                'International origins',
                'Uncommon geographic patterns',
                'Potential money laundering',
            ],
            affected_transactions=[t.id for t in matched],
            recommendation=(
                'Require enhanced due diligence for high-value international transactions. '
                'Consider manual approval process.'
            ),
        )

    def detect_cryptocurrency_fraud(self, transactions: Sequence[TransactionRecord]) -> Optional[FraudPattern]:
        """Crypto exchange activity that is large or anonymous"""
        matched = [t for t in transactions if is_crypto_related(t)]
        if not matched:
            return None

        total = sum(t.amount for t in matched)
        anonymous = [t for t in matched if not t.customer or t.country == CRYPTO_ANONYMOUS_COUNTRY]
        if total < CRYPTO_MIN_TOTAL and not anonymous:
            return None

        suffix = ' (includes anonymous transactions)' if anonymous else ''
        return FraudPattern(
            type=PatternType.CRYPTOCURRENCY_FRAUD,
            description=(
                f"{len(matched)} cryptocurrency-related transactions "
                f"totaling {format_dollars(total)}{suffix}"
            ),
            risk_level=RiskLevel.CRITICAL if total >= CRYPTO_CRITICAL_TOTAL else RiskLevel.HIGH,
            indicators=[
                'Cryptocurrency exchange transactions',
                'Anonymous/VPN usage' if anonymous else 'High transaction values',
                'Money laundering risk',
                'Regulatory compliance concerns',
            ],
            affected_transactions=[t.id for t in matched],
            recommendation=(
                'Enhanced KYC/AML screening required. Consider transaction limits for crypto exchanges. '
                'Monitor for suspicious patterns.'
            ),
        )

    # ========================================================================
    # Helper Methods
    # ========================================================================

    def _is_off_hours(self, created: int) -> bool:
        try:
            hour = datetime.fromtimestamp(created, tz=self.tz).hour
        except (OverflowError, OSError, ValueError):
            # Timestamp outside the platform's range: not off-hours
            return False
        return hour >= OFF_HOURS_START or hour <= OFF_HOURS_END


def detect(transactions: Sequence[TransactionRecord]) -> List[FraudPattern]:
    """Detect with wall-clock time and host-local hours"""
    return FraudPatternCatalog().detect(transactions)

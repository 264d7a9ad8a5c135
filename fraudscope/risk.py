"""
Per-transaction risk helpers based on metadata.risk_score
"""
from .constants import RISK_SCORE_CRITICAL, RISK_SCORE_HIGH, RISK_SCORE_MEDIUM
from .entities import RiskLevel, TransactionRecord


def risk_score(transaction: TransactionRecord) -> int:
    """Parsed risk score, 0 when absent or not an integer"""
    raw = transaction.metadata.get("risk_score", "0").strip()
    try:
        return int(raw)
    except ValueError:
        return 0


def risk_level(score: int) -> RiskLevel:
    if score >= RISK_SCORE_CRITICAL:
        return RiskLevel.CRITICAL
    if score >= RISK_SCORE_HIGH:
        return RiskLevel.HIGH
    if score >= RISK_SCORE_MEDIUM:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW

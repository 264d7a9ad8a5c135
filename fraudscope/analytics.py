"""
Batch roll-ups for dashboards
Status / processor / day aggregation over a transaction batch, via pandas
"""
import math
from typing import List, Sequence

import pandas as pd
from pydantic import BaseModel

from .entities import FraudPattern, TransactionRecord


class StatusShare(BaseModel):
    status: str
    count: int
    percentage: int


class ProcessorBreakdown(BaseModel):
    processor: str
    count: int
    volume: int


class DailyVolume(BaseModel):
    date: str  # YYYY-MM-DD, UTC
    count: int
    volume: int


class FraudSummary(BaseModel):
    pattern_type: str
    count: int
    risk_level: str


class OverviewStats(BaseModel):
    total: int
    volume: int
    avg_amount: float
    fraud_rate: float  # percent of transactions hit by any pattern


def to_dataframe(transactions: Sequence[TransactionRecord]) -> pd.DataFrame:
    """One row per transaction; metadata stays a dict column"""
    columns = list(TransactionRecord.model_fields)
    rows = [t.model_dump(mode="json") for t in transactions]
    df = pd.DataFrame(rows, columns=columns)
    df["processor"] = df["processor"].fillna("unknown")
    return df


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def status_distribution(transactions: Sequence[TransactionRecord]) -> List[StatusShare]:
    """Count and whole-number percentage per status, in first-seen order"""
    df = to_dataframe(transactions)
    total = len(df) or 1
    counts = df.groupby("status", sort=False).size()
    return [
        StatusShare(status=status, count=int(count), percentage=_round_half_up(count / total * 100))
        for status, count in counts.items()
    ]


def processor_breakdown(transactions: Sequence[TransactionRecord]) -> List[ProcessorBreakdown]:
    df = to_dataframe(transactions)
    grouped = df.groupby("processor", sort=False)["amount"].agg(["count", "sum"])
    return [
        ProcessorBreakdown(processor=processor, count=int(row["count"]), volume=int(row["sum"]))
        for processor, row in grouped.iterrows()
    ]


def volume_by_day(transactions: Sequence[TransactionRecord]) -> List[DailyVolume]:
    """Daily count and volume, sorted by date"""
    df = to_dataframe(transactions)
    if df.empty:
        return []

    df["date"] = pd.to_datetime(df["created"], unit="s", utc=True).dt.strftime("%Y-%m-%d")
    grouped = df.groupby("date")["amount"].agg(["count", "sum"]).sort_index()
    return [
        DailyVolume(date=date, count=int(row["count"]), volume=int(row["sum"]))
        for date, row in grouped.iterrows()
    ]


def fraud_summary(patterns: Sequence[FraudPattern]) -> List[FraudSummary]:
    return [
        FraudSummary(
            pattern_type=p.type.value,
            count=len(p.affected_transactions),
            risk_level=p.risk_level.value,
        )
        for p in patterns
    ]


def overview_stats(transactions: Sequence[TransactionRecord],
                   patterns: Sequence[FraudPattern] = ()) -> OverviewStats:
    total = len(transactions)
    volume = sum(t.amount for t in transactions)
    affected = {txn_id for p in patterns for txn_id in p.affected_transactions}

    return OverviewStats(
        total=total,
        volume=volume,
        avg_amount=volume / total if total else 0.0,
        fraud_rate=len(affected) / total * 100 if total else 0.0,
    )

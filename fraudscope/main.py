#!/usr/bin/env python3
"""
fraudscope CLI - generate a synthetic batch and scan it for fraud patterns
Usage: fraudscope --preset standard --count 500 --processors stripe paypal --seed 7
"""
import argparse
import json
import logging
import sys
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .analytics import fraud_summary, overview_stats, processor_breakdown, status_distribution
from .detectors import FraudPatternCatalog
from .entities import TransactionRecord
from .errors import GeneratorConfigError
from .generators import GeneratorConfig, SyntheticTransactionGenerator

# ============================================================================
# FRAUD MIX PRESETS - percentages per category, summing to 100
# ============================================================================

STANDARD_FRAUD_MIX = {
    # Fraud categories (60% total)
    'cardTesting': 10,
    'velocityFraud': 10,
    'highRiskCountry': 10,
    'roundNumber': 5,
    'retryAttack': 5,
    'cryptoFraud': 5,
    'nightTime': 5,
    'highValue': 10,
    # Legitimate traffic
    'legitimate': 40,
}

FRAUD_HEAVY_MIX = {
    'cardTesting': 15,
    'velocityFraud': 15,
    'highRiskCountry': 10,
    'roundNumber': 10,
    'retryAttack': 10,
    'cryptoFraud': 10,
    'nightTime': 10,
    'highValue': 10,
    'legitimate': 10,
}

CLEAN_MIX = {
    'cardTesting': 0,
    'velocityFraud': 0,
    'highRiskCountry': 0,
    'roundNumber': 0,
    'retryAttack': 0,
    'cryptoFraud': 0,
    'nightTime': 0,
    'highValue': 0,
    'legitimate': 100,
}

DEFAULT_STATUS_DISTRIBUTION = {
    'succeeded': 70,
    'failed': 20,
    'pending': 5,
    'canceled': 5,
}

PRESETS = {
    'standard': STANDARD_FRAUD_MIX,
    'fraud-heavy': FRAUD_HEAVY_MIX,
    'clean': CLEAN_MIX,
}


# ============================================================================
# Core Functions
# ============================================================================

def setup_logging(verbose: bool = False):
    """Configure logging"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        format='%(asctime)s [%(levelname)s] %(message)s',
        level=level,
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def build_config(preset: str = 'standard', count: int = 100, processors: Optional[List[str]] = None,
                 days: int = 7, config_path: Optional[str] = None,
                 preserve_signals: bool = False) -> GeneratorConfig:
    """
    Config from a JSON file when given, otherwise from a preset over the last `days` days

    Raises:
        ValueError: unknown preset
        pydantic.ValidationError: malformed config shape
    """
    if config_path:
        data = json.loads(Path(config_path).read_text(encoding='utf-8'))
        return GeneratorConfig.model_validate(data)

    fraud_mix = PRESETS.get(preset)
    if fraud_mix is None:
        raise ValueError(f"Unknown preset: {preset}. Available: {list(PRESETS.keys())}")

    end = datetime.now(timezone.utc).replace(microsecond=0)
    return GeneratorConfig.model_validate({
        'count': count,
        'processors': processors or ['stripe'],
        'dateRange': {'start': end - timedelta(days=days), 'end': end},
        'fraudMix': fraud_mix,
        'statusDistribution': DEFAULT_STATUS_DISTRIBUTION,
        'preserveCategorySignals': preserve_signals,
    })


def run_generation(config: GeneratorConfig, seed: Optional[int] = None,
                   kafka_bootstrap: Optional[str] = None, kafka_topic: Optional[str] = None) -> Dict[str, Any]:
    """Generate, detect, optionally publish; returns the report dict"""
    logger = logging.getLogger(__name__)

    logger.info(f"Generating {config.count:,} transactions across "
                f"{', '.join(p.value for p in config.processors)}")
    logger.info(f"Fraud mix: {100 - config.fraud_mix.legitimate:g}% fraud, "
                f"{config.fraud_mix.legitimate:g}% legitimate")

    start_time = time.time()
    generator = SyntheticTransactionGenerator(config, seed=seed)
    transactions = generator.generate()
    patterns = FraudPatternCatalog().detect(transactions)
    duration = time.time() - start_time

    published = None
    if kafka_topic:
        # Optional dependency, only needed when publishing
        from .publisher import KafkaPublisher

        publisher = KafkaPublisher(bootstrap_servers=kafka_bootstrap, topic=kafka_topic)
        try:
            published = publisher.publish(transactions).model_dump()
        finally:
            publisher.close()

    overview = overview_stats(transactions, patterns)
    result = {
        'requested_count': config.count,
        'generated_count': len(transactions),
        'duration_seconds': round(duration, 3),
        'published': published,
        'overview': overview.model_dump(),
        'status_distribution': [s.model_dump() for s in status_distribution(transactions)],
        'processors': [p.model_dump() for p in processor_breakdown(transactions)],
        'fraud_summary': [f.model_dump() for f in fraud_summary(patterns)],
        'patterns': [p.model_dump(mode='json') for p in patterns],
    }

    logger.info("=" * 60)
    logger.info(f"Generated: {len(transactions):,} transactions in {duration:.2f}s")
    logger.info(f"Patterns: {len(patterns)} ({overview.fraud_rate:.1f}% of transactions affected)")
    for pattern in patterns:
        logger.info(f"  [{pattern.risk_level.value}] {pattern.description}")
    logger.info("=" * 60)

    result['transactions'] = transactions
    return result


def write_records(transactions: List[TransactionRecord], path: str):
    with open(path, 'w') as f:
        json.dump([t.model_dump(mode='json') for t in transactions], f, indent=2)


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='fraudscope synthetic generator and fraud scanner')

    parser.add_argument('--preset', default='standard', choices=list(PRESETS.keys()),
                        help='Fraud mix preset')
    parser.add_argument('--count', type=int, default=100,
                        help='Number of transactions (1-10000)')
    parser.add_argument('--processors', nargs='+', default=['stripe'],
                        choices=['stripe', 'paypal', 'adyen'],
                        help='Processors to spread the batch across')
    parser.add_argument('--days', type=int, default=7,
                        help='Date range: last N days')
    parser.add_argument('--config', default=None,
                        help='JSON generator config (overrides preset/count/processors/days)')
    parser.add_argument('--preserve-signals', action='store_true',
                        help='Keep category statuses and timestamps instead of normalizing')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for a reproducible batch')
    parser.add_argument('--output', default='report.json',
                        help='Output file for the report')
    parser.add_argument('--records-output', default=None,
                        help='Optional output file for generated transactions')
    parser.add_argument('--kafka-bootstrap', default=None,
                        help='Kafka bootstrap servers (default: $KAFKA_BOOTSTRAP_SERVERS)')
    parser.add_argument('--kafka-topic', default=None,
                        help='Publish the batch to this Kafka topic')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main execution"""
    args = parse_args(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = build_config(
            preset=args.preset,
            count=args.count,
            processors=args.processors,
            days=args.days,
            config_path=args.config,
            preserve_signals=args.preserve_signals,
        )

        result = run_generation(
            config,
            seed=args.seed,
            kafka_bootstrap=args.kafka_bootstrap,
            kafka_topic=args.kafka_topic,
        )

        transactions = result.pop('transactions')
        with open(args.output, 'w') as f:
            json.dump(result, f, indent=2)
        logger.info(f"Report written to {args.output}")

        if args.records_output:
            write_records(transactions, args.records_output)
            logger.info(f"Transactions written to {args.records_output}")

        failed_ids = (result['published'] or {}).get('failed_ids')
        if failed_ids:
            logger.warning(f"Publishing to Kafka failed for {len(failed_ids)} transaction(s)")
            sys.exit(1)
        sys.exit(0)

    except (GeneratorConfigError, ValidationError) as e:
        logger.error(f"Invalid generator config: {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Run failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()

"""
Kafka publisher for generated transaction batches
One message per transaction, keyed by id, processor carried as a header
"""
import json
import logging
import os
from typing import List, Optional, Sequence

from kafka import KafkaProducer
from kafka.errors import KafkaError
from pydantic import BaseModel, Field

from .entities import TransactionRecord

logger = logging.getLogger(__name__)

SEND_TIMEOUT_SEC = 10


class PublishReport(BaseModel):
    """Outcome of publishing one batch"""
    topic: str
    sent: int = 0
    failed_ids: List[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failed_ids


class KafkaPublisher:
    """Publishes transaction records as JSON to a Kafka topic"""

    def __init__(self, bootstrap_servers: Optional[str] = None, topic: str = 'synthetic-transactions'):
        self.bootstrap_servers = (
            bootstrap_servers or
            os.getenv('KAFKA_BOOTSTRAP_SERVERS', 'localhost:9092')
        )
        self.topic = topic

        logger.info(f"Connecting to Kafka: {self.bootstrap_servers}")

        self.producer = KafkaProducer(
            bootstrap_servers=self.bootstrap_servers.split(','),
            key_serializer=lambda k: k.encode('utf-8'),
            value_serializer=lambda v: json.dumps(v).encode('utf-8'),
            acks='all',
            retries=3,
        )

    def publish(self, transactions: Sequence[TransactionRecord]) -> PublishReport:
        """
        Send the whole batch, then wait for every acknowledgement

        A failed record does not stop the batch; its id lands in failed_ids.
        """
        report = PublishReport(topic=self.topic)
        pending = []

        for txn in transactions:
            try:
                future = self.producer.send(
                    self.topic,
                    key=txn.id,
                    value=txn.model_dump(mode='json'),
                    headers=[('processor', txn.processor_name.encode('utf-8'))],
                )
            except KafkaError as e:
                logger.debug(f"{txn.id}: send rejected ({e})")
                report.failed_ids.append(txn.id)
                continue
            pending.append((txn.id, future))

        self.producer.flush(timeout=SEND_TIMEOUT_SEC)

        for txn_id, future in pending:
            try:
                future.get(timeout=SEND_TIMEOUT_SEC)
                report.sent += 1
            except KafkaError as e:
                logger.debug(f"{txn_id}: delivery failed ({e})")
                report.failed_ids.append(txn_id)

        if report.succeeded:
            logger.info(f"Published {report.sent} transactions to {self.topic}")
        else:
            logger.error(f"Published {report.sent}/{len(transactions)} transactions to {self.topic}; "
                         f"{len(report.failed_ids)} failed (first: {report.failed_ids[0]})")
        return report

    def close(self):
        """Close producer connection"""
        if self.producer:
            self.producer.close()

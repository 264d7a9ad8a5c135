# tests/test_publisher.py
import json
from unittest.mock import MagicMock

import pytest

pytest.importorskip("kafka", reason="kafka-python ships in the kafka extra")

from kafka.errors import KafkaError, KafkaTimeoutError  # noqa: E402

from fraudscope import publisher as publisher_module  # noqa: E402


@pytest.fixture
def producer(monkeypatch):
    """KafkaProducer replaced by a mock; returns the producer instance."""
    instance = MagicMock()
    factory = MagicMock(return_value=instance)
    monkeypatch.setattr(publisher_module, "KafkaProducer", factory)
    instance.factory = factory
    return instance


def _future(error=None):
    future = MagicMock()
    if error:
        future.get.side_effect = error
    return future


class TestKafkaPublisher:

    def test_bootstrap_from_env(self, producer, monkeypatch):
        """✅ Falls back to KAFKA_BOOTSTRAP_SERVERS."""
        monkeypatch.setenv("KAFKA_BOOTSTRAP_SERVERS", "k1:9092,k2:9092")

        pub = publisher_module.KafkaPublisher()

        assert pub.bootstrap_servers == "k1:9092,k2:9092"
        kwargs = producer.factory.call_args.kwargs
        assert kwargs["bootstrap_servers"] == ["k1:9092", "k2:9092"]
        assert kwargs["acks"] == "all"

    def test_serializers(self, producer):
        publisher_module.KafkaPublisher(bootstrap_servers="localhost:9092")
        kwargs = producer.factory.call_args.kwargs

        assert kwargs["key_serializer"]("ch_ct_1") == b"ch_ct_1"
        assert json.loads(kwargs["value_serializer"]({"amount": 100})) == {"amount": 100}

    def test_publish_keyed_by_id(self, producer, make_txn):
        """✅ Each record is sent keyed by its id with a processor header."""
        txns = [make_txn(id="a"), make_txn(id="b", processor="adyen")]
        pub = publisher_module.KafkaPublisher(bootstrap_servers="localhost:9092", topic="txns")

        report = pub.publish(txns)

        assert report.succeeded
        assert (report.topic, report.sent, report.failed_ids) == ("txns", 2, [])
        sent = [
            (c.args[0], c.kwargs["key"], c.kwargs["value"]["id"], c.kwargs["headers"])
            for c in producer.send.call_args_list
        ]
        assert sent == [
            ("txns", "a", "a", [("processor", b"stripe")]),
            ("txns", "b", "b", [("processor", b"adyen")]),
        ]
        producer.flush.assert_called_once()

    def test_batch_sent_before_waiting(self, producer, make_txn):
        """✅ Every send happens before the first acknowledgement is awaited."""
        calls = []
        producer.send.side_effect = lambda *a, **kw: calls.append("send") or _future()
        producer.flush.side_effect = lambda **kw: calls.append("flush")

        publisher_module.KafkaPublisher(bootstrap_servers="localhost:9092").publish(
            [make_txn() for _ in range(3)]
        )

        assert calls == ["send", "send", "send", "flush"]

    def test_failed_deliveries_reported_by_id(self, producer, make_txn):
        """✅ One broker error does not stop the rest of the batch."""
        producer.send.side_effect = [_future(), _future(KafkaError("broker down")), _future()]
        txns = [make_txn(id=f"t{i}") for i in range(3)]

        report = publisher_module.KafkaPublisher(bootstrap_servers="localhost:9092").publish(txns)

        assert not report.succeeded
        assert report.sent == 2
        assert report.failed_ids == ["t1"]

    def test_rejected_send_reported(self, producer, make_txn):
        producer.send.side_effect = [KafkaTimeoutError("no metadata"), _future()]
        txns = [make_txn(id="x"), make_txn(id="y")]

        report = publisher_module.KafkaPublisher(bootstrap_servers="localhost:9092").publish(txns)

        assert (report.sent, report.failed_ids) == (1, ["x"])

    def test_empty_batch(self, producer):
        report = publisher_module.KafkaPublisher(bootstrap_servers="localhost:9092").publish([])
        assert report.succeeded and report.sent == 0

    def test_close(self, producer):
        publisher_module.KafkaPublisher(bootstrap_servers="localhost:9092").close()
        producer.close.assert_called_once()

"""Tests for the RabbitMQ payment-event consumer callback."""

import json
from types import SimpleNamespace

from oms.infrastructure.messaging.payment_consumer import PaymentEventConsumer


class RecordingDispatcher:

    def __init__(self, error: Exception | None = None) -> None:
        self.events: list[tuple[str, dict]] = []
        self.error = error

    def event(self, pattern: str, payload: dict) -> None:
        if self.error is not None:
            raise self.error
        self.events.append((pattern, payload))


class RecordingChannel:

    def __init__(self) -> None:
        self.acked: list[int] = []
        self.nacked: list[tuple[int, bool]] = []

    def basic_ack(self, delivery_tag):
        self.acked.append(delivery_tag)

    def basic_nack(self, delivery_tag, requeue=True):
        self.nacked.append((delivery_tag, requeue))


def _method(tag: int = 7):
    return SimpleNamespace(routing_key="payment.succeeded", delivery_tag=tag)


class TestOnMessage:

    def test_dispatches_and_acks(self):
        dispatcher = RecordingDispatcher()
        channel = RecordingChannel()
        consumer = PaymentEventConsumer(dispatcher, host="localhost")
        payload = {"orderId": "o1", "stripePaymentId": "ch_1", "receiptUrl": "r"}

        consumer.on_message(channel, _method(), None, json.dumps(payload).encode())

        assert dispatcher.events == [("payment.succeeded", payload)]
        assert channel.acked == [7]
        assert channel.nacked == []

    def test_failure_requeues(self):
        channel = RecordingChannel()
        consumer = PaymentEventConsumer(
            RecordingDispatcher(error=ConnectionError("db down")), host="localhost"
        )

        consumer.on_message(channel, _method(3), None, b'{"orderId": "o1"}')

        assert channel.nacked == [(3, True)]
        assert channel.acked == []

    def test_undecodable_body_is_acked(self):
        dispatcher = RecordingDispatcher()
        channel = RecordingChannel()
        consumer = PaymentEventConsumer(dispatcher, host="localhost")

        consumer.on_message(channel, _method(4), None, b"not json")

        assert dispatcher.events == []
        assert channel.acked == [4]

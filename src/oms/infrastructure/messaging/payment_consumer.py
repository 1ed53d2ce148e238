"""RabbitMQ consumer for payment events.

Binds a durable queue to ``payment.succeeded`` on the topic exchange and
hands each message to the dispatcher.  Messages are acknowledged only
after settlement has been written; if handling blows up the message is
requeued so the broker's at-least-once redelivery retries it.
"""

from __future__ import annotations

import json
import logging
import time

import pika
from pika.exceptions import AMQPConnectionError

from oms.infrastructure.messaging.dispatcher import PAYMENT_SUCCEEDED, OrderMessageDispatcher

logger = logging.getLogger(__name__)

DEFAULT_QUEUE = "orders.payment-succeeded"


class PaymentEventConsumer:

    def __init__(
        self,
        dispatcher: OrderMessageDispatcher,
        host: str,
        exchange: str = "events",
        queue: str = DEFAULT_QUEUE,
        connect_attempts: int = 10,
        retry_delay: float = 5.0,
    ) -> None:
        self._dispatcher = dispatcher
        self._host = host
        self._exchange = exchange
        self._queue = queue
        self._connect_attempts = connect_attempts
        self._retry_delay = retry_delay
        self._connection = None

    def start(self) -> None:
        """Connect, declare the topology and block consuming messages."""
        channel = self._connect().channel()
        channel.exchange_declare(exchange=self._exchange, exchange_type="topic", durable=True)
        channel.queue_declare(queue=self._queue, durable=True)
        channel.queue_bind(exchange=self._exchange, queue=self._queue, routing_key=PAYMENT_SUCCEEDED)
        channel.basic_qos(prefetch_count=1)
        channel.basic_consume(queue=self._queue, on_message_callback=self.on_message)
        logger.info("Listening for %s on %s/%s", PAYMENT_SUCCEEDED, self._exchange, self._queue)
        try:
            channel.start_consuming()
        finally:
            self.stop()

    def stop(self) -> None:
        if self._connection is not None and self._connection.is_open:
            self._connection.close()
        self._connection = None

    def on_message(self, channel, method, properties, body: bytes) -> None:
        try:
            payload = json.loads(body)
        except ValueError:
            logger.warning("Dropping undecodable message on %s: %r", method.routing_key, body)
            channel.basic_ack(delivery_tag=method.delivery_tag)
            return

        logger.info("Received %s: %s", method.routing_key, payload)
        try:
            self._dispatcher.event(method.routing_key, payload)
        except Exception:
            logger.exception("Handling %s failed, requeueing", method.routing_key)
            channel.basic_nack(delivery_tag=method.delivery_tag, requeue=True)
            return
        channel.basic_ack(delivery_tag=method.delivery_tag)

    def _connect(self):
        params = pika.ConnectionParameters(
            host=self._host, heartbeat=600, blocked_connection_timeout=300
        )
        for attempt in range(1, self._connect_attempts + 1):
            try:
                self._connection = pika.BlockingConnection(params)
                return self._connection
            except AMQPConnectionError as exc:
                if attempt == self._connect_attempts:
                    raise
                logger.warning(
                    "RabbitMQ connection failed (attempt %d/%d), retrying in %ss: %s",
                    attempt, self._connect_attempts, self._retry_delay, exc,
                )
                time.sleep(self._retry_delay)
        raise AMQPConnectionError("no connection attempts configured")

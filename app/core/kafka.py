"""
Kafka producer for the Employee Management Service.

A single AIOKafkaProducer is shared by the process. It is started and
stopped by the application lifespan. Sends are handed to the producer's
buffer and never wait for broker acknowledgment.
"""

import asyncio
import json
from typing import Any, Optional

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError
from pydantic import BaseModel

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def _serialize(value: Any) -> bytes:
    return json.dumps(value, default=str).encode("utf-8")


class KafkaProducer:
    """Process-wide wrapper around AIOKafkaProducer."""

    _producer: Optional[AIOKafkaProducer] = None
    _started: bool = False

    @classmethod
    async def start(cls) -> None:
        """Start the producer if Kafka is enabled."""
        if not settings.KAFKA_ENABLED:
            logger.info("Kafka is disabled, producer will not be started")
            return
        if cls._started:
            return

        cls._producer = AIOKafkaProducer(
            bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
            client_id=settings.KAFKA_CLIENT_ID,
            value_serializer=_serialize,
            key_serializer=lambda key: key.encode("utf-8") if key else None,
            acks="all",
        )
        try:
            await cls._producer.start()
            cls._started = True
            logger.info(
                f"Kafka producer connected to {settings.KAFKA_BOOTSTRAP_SERVERS}"
            )
        except KafkaError as e:
            logger.error(f"Failed to start Kafka producer: {e}")
            cls._producer = None

    @classmethod
    async def stop(cls) -> None:
        """Flush and stop the producer."""
        if cls._producer is None:
            return
        try:
            await cls._producer.stop()
        finally:
            cls._producer = None
            cls._started = False

    @classmethod
    def get_producer(cls) -> Optional[AIOKafkaProducer]:
        return cls._producer if cls._started else None


def _log_delivery(topic: str, event_id: str):
    def callback(future: asyncio.Future) -> None:
        if future.cancelled():
            logger.warning(f"Delivery of event {event_id} to {topic} was cancelled")
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Failed to deliver event {event_id} to {topic}: {error}")
        else:
            logger.debug(f"Event {event_id} delivered to {topic}")

    return callback


async def publish_event(
    topic: str, event: BaseModel, key: Optional[str] = None
) -> bool:
    """
    Hand an event to the producer buffer without waiting for the broker.

    Args:
        topic: Kafka topic name
        event: Event model, serialized as JSON
        key: Optional partition key

    Returns:
        True if the event was enqueued, False if it was dropped
    """
    producer = KafkaProducer.get_producer()
    if producer is None:
        logger.warning(f"Kafka producer not available, dropping event for {topic}")
        return False

    event_id = getattr(event, "event_id", "unknown")
    try:
        delivery = await producer.send(
            topic, value=event.model_dump(mode="json"), key=key
        )
    except KafkaError as e:
        logger.error(f"Failed to enqueue event {event_id} for {topic}: {e}")
        return False

    delivery.add_done_callback(_log_delivery(topic, event_id))
    return True

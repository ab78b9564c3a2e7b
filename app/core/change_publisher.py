"""
Change publisher for employee writes.

Wraps a persisted entity into a ChangeEnvelope and hands it to Kafka.
Publication is fire-and-forget: a broker failure is logged and never
reaches the caller, and never undoes a committed write.
"""

from typing import Optional

from sqlmodel import SQLModel

from app.core.events import (
    ChangeEnvelope,
    EntityType,
    OperationType,
    create_change_envelope,
)
from app.core.kafka import publish_event
from app.core.logging import get_logger
from app.core.topics import KafkaTopics

logger = get_logger(__name__)


class ChangePublisher:
    """Publishes change envelopes to a single well-known topic."""

    def __init__(self, topic: str = KafkaTopics.EMPLOYEE):
        self.topic = topic

    async def publish(
        self,
        entity_type: EntityType,
        operation_type: OperationType,
        record: SQLModel,
    ) -> Optional[ChangeEnvelope]:
        """
        Publish a change envelope for a persisted record.

        Returns:
            The envelope handed to the producer, or None if it was dropped
        """
        envelope = create_change_envelope(entity_type, operation_type, record)
        record_id = getattr(record, "id", None)
        key = str(record_id) if record_id is not None else None

        try:
            enqueued = await publish_event(self.topic, envelope, key=key)
        except Exception as e:
            logger.error(
                f"Unexpected error publishing {operation_type.value} event "
                f"for {entity_type.value} {key}: {e}",
                exc_info=True,
            )
            return None

        if not enqueued:
            return None

        logger.info(
            f"Published {operation_type.value} event {envelope.event_id} "
            f"for {entity_type.value} {key} to {self.topic}"
        )
        return envelope


# Create singleton instance
change_publisher = ChangePublisher()

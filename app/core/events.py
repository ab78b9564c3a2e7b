"""
Change event definitions for the Employee Management Service.

Every successful write to an employee record produces exactly one
ChangeEnvelope, published to Kafka by the ChangePublisher.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from sqlmodel import SQLModel

from app.core.config import settings


class EntityType(str, Enum):
    """Kind of entity carried by a change envelope."""

    EMPLOYEE = "EMPLOYEE"


class OperationType(str, Enum):
    """Write operation that produced a change envelope."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class EventMetadata(BaseModel):
    """Metadata attached to every event for tracing and correlation."""

    model_config = ConfigDict(frozen=True)

    source_service: str = Field(default_factory=lambda: settings.APP_NAME)
    correlation_id: str = Field(default_factory=lambda: str(uuid4()))


class ChangeEnvelope(BaseModel):
    """
    Immutable envelope wrapping a snapshot of a written entity.

    The snapshot is taken at construction time, so later changes to the
    entity do not leak into an envelope that is already in flight.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    entity_type: EntityType
    operation_type: OperationType
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    version: str = "1.0"
    entity: dict[str, Any]
    metadata: EventMetadata = Field(default_factory=EventMetadata)


def create_change_envelope(
    entity_type: EntityType,
    operation_type: OperationType,
    entity: SQLModel,
    correlation_id: Optional[str] = None,
) -> ChangeEnvelope:
    """
    Helper function to snapshot an entity into a change envelope.

    Args:
        entity_type: Type tag of the entity
        operation_type: Operation that was performed
        entity: The persisted entity
        correlation_id: Optional correlation ID for tracing

    Returns:
        ChangeEnvelope ready for publishing
    """
    metadata = EventMetadata(correlation_id=correlation_id or str(uuid4()))

    return ChangeEnvelope(
        entity_type=entity_type,
        operation_type=operation_type,
        entity=entity.model_dump(mode="json"),
        metadata=metadata,
    )

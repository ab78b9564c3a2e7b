"""
Kafka Topic Definitions for the Employee Management Service.
"""

from app.core.config import settings


class KafkaTopics:
    """
    Central registry of all Kafka topics used by the Employee Management Service.
    """

    # Employee change events (create, update) share a single topic
    EMPLOYEE = settings.EMPLOYEE_TOPIC

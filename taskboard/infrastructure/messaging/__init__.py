"""Messaging: Redis pub/sub change notifications."""

from taskboard.infrastructure.messaging.redis_pubsub import (
    ChangeEvent,
    ChangePublisher,
    get_change_publisher,
    run_change_broadcast,
    set_change_publisher,
)

__all__ = [
    "ChangeEvent",
    "ChangePublisher",
    "get_change_publisher",
    "run_change_broadcast",
    "set_change_publisher",
]

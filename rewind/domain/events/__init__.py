"""
Domain Events Package

Architectural Intent:
- Events are the mechanism for observers (logging, notifications) to follow
  rollbacks without coupling to the engine
"""

from rewind.domain.events.event_base import DomainEvent
from rewind.domain.events.rollback_events import (
    ReleaseSupersededEvent,
    RollbackCompletedEvent,
    RollbackFailedEvent,
    RollbackStartedEvent,
    release_aggregate_id,
)

__all__ = [
    "DomainEvent",
    "RollbackStartedEvent",
    "ReleaseSupersededEvent",
    "RollbackFailedEvent",
    "RollbackCompletedEvent",
    "release_aggregate_id",
]

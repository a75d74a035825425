"""
Event Bus Port

Architectural Intent:
- Abstract interface for publishing rollback domain events
- Decouples the engine from whoever observes rollbacks (logs, notifiers)
"""

from typing import Awaitable, Callable, Protocol, runtime_checkable
from rewind.domain.events.event_base import DomainEvent

EventHandler = Callable[[DomainEvent], Awaitable[None]]


@runtime_checkable
class EventBusPort(Protocol):
    async def publish(self, events: list[DomainEvent]) -> None: ...

    def subscribe(self, event_type: type, handler: EventHandler) -> None: ...

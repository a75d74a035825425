"""
Event Bus Infrastructure

Architectural Intent:
- In-memory implementation of EventBusPort
- Handlers subscribe per event type, or to DomainEvent to receive everything
"""

import logging
from rewind.domain.events.event_base import DomainEvent
from rewind.domain.ports.event_bus_port import EventHandler

logger = logging.getLogger(__name__)


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[type, list[EventHandler]] = {}

    async def publish(self, events: list[DomainEvent]) -> None:
        for event in events:
            for handler in self._handlers_for(type(event)):
                await handler(event)

    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def _handlers_for(self, event_type: type) -> list[EventHandler]:
        handlers: list[EventHandler] = []
        for registered, registered_handlers in self._handlers.items():
            if issubclass(event_type, registered):
                handlers.extend(registered_handlers)
        return handlers


async def log_event(event: DomainEvent) -> None:
    """Handler writing every published event to the log."""
    logger.info("event %s", event.to_dict())

# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Change notification feed.

Services publish a ChangeEvent after every successful commit. Subscribers only
learn which user's data changed and are expected to re-fetch and recompute.
"""

import asyncio
import logging
import uuid as uuid_lib
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from worktime.models.base import utcnow

logger = logging.getLogger(__name__)


class ChangeEvent(str, Enum):
    """Kinds of data changes."""

    ENTRY_CHANGED = "entry.changed"
    ABSENCE_CHANGED = "absence.changed"
    QUOTA_CHANGED = "quota.changed"
    ADJUSTMENT_CHANGED = "adjustment.changed"
    SETTINGS_CHANGED = "settings.changed"


@dataclass
class ChangePayload:
    """Payload delivered to subscribers."""

    event_type: ChangeEvent
    timestamp: datetime
    user_id: uuid_lib.UUID
    data: dict[str, Any] = field(default_factory=dict)


# Type alias for change handlers
ChangeHandler = Callable[[ChangePayload], Any]


class EventBus:
    """Dispatches change events to subscribed handlers.

    Handler errors are logged and never reach the publisher: a failed
    subscriber must not undo a committed transition.
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: dict[ChangeEvent, list[tuple[str | None, ChangeHandler]]] = (
            defaultdict(list)
        )
        self._async_handlers: dict[
            ChangeEvent, list[tuple[str | None, ChangeHandler]]
        ] = defaultdict(list)

    def subscribe(
        self,
        event_type: ChangeEvent,
        handler: ChangeHandler,
        subscriber_id: str | None = None,
    ) -> None:
        """Subscribe to an event.

        Args:
            event_type: Event type to subscribe to
            handler: Function to call when the event fires (sync or async)
            subscriber_id: Name of the subscriber (for tracking/unsubscribe)
        """
        if asyncio.iscoroutinefunction(handler):
            self._async_handlers[event_type].append((subscriber_id, handler))
        else:
            self._handlers[event_type].append((subscriber_id, handler))

        logger.debug(f"Subscribed {subscriber_id or 'anonymous'} to {event_type.value}")

    def subscribe_all(
        self, handler: ChangeHandler, subscriber_id: str | None = None
    ) -> None:
        """Subscribe a handler to every event type."""
        for event_type in ChangeEvent:
            self.subscribe(event_type, handler, subscriber_id)

    def unsubscribe(
        self,
        event_type: ChangeEvent,
        handler: ChangeHandler,
        subscriber_id: str | None = None,
    ) -> None:
        """Unsubscribe a handler from an event."""
        subscription = (subscriber_id, handler)
        if subscription in self._handlers[event_type]:
            self._handlers[event_type].remove(subscription)
        if subscription in self._async_handlers[event_type]:
            self._async_handlers[event_type].remove(subscription)

    def unsubscribe_subscriber(self, subscriber_id: str) -> None:
        """Remove all handlers registered under a subscriber id."""
        for registry in (self._handlers, self._async_handlers):
            for event_type in list(registry.keys()):
                registry[event_type] = [
                    (sid, handler)
                    for sid, handler in registry[event_type]
                    if sid != subscriber_id
                ]

        logger.debug(f"Unsubscribed all handlers of {subscriber_id}")

    def _payload(
        self,
        event_type: ChangeEvent,
        user_id: uuid_lib.UUID,
        data: dict[str, Any] | None,
    ) -> ChangePayload:
        return ChangePayload(
            event_type=event_type,
            timestamp=utcnow(),
            user_id=user_id,
            data=data or {},
        )

    def _call_sync(self, payload: ChangePayload) -> None:
        for subscriber_id, handler in self._handlers.get(payload.event_type, []):
            try:
                handler(payload)
            except Exception as e:
                logger.error(
                    f"Error in change handler for {payload.event_type.value} "
                    f"(subscriber: {subscriber_id}): {e}"
                )

    async def publish(
        self,
        event_type: ChangeEvent,
        user_id: uuid_lib.UUID,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Publish a change to all subscribers.

        Args:
            event_type: Type of change
            user_id: User whose data changed
            data: Optional extra payload
        """
        payload = self._payload(event_type, user_id, data)
        self._call_sync(payload)

        for subscriber_id, handler in self._async_handlers.get(event_type, []):
            try:
                await handler(payload)
            except Exception as e:
                logger.error(
                    f"Error in async change handler for {event_type.value} "
                    f"(subscriber: {subscriber_id}): {e}"
                )

    def publish_sync(
        self,
        event_type: ChangeEvent,
        user_id: uuid_lib.UUID,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Publish a change from sync code. Async handlers are not called."""
        self._call_sync(self._payload(event_type, user_id, data))

        if self._async_handlers.get(event_type):
            logger.warning(
                f"Event {event_type.value} has async handlers that were "
                "not called due to sync publish"
            )

    def get_subscriber_count(self, event_type: ChangeEvent) -> int:
        """Get the number of subscribers for an event type."""
        sync_count = len(self._handlers.get(event_type, []))
        async_count = len(self._async_handlers.get(event_type, []))
        return sync_count + async_count


# Global event bus singleton
event_bus = EventBus()

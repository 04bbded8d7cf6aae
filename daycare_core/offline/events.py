# =============================================================================
# daycare_core/offline/events.py
# Typed in-process events
# =============================================================================
"""
EventBus - explicit subscribe/publish for store and realtime notifications.

Subscribers are called synchronously on the publishing thread. A failing
subscriber is logged and does not prevent delivery to the others.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Kinds of events published by the data layer."""
    DAILY_LOG_UPDATED = "daily_log_updated"   # record: DailyLog
    DATA_CHANGED = "data_changed"             # table: changed table name
    SETTINGS_UPDATED = "settings_updated"     # record: Settings
    CLOUD_STATUS = "cloud_status"             # record: ConnectionStatus


@dataclass
class StoreEvent:
    type: EventType
    table: Optional[str] = None
    record: Any = None
    timestamp: datetime = field(default_factory=datetime.now)


Callback = Callable[[StoreEvent], None]


class EventBus:
    """
    Usage:
        bus = EventBus()
        unsubscribe = bus.subscribe(EventType.DAILY_LOG_UPDATED, on_log)
        ...
        unsubscribe()
    """

    def __init__(self):
        self._subscribers: Dict[Optional[EventType], List[Callback]] = {}
        self._lock = threading.Lock()

    def subscribe(
        self,
        event_type: Optional[EventType],
        callback: Callback,
    ) -> Callable[[], None]:
        """
        Register a callback for one event type, or for all when ``None``.

        Returns:
            A function that removes this registration
        """
        with self._lock:
            callbacks = self._subscribers.setdefault(event_type, [])
            if callback not in callbacks:
                callbacks.append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(event_type, callback)

        return unsubscribe

    def unsubscribe(self, event_type: Optional[EventType], callback: Callback) -> None:
        with self._lock:
            callbacks = self._subscribers.get(event_type, [])
            if callback in callbacks:
                callbacks.remove(callback)

    def publish(self, event: StoreEvent) -> None:
        """Deliver an event to its type's subscribers, then to catch-all ones."""
        with self._lock:
            targets = list(self._subscribers.get(event.type, []))
            targets += self._subscribers.get(None, [])

        for callback in targets:
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Error in {event.type.value} subscriber: {e}")

    def emit(self, event_type: EventType, table: Optional[str] = None, record: Any = None) -> None:
        self.publish(StoreEvent(type=event_type, table=table, record=record))

    def subscriber_count(self, event_type: Optional[EventType] = None) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))


class ChangeCounter:
    """
    Process-wide data version, bumped by every data event on a bus.

    One instance per bus; UI sessions poll ``value`` and refresh when it
    moves, so sessions never register callbacks of their own.
    """

    IGNORED = (EventType.CLOUD_STATUS,)

    def __init__(self, bus: EventBus):
        self._value = 0
        self._lock = threading.Lock()
        self._unsubscribe = bus.subscribe(None, self._bump)

    def _bump(self, event: StoreEvent) -> None:
        if event.type in self.IGNORED:
            return
        with self._lock:
            self._value += 1

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def close(self) -> None:
        self._unsubscribe()

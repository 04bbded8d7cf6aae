# =============================================================================
# daycare_core/offline/realtime.py
# Realtime update channel and watchdog
# =============================================================================
"""
RealtimeChannel - one shared Supabase realtime subscription for all tables.

Features:
- Single channel ``daycare-db-changes`` on schema ``public``, every event
- Change dispatch into the DaycareStore plus typed events on the bus
- Watchdog thread that re-subscribes when the channel drops
- Never more than one live subscription

The supabase realtime client is asyncio based; the subscriber owns a private
event loop running on a daemon thread so the rest of the app stays
synchronous. Change callbacks do blocking store and HTTP work, so they are
handed to a single dispatch thread and never run on the event loop.
"""

from __future__ import annotations
import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional
import logging

from daycare_core.errors.exceptions import CloudMirrorError
from daycare_core.offline.events import EventBus, EventType

logger = logging.getLogger(__name__)


CHANNEL_NAME = "daycare-db-changes"
SCHEMA = "public"
SETTINGS_TABLE = "app_settings"
DAILY_LOGS_TABLE = "daily_logs"

FAILURE_WARNING_THRESHOLD = 3

# Subscription states reported by the realtime client that mean "gone"
DROPPED_STATES = ("CLOSED", "CHANNEL_ERROR", "TIMED_OUT")


class ConnectionStatus(Enum):
    """Realtime channel states."""
    DISABLED = "disabled"           # Cloud not configured
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"   # Configured but not subscribed


@dataclass
class RowChange:
    """A normalized postgres change notification."""
    table: str
    event_type: str
    record: Dict[str, Any] = field(default_factory=dict)
    old_record: Dict[str, Any] = field(default_factory=dict)

    @property
    def record_id(self) -> Optional[str]:
        return self.record.get("id") or self.old_record.get("id")

    @classmethod
    def from_payload(cls, payload: Any) -> Optional[RowChange]:
        """
        Accept both the nested ``{"data": {...}}`` shape and flat payloads
        using ``eventType`` / ``new`` / ``old`` keys.
        """
        if not isinstance(payload, dict):
            return None
        data = payload.get("data") if isinstance(payload.get("data"), dict) else payload

        table = data.get("table")
        event = data.get("type") or data.get("eventType") or payload.get("eventType")
        if not table or not event:
            return None

        record = data.get("record") or data.get("new") or {}
        old_record = data.get("old_record") or data.get("old") or {}
        return cls(
            table=table,
            event_type=str(getattr(event, "value", event)).upper(),
            record=record if isinstance(record, dict) else {},
            old_record=old_record if isinstance(old_record, dict) else {},
        )


def handle_change(store, bus: EventBus, change: RowChange) -> None:
    """Apply one remote change to the local store and announce it."""
    if change.table == SETTINGS_TABLE:
        settings = store.sync_settings_from_cloud()
        bus.emit(EventType.SETTINGS_UPDATED, table=change.table, record=settings)
        return

    if change.table == DAILY_LOGS_TABLE:
        if change.event_type == "DELETE":
            if change.record_id:
                store.remove_local_record(DAILY_LOGS_TABLE, change.record_id)
            bus.emit(EventType.DATA_CHANGED, table=change.table, record=change.old_record)
            return
        log = store.apply_remote_daily_log(change.record)
        if log is not None:
            bus.emit(EventType.DAILY_LOG_UPDATED, table=change.table, record=log)
        return

    bus.emit(EventType.DATA_CHANGED, table=change.table, record=change.record or change.old_record)


# =============================================================================
# SUPABASE SUBSCRIBER
# =============================================================================

class SupabaseRealtimeSubscriber:
    """
    Owns one async supabase client and one channel on a private event loop.

    ``connect()`` blocks until the channel reports SUBSCRIBED or raises
    CloudMirrorError after ``timeout`` seconds.
    """

    def __init__(
        self,
        url: str,
        key: str,
        on_change: Callable[[Any], None],
        on_status: Optional[Callable[[str], None]] = None,
        timeout: float = 10.0,
    ):
        self.url = url
        self.key = key
        self.timeout = timeout
        self._on_change = on_change
        self._on_status = on_status
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._client = None
        self._channel = None
        self._subscribed = threading.Event()
        self._connected = False
        # Payloads are applied in arrival order, off the event loop
        self._dispatcher = ThreadPoolExecutor(max_workers=1, thread_name_prefix="RealtimeDispatch")

    @property
    def connected(self) -> bool:
        return self._connected and self._thread is not None and self._thread.is_alive()

    def connect(self) -> None:
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="RealtimeChannel"
        )
        self._thread.start()

        future = asyncio.run_coroutine_threadsafe(self._subscribe(), self._loop)
        try:
            future.result(timeout=self.timeout)
        except Exception as e:
            self.close()
            raise CloudMirrorError(f"Realtime subscribe failed: {e}", operation="subscribe")

        if not self._subscribed.wait(timeout=self.timeout):
            self.close()
            raise CloudMirrorError(
                "Realtime channel did not confirm subscription",
                operation="subscribe",
            )

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    async def _subscribe(self) -> None:
        from supabase import acreate_client

        self._client = await acreate_client(self.url, self.key)
        channel = self._client.channel(CHANNEL_NAME)
        channel.on_postgres_changes("*", schema=SCHEMA, callback=self._handle_payload)
        await channel.subscribe(self._handle_status)
        self._channel = channel

    def _handle_status(self, status, err=None) -> None:
        value = str(getattr(status, "value", status)).upper()
        if value == "SUBSCRIBED":
            self._connected = True
            self._subscribed.set()
        elif value in DROPPED_STATES:
            self._connected = False
            logger.warning(f"Realtime channel {value.lower()}: {err or 'no detail'}")
        if self._on_status is not None:
            self._on_status(value)

    def _handle_payload(self, payload) -> None:
        """Queue a change for the dispatch thread and return immediately."""
        try:
            self._dispatcher.submit(self._dispatch, payload)
        except RuntimeError:
            logger.debug("Realtime change arrived after close; dropped")

    def _dispatch(self, payload) -> None:
        try:
            self._on_change(payload)
        except Exception as e:
            logger.error(f"Error handling realtime change: {e}")

    async def _teardown(self) -> None:
        if self._client is not None and self._channel is not None:
            await self._client.remove_channel(self._channel)

    def close(self) -> None:
        self._connected = False
        loop = self._loop
        if loop is not None:
            self._stop_loop(loop)
        self._dispatcher.shutdown(wait=True)

    def _stop_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        if loop.is_running():
            future = asyncio.run_coroutine_threadsafe(self._teardown(), loop)
            try:
                future.result(timeout=self.timeout)
            except Exception as e:
                logger.debug(f"Realtime teardown incomplete: {e}")
            loop.call_soon_threadsafe(loop.stop)

        if self._thread is not None:
            self._thread.join(timeout=self.timeout)
        if not loop.is_running():
            loop.close()

        self._loop = None
        self._thread = None
        self._channel = None
        self._client = None


SubscriberFactory = Callable[..., Any]


def default_subscriber_factory(url, key, on_change, on_status):
    return SupabaseRealtimeSubscriber(url, key, on_change, on_status)


# =============================================================================
# CHANNEL MANAGER + WATCHDOG
# =============================================================================

class RealtimeChannel:
    """
    Keeps one realtime subscription alive for a DaycareStore.

    Usage:
        channel = RealtimeChannel(store, bus)
        channel.start()          # subscribe now + start the watchdog
        ...
        channel.stop()
    """

    def __init__(
        self,
        store,
        bus: Optional[EventBus] = None,
        check_interval: float = 15.0,
        subscriber_factory: Optional[SubscriberFactory] = None,
    ):
        self.store = store
        self.bus = bus or store.bus
        self.check_interval = check_interval
        self._subscriber_factory = subscriber_factory or default_subscriber_factory
        self._subscriber = None
        self._lock = threading.RLock()
        self._status = ConnectionStatus.DISCONNECTED
        self._consecutive_failures = 0
        self._last_change: Optional[datetime] = None
        self._monitor_thread: Optional[threading.Thread] = None
        self._stop_monitoring = threading.Event()

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def is_connected(self) -> bool:
        return self._status == ConnectionStatus.CONNECTED

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    def _set_status(self, status: ConnectionStatus) -> None:
        if status == self._status:
            return
        old = self._status
        self._status = status
        logger.info(f"Realtime status changed: {old.value} -> {status.value}")
        self.bus.emit(EventType.CLOUD_STATUS, record=status)

    # =========================================================================
    # SUBSCRIPTION
    # =========================================================================

    def ensure_connected(self) -> bool:
        """
        Make sure exactly one live subscription exists.

        No-op when the cloud is disabled or the current subscription is
        healthy; otherwise any stale subscription is closed and a new one
        is created.

        Returns:
            True when a live subscription exists afterwards
        """
        with self._lock:
            if not self.store.is_cloud_enabled():
                self._close_subscriber()
                self._set_status(ConnectionStatus.DISABLED)
                return False

            if self._subscriber is not None and self._subscriber.connected:
                self._set_status(ConnectionStatus.CONNECTED)
                return True

            if self._subscriber is not None:
                logger.info("Realtime subscription is stale; resubscribing")
                self._close_subscriber()

            self._set_status(ConnectionStatus.CONNECTING)
            settings = self.store.get_settings()
            subscriber = None
            try:
                subscriber = self._subscriber_factory(
                    settings.cloud_url,
                    settings.cloud_key,
                    self._on_payload,
                    self._on_subscriber_status,
                )
                subscriber.connect()
            except Exception as e:
                self._consecutive_failures += 1
                if subscriber is not None:
                    try:
                        subscriber.close()
                    except Exception as close_error:
                        logger.debug(f"Closing failed subscriber: {close_error}")
                message = f"Realtime subscribe attempt {self._consecutive_failures} failed: {e}"
                if self._consecutive_failures >= FAILURE_WARNING_THRESHOLD:
                    logger.warning(message)
                else:
                    logger.info(message)
                self._set_status(ConnectionStatus.DISCONNECTED)
                return False

            self._subscriber = subscriber
            self._consecutive_failures = 0
            self._set_status(ConnectionStatus.CONNECTED)
            logger.info(f"Realtime channel '{CHANNEL_NAME}' subscribed")
            return True

    def reconnect(self) -> bool:
        """Drop the current subscription (e.g. after credentials change)."""
        with self._lock:
            self._close_subscriber()
            self._set_status(ConnectionStatus.DISCONNECTED)
            return self.ensure_connected()

    def _close_subscriber(self) -> None:
        if self._subscriber is None:
            return
        try:
            self._subscriber.close()
        except Exception as e:
            logger.debug(f"Error closing realtime subscriber: {e}")
        self._subscriber = None

    def _on_subscriber_status(self, value: str) -> None:
        if value in DROPPED_STATES:
            self._set_status(ConnectionStatus.DISCONNECTED)

    def _on_payload(self, payload: Any) -> None:
        change = RowChange.from_payload(payload)
        if change is None:
            logger.debug(f"Ignoring unrecognised realtime payload: {payload!r}")
            return
        self._last_change = datetime.now()
        handle_change(self.store, self.bus, change)

    # =========================================================================
    # WATCHDOG
    # =========================================================================

    def start(self) -> None:
        """Subscribe immediately and start the watchdog."""
        self.ensure_connected()
        self.start_watchdog()

    def start_watchdog(self) -> None:
        if self._monitor_thread is not None and self._monitor_thread.is_alive():
            return

        self._stop_monitoring.clear()
        self._monitor_thread = threading.Thread(
            target=self._watchdog_loop,
            daemon=True,
            name="RealtimeWatchdog"
        )
        self._monitor_thread.start()
        logger.debug("Realtime watchdog started")

    def stop_watchdog(self) -> None:
        self._stop_monitoring.set()
        if self._monitor_thread:
            self._monitor_thread.join(timeout=5)
        self._monitor_thread = None
        logger.debug("Realtime watchdog stopped")

    def _watchdog_loop(self) -> None:
        while not self._stop_monitoring.wait(timeout=self.check_interval):
            try:
                self.ensure_connected()
            except Exception as e:
                logger.error(f"Error in realtime watchdog: {e}")

    def stop(self) -> None:
        self.stop_watchdog()
        with self._lock:
            self._close_subscriber()
            self._set_status(ConnectionStatus.DISCONNECTED)

    def get_status_display(self) -> dict:
        """Status information for UI display."""
        return {
            "status": self._status.value,
            "connected": self.is_connected,
            "failures": self._consecutive_failures,
            "last_change": self._last_change.isoformat() if self._last_change else None,
        }

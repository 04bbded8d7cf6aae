# =============================================================================
# daycare_core/offline/__init__.py
# Offline-First Data Layer for the Daycare App
# =============================================================================
"""
Offline-First Data Layer

Every page talks to one DaycareStore. Local storage is always written first
and is the source of truth when offline; the Supabase mirror is best effort.

Architecture:
------------
┌─────────────────────────────────────────────────────────────────┐
│                     OFFLINE-FIRST DATA LAYER                     │
├─────────────────────────────────────────────────────────────────┤
│                                                                  │
│   ┌──────────────────────────────────────────────────────────┐  │
│   │                      DaycareStore                         │  │
│   │      (reads: cloud w/ local fallback, logs merged)        │  │
│   │      (writes: local first, cloud in background)           │  │
│   └──────────────────────────────────────────────────────────┘  │
│              │                  │                  │             │
│              ▼                  ▼                  ▼             │
│   ┌──────────────────┐ ┌──────────────┐ ┌──────────────────┐    │
│   │    LocalStore    │ │ merge policy │ │   CloudMirror    │    │
│   │ (SQLite slots)   │ │   (pure)     │ │ (Supabase, lazy) │    │
│   └──────────────────┘ └──────────────┘ └──────────────────┘    │
│              ▲                                     │             │
│              │                                     ▼             │
│   ┌──────────────────┐    events     ┌──────────────────────┐   │
│   │     EventBus     │◄──────────────│   RealtimeChannel    │   │
│   │ (typed pub/sub)  │               │ (1 channel+watchdog) │   │
│   └──────────────────┘               └──────────────────────┘   │
└─────────────────────────────────────────────────────────────────┘

Usage:
------
from daycare_core.offline import DaycareStore, LocalStore, RealtimeChannel

store = DaycareStore(LocalStore(path))
channel = RealtimeChannel(store)
channel.start()

log = store.get_or_create_daily_log(child_id, "2024-06-01")
"""

from daycare_core.offline.models import (
    Child,
    Parent,
    DailyLog,
    Holiday,
    Settings,
    EmailSendLog,
    MealEntry,
    BottleEntry,
    NapEntry,
    DiaperEntry,
    ActivityEntry,
    MedicationEntry,
    IncidentEntry,
    LogStatus,
    Mood,
    ENTRY_TYPES,
    daily_log_id,
)

from daycare_core.offline.local_store import LocalStore

from daycare_core.offline.cloud_mirror import (
    CloudMirror,
    validate_cloud_config,
)

from daycare_core.offline.merge import (
    merge_records,
    merge_settings,
)

from daycare_core.offline.events import (
    ChangeCounter,
    EventBus,
    EventType,
    StoreEvent,
)

from daycare_core.offline.data_store import DaycareStore

from daycare_core.offline.realtime import (
    RealtimeChannel,
    RowChange,
    ConnectionStatus,
    handle_change,
)


__all__ = [
    # Models
    "Child",
    "Parent",
    "DailyLog",
    "Holiday",
    "Settings",
    "EmailSendLog",
    "MealEntry",
    "BottleEntry",
    "NapEntry",
    "DiaperEntry",
    "ActivityEntry",
    "MedicationEntry",
    "IncidentEntry",
    "LogStatus",
    "Mood",
    "ENTRY_TYPES",
    "daily_log_id",
    # Storage
    "LocalStore",
    "CloudMirror",
    "validate_cloud_config",
    "merge_records",
    "merge_settings",
    # Facade
    "DaycareStore",
    # Events & realtime
    "ChangeCounter",
    "EventBus",
    "EventType",
    "StoreEvent",
    "RealtimeChannel",
    "RowChange",
    "ConnectionStatus",
    "handle_change",
]

# =============================================================================
# daycare_core/offline/data_store.py
# DaycareStore - single API for every collection, local-first with cloud mirror
# =============================================================================
"""
DaycareStore - the data access facade used by every page and service.

Read contract:
- children, parents, holidays, send logs: try the cloud; on success the
  cloud result overwrites the local slot and is returned, otherwise the
  local slot is returned.
- daily logs: local and cloud copies are merged by id (cloud wins per id)
  and the union is persisted locally.
- in both cases a record whose latest cloud upsert has not succeeded
  ("dirty") keeps its local copy until a later upsert of it goes through.

Write contract:
- the local slot is written first, always, under the collection lock;
- the matching cloud upsert/delete is then handed to a single background
  writer so mirror calls reach the cloud in call order. Mirror failures are
  logged and never surface to the caller.

A per-collection write sequence guards reads: if a local write happens (or
is still waiting for its cloud upsert) while a cloud read is in flight, the
read result is treated as stale and local data takes precedence.

Usage:
------
store = DaycareStore(LocalStore(path))
log = store.get_or_create_daily_log(child.id, today_str())
store.check_in(child.id, today_str(), "08:05")
"""

from __future__ import annotations
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Set
import logging

from daycare_core.config import AppConfig
from daycare_core.errors.exceptions import (
    ConfirmationRequiredError,
    DataValidationError,
    RecordNotFoundError,
)
from daycare_core.logging import LogContext
from daycare_core.offline import local_store as keys
from daycare_core.offline.cloud_mirror import CloudMirror
from daycare_core.offline.events import EventBus, EventType
from daycare_core.offline.local_store import LocalStore
from daycare_core.offline.merge import merge_records, merge_settings
from daycare_core.offline.models import (
    ENTRY_TYPES,
    Child,
    DailyLog,
    EmailSendLog,
    Holiday,
    Mood,
    Parent,
    Settings,
    DEFAULT_ADMIN_PASSWORD,
    daily_log_id,
)
from daycare_core.services import daily_log_lifecycle as lifecycle
from daycare_core.utils.dates import current_time_str, parse_date, DATE_FORMAT

logger = logging.getLogger(__name__)


MirrorFactory = Callable[[str, str], CloudMirror]


class DaycareStore:
    """
    Explicit service object owning every collection.

    Construct once at startup and hand it to whatever needs data access.
    The cloud mirror is built lazily from Settings and rebuilt after
    ``reset_cloud()``.
    """

    # Local collection -> cloud table
    CLOUD_TABLES = {
        keys.CHILDREN: "children",
        keys.PARENTS: "parents",
        keys.DAILY_LOGS: "daily_logs",
        keys.HOLIDAYS: "holidays",
        keys.SEND_LOGS: "send_logs",
    }

    SETTINGS_TABLE = "app_settings"
    SETTINGS_ROW_ID = "global"

    # Daily-log fields editable through update_daily_log
    EDITABLE_LOG_FIELDS = (
        "arrival_time",
        "departure_time",
        "overall_mood",
        "teacher_notes",
        "activity_notes",
        "supplies_needed",
        "include_trends",
    )

    def __init__(
        self,
        local: LocalStore,
        mirror_factory: Optional[MirrorFactory] = None,
        bus: Optional[EventBus] = None,
        background_writes: bool = True,
        cloud_timeout: float = 10.0,
    ):
        """
        Args:
            local: The persistent local store
            mirror_factory: Builds a CloudMirror from (url, key)
            bus: Event bus for change notifications
            background_writes: Run mirror writes on a worker thread
            cloud_timeout: Seconds per cloud call for the default factory
        """
        self.local = local
        self.bus = bus or EventBus()
        self._mirror_factory = mirror_factory or (
            lambda url, key: CloudMirror(url, key, timeout=cloud_timeout)
        )
        self._mirror: Optional[CloudMirror] = None
        self._mirror_lock = threading.Lock()

        all_keys = list(self.CLOUD_TABLES) + [keys.SETTINGS, keys.AUTH_FLAG]
        self._locks = {name: threading.RLock() for name in all_keys}
        self._write_seq = {name: 0 for name in all_keys}
        self._pending = {name: 0 for name in all_keys}
        self._pending_lock = threading.Lock()
        # record id -> token of its latest submitted upsert, until one succeeds
        self._dirty: Dict[str, Dict[str, int]] = {name: {} for name in all_keys}
        self._dirty_token = 0

        self._executor: Optional[ThreadPoolExecutor] = None
        if background_writes:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="CloudMirrorWriter"
            )

    @classmethod
    def from_config(cls, config: AppConfig, bus: Optional[EventBus] = None) -> DaycareStore:
        local = LocalStore(config.db_path)
        local.initialize()
        return cls(
            local,
            bus=bus,
            background_writes=config.background_writes,
            cloud_timeout=config.cloud_timeout,
        )

    # =========================================================================
    # CLOUD MIRROR HANDLE
    # =========================================================================

    def _cloud(self) -> CloudMirror:
        with self._mirror_lock:
            if self._mirror is None:
                settings = self.get_settings()
                self._mirror = self._mirror_factory(settings.cloud_url, settings.cloud_key)
            return self._mirror

    def is_cloud_enabled(self) -> bool:
        return self._cloud().enabled

    def reset_cloud(self) -> None:
        """Drop the mirror so the next call rebuilds it from current Settings."""
        with self._mirror_lock:
            self._mirror = None
        logger.info("Cloud mirror reset")

    @property
    def cloud_status_reason(self) -> Optional[str]:
        return self._cloud().disabled_reason

    # =========================================================================
    # WRITE / READ PRIMITIVES
    # =========================================================================

    def _write_local(self, collection: str, value: Any) -> bool:
        """Persist a slot; caller holds the collection lock."""
        self._write_seq[collection] += 1
        ok = self.local.set(collection, value)
        if not ok:
            logger.error(f"Local write of '{collection}' failed")
        return ok

    def _submit_cloud(
        self,
        collection: str,
        description: str,
        func: Callable[..., bool],
        *args,
        record_ids: Iterable[str] = (),
    ) -> None:
        """
        Hand a mirror call to the writer; no-op when the cloud is disabled.

        ``record_ids`` stay marked dirty until an upsert carrying them
        succeeds, so reads keep the local copy of those records.
        """
        mirror = self._cloud()
        if not mirror.enabled:
            return

        record_ids = [rid for rid in record_ids if rid]
        with self._pending_lock:
            self._pending[collection] += 1
            self._dirty_token += 1
            token = self._dirty_token
            for rid in record_ids:
                self._dirty[collection][rid] = token

        def job():
            ok = False
            try:
                ok = bool(func(mirror, *args))
                if not ok:
                    logger.warning(f"Cloud {description} did not complete; local copy kept")
            except Exception as e:
                logger.error(f"Cloud {description} failed: {e}")
            finally:
                with self._pending_lock:
                    self._pending[collection] -= 1
                    if ok:
                        dirty = self._dirty[collection]
                        for rid in record_ids:
                            if dirty.get(rid) == token:
                                del dirty[rid]

        if self._executor is not None:
            self._executor.submit(job)
        else:
            job()

    def _upsert_cloud(self, collection: str, rows: List[Dict[str, Any]]) -> None:
        table = self.CLOUD_TABLES[collection]
        self._submit_cloud(
            collection,
            f"upsert to '{table}'",
            lambda mirror, data: mirror.upsert(table, data),
            rows,
            record_ids=[r.get("id") for r in rows],
        )

    def _delete_cloud(self, collection: str, record_id: str) -> None:
        table = self.CLOUD_TABLES[collection]
        self._forget_dirty(collection, record_id)
        self._submit_cloud(
            collection,
            f"delete of '{table}/{record_id}'",
            lambda mirror, rid: mirror.delete(table, rid),
            record_id,
        )

    def _read_snapshot(self, collection: str):
        with self._pending_lock:
            pending = self._pending[collection]
        return self._write_seq[collection], pending

    def _is_stale(self, collection: str, snapshot) -> bool:
        seq, pending_before = snapshot
        with self._pending_lock:
            pending_now = self._pending[collection]
        return pending_before > 0 or pending_now > 0 or self._write_seq[collection] != seq

    def dirty_ids(self, collection: str) -> Set[str]:
        """Ids written locally whose cloud upsert has not succeeded yet."""
        with self._pending_lock:
            return set(self._dirty[collection])

    def _forget_dirty(self, collection: str, record_id: str) -> None:
        with self._pending_lock:
            self._dirty[collection].pop(record_id, None)

    def _keep_dirty(self, collection: str, local: List[Dict[str, Any]], remote: List[Dict[str, Any]]):
        """Overlay locally dirty records on a cloud result."""
        dirty = self.dirty_ids(collection)
        if not dirty:
            return remote
        keep = [r for r in local if r.get("id") in dirty]
        if keep:
            logger.debug(f"Keeping {len(keep)} unsynced local '{collection}' record(s) over cloud copy")
        return merge_records(remote, keep)

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every submitted mirror write has run."""
        if self._executor is not None:
            self._executor.submit(lambda: None).result(timeout=timeout)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _local_list(self, collection: str) -> List[Dict[str, Any]]:
        value = self.local.get(collection, [])
        return value if isinstance(value, list) else []

    def _read_entities(self, collection: str) -> List[Dict[str, Any]]:
        """Cloud-authoritative read with local fallback."""
        snapshot = self._read_snapshot(collection)
        remote = self._cloud().fetch_all(self.CLOUD_TABLES[collection])

        with self._locks[collection]:
            if remote is None:
                return self._local_list(collection)
            local = self._local_list(collection)
            if self._is_stale(collection, snapshot):
                logger.debug(f"Ignoring stale cloud read of '{collection}'")
                return local
            records = self._keep_dirty(collection, local, remote)
            self.local.set(collection, records)
            return records

    def _read_daily_logs(self) -> List[Dict[str, Any]]:
        """Merged read: union of local and cloud, cloud wins per id unless the local copy is unsynced."""
        snapshot = self._read_snapshot(keys.DAILY_LOGS)
        remote = self._cloud().fetch_all(self.CLOUD_TABLES[keys.DAILY_LOGS])

        with self._locks[keys.DAILY_LOGS]:
            local = self._local_list(keys.DAILY_LOGS)
            if remote is None:
                return local
            if self._is_stale(keys.DAILY_LOGS, snapshot):
                logger.debug("Cloud daily-log read overlapped a local write; local wins")
                return merge_records(remote, local)
            merged = self._keep_dirty(keys.DAILY_LOGS, local, merge_records(local, remote))
            self.local.set(keys.DAILY_LOGS, merged)
            return merged

    # =========================================================================
    # GENERIC ENTITY CRUD
    # =========================================================================

    def _save_one(self, collection: str, record: Dict[str, Any]) -> None:
        with self._locks[collection]:
            records = self._local_list(collection)
            for i, existing in enumerate(records):
                if existing.get("id") == record["id"]:
                    records[i] = record
                    break
            else:
                records.append(record)
            self._write_local(collection, records)
            self._upsert_cloud(collection, [record])
        self.bus.emit(EventType.DATA_CHANGED, table=self.CLOUD_TABLES[collection])

    def _save_all(self, collection: str, records: List[Dict[str, Any]]) -> None:
        with self._locks[collection]:
            self._write_local(collection, records)
            self._upsert_cloud(collection, records)
        self.bus.emit(EventType.DATA_CHANGED, table=self.CLOUD_TABLES[collection])

    def _delete_one(self, collection: str, record_id: str, confirm: bool) -> bool:
        if not confirm:
            raise ConfirmationRequiredError(
                f"Deleting from {collection} requires confirmation",
                action=f"delete_{collection}",
            )
        with self._locks[collection]:
            records = self._local_list(collection)
            remaining = [r for r in records if r.get("id") != record_id]
            removed = len(remaining) != len(records)
            self._write_local(collection, remaining)
            self._delete_cloud(collection, record_id)
        logger.info(f"Deleted {collection} record {record_id}")
        self.bus.emit(EventType.DATA_CHANGED, table=self.CLOUD_TABLES[collection])
        return removed

    # --- Children ------------------------------------------------------------

    def get_children(self) -> List[Child]:
        return [Child.from_dict(r) for r in self._read_entities(keys.CHILDREN)]

    def get_child(self, child_id: str) -> Optional[Child]:
        for row in self._local_list(keys.CHILDREN):
            if row.get("id") == child_id:
                return Child.from_dict(row)
        return None

    def save_child(self, child: Child) -> Child:
        if not child.first_name.strip():
            raise DataValidationError("First name is required", field="first_name")
        self._save_one(keys.CHILDREN, child.to_dict())
        return child

    def save_children(self, children: List[Child]) -> None:
        self._save_all(keys.CHILDREN, [c.to_dict() for c in children])

    def delete_child(self, child_id: str, confirm: bool = False) -> bool:
        return self._delete_one(keys.CHILDREN, child_id, confirm)

    # --- Parents -------------------------------------------------------------

    def get_parents(self) -> List[Parent]:
        return [Parent.from_dict(r) for r in self._read_entities(keys.PARENTS)]

    def get_parents_for(self, child: Child, opted_in_only: bool = False) -> List[Parent]:
        """Parents linked to a child, from the local cache."""
        by_id = {r.get("id"): r for r in self._local_list(keys.PARENTS)}
        parents = [Parent.from_dict(by_id[pid]) for pid in child.parent_ids if pid in by_id]
        if opted_in_only:
            parents = [p for p in parents if p.receives_email and p.email]
        return parents

    def save_parent(self, parent: Parent) -> Parent:
        if not parent.full_name.strip():
            raise DataValidationError("Parent name is required", field="full_name")
        self._save_one(keys.PARENTS, parent.to_dict())
        return parent

    def save_parents(self, parents: List[Parent]) -> None:
        self._save_all(keys.PARENTS, [p.to_dict() for p in parents])

    def delete_parent(self, parent_id: str, confirm: bool = False) -> bool:
        return self._delete_one(keys.PARENTS, parent_id, confirm)

    # --- Holidays ------------------------------------------------------------

    def get_holidays(self) -> List[Holiday]:
        holidays = [Holiday.from_dict(r) for r in self._read_entities(keys.HOLIDAYS)]
        return sorted(holidays, key=lambda h: h.date)

    def save_holiday(self, holiday: Holiday) -> Holiday:
        if not holiday.name.strip():
            raise DataValidationError("Holiday name is required", field="name")
        try:
            parse_date(holiday.date)
        except (TypeError, ValueError):
            raise DataValidationError(
                "Holiday date must be YYYY-MM-DD",
                field="date",
                expected=DATE_FORMAT,
                actual=str(holiday.date),
            )
        self._save_one(keys.HOLIDAYS, holiday.to_dict())
        return holiday

    def delete_holiday(self, holiday_id: str, confirm: bool = False) -> bool:
        return self._delete_one(keys.HOLIDAYS, holiday_id, confirm)

    def upcoming_holidays(self, from_date: str, days: int = 30) -> List[Holiday]:
        """Holidays dated within [from_date, from_date + days]."""
        start = parse_date(from_date)
        end = start + timedelta(days=days)
        upcoming = []
        for holiday in self.get_holidays():
            try:
                when = parse_date(holiday.date)
            except (TypeError, ValueError):
                continue
            if start <= when <= end:
                upcoming.append(holiday)
        return upcoming

    # --- Send logs -----------------------------------------------------------

    def get_send_logs(self) -> List[EmailSendLog]:
        return [EmailSendLog.from_dict(r) for r in self._read_entities(keys.SEND_LOGS)]

    def append_send_log(self, entry: EmailSendLog) -> EmailSendLog:
        self._save_one(keys.SEND_LOGS, entry.to_dict())
        return entry

    # =========================================================================
    # DAILY LOGS
    # =========================================================================

    @staticmethod
    def _find_log_index(records: List[Dict[str, Any]], child_id: str, date: str) -> Optional[int]:
        """Index by deterministic id, falling back to the natural key for legacy ids."""
        target = daily_log_id(child_id, date)
        fallback = None
        for i, record in enumerate(records):
            if record.get("id") == target:
                return i
            if fallback is None and record.get("child_id") == child_id and record.get("date") == date:
                fallback = i
        return fallback

    def get_daily_logs(self) -> List[DailyLog]:
        return [DailyLog.from_dict(r) for r in self._read_daily_logs()]

    def get_logs_for_date(self, date: str) -> Dict[str, DailyLog]:
        """Existing logs for a date keyed by child id (no creation)."""
        return {log.child_id: log for log in self.get_daily_logs() if log.date == date}

    def find_daily_log(self, child_id: str, date: str) -> Optional[DailyLog]:
        """Local lookup without creating."""
        records = self._local_list(keys.DAILY_LOGS)
        index = self._find_log_index(records, child_id, date)
        return DailyLog.from_dict(records[index]) if index is not None else None

    def get_or_create_daily_log(self, child_id: str, date: str) -> DailyLog:
        """
        Return the (child, date) log, creating a blank one on first access.

        Safe to call concurrently: the lookup and creation happen under the
        daily-log lock and the id is deterministic, so every device and
        thread converges on the same record.
        """
        self._read_daily_logs()

        with self._locks[keys.DAILY_LOGS]:
            records = self._local_list(keys.DAILY_LOGS)
            index = self._find_log_index(records, child_id, date)
            if index is not None:
                return DailyLog.from_dict(records[index])

            log = DailyLog.blank(child_id, date)
            record = log.to_dict()
            records.append(record)
            self._write_local(keys.DAILY_LOGS, records)
            self._upsert_cloud(keys.DAILY_LOGS, [record])

        logger.info(f"Created daily log {log.id}")
        return log

    def _mutate_daily_log(
        self,
        child_id: str,
        date: str,
        mutate: Callable[[DailyLog], Dict[str, Any]],
        replace: bool = False,
    ) -> DailyLog:
        """
        Single write path for daily-log changes.

        ``mutate`` receives the current log and returns the fields to change
        (or the full replacement record when ``replace`` is set). Exceptions
        it raises propagate and nothing is written.
        """
        self.get_or_create_daily_log(child_id, date)

        with self._locks[keys.DAILY_LOGS]:
            records = self._local_list(keys.DAILY_LOGS)
            index = self._find_log_index(records, child_id, date)
            if index is None:
                # Removed by a concurrent delete after creation
                records.append(DailyLog.blank(child_id, date).to_dict())
                index = len(records) - 1

            current = DailyLog.from_dict(records[index])
            changes = mutate(current)
            record = dict(changes) if replace else {**records[index], **changes}
            records[index] = record
            self._write_local(keys.DAILY_LOGS, records)
            self._upsert_cloud(keys.DAILY_LOGS, [record])

        log = DailyLog.from_dict(record)
        self.bus.emit(EventType.DAILY_LOG_UPDATED, table="daily_logs", record=log)
        return log

    # --- Lifecycle -----------------------------------------------------------

    def check_in(self, child_id: str, date: str, arrival_time: Optional[str] = None) -> DailyLog:
        arrival = arrival_time or current_time_str()
        log = self._mutate_daily_log(child_id, date, lambda cur: lifecycle.check_in(cur, arrival))
        logger.info(f"Checked in {child_id} on {date} at {arrival}")
        return log

    def check_out(self, child_id: str, date: str, departure_time: Optional[str] = None) -> DailyLog:
        departure = departure_time or current_time_str()
        log = self._mutate_daily_log(child_id, date, lambda cur: lifecycle.check_out(cur, departure))
        logger.info(f"Checked out {child_id} on {date} at {departure}")
        return log

    def undo_check_out(self, child_id: str, date: str) -> DailyLog:
        return self._mutate_daily_log(child_id, date, lifecycle.undo_check_out)

    def mark_sent(self, child_id: str, date: str) -> DailyLog:
        return self._mutate_daily_log(child_id, date, lifecycle.mark_sent)

    def reset_daily_log(self, child_id: str, date: str, confirm: bool = False) -> DailyLog:
        """Replace the day's log with a blank one under the same id."""
        if not confirm:
            raise ConfirmationRequiredError(
                "Resetting a day requires confirmation", action="reset_daily_log"
            )
        log = self._mutate_daily_log(child_id, date, lifecycle.reset, replace=True)
        logger.warning(f"Daily log {log.id} reset")
        return log

    def delete_daily_log(self, log_id: str, confirm: bool = False) -> bool:
        if not confirm:
            raise ConfirmationRequiredError(
                "Deleting a daily log requires confirmation", action="delete_daily_log"
            )
        with self._locks[keys.DAILY_LOGS]:
            records = self._local_list(keys.DAILY_LOGS)
            remaining = [r for r in records if r.get("id") != log_id]
            removed = len(remaining) != len(records)
            self._write_local(keys.DAILY_LOGS, remaining)
            self._delete_cloud(keys.DAILY_LOGS, log_id)
        logger.warning(f"Daily log {log_id} deleted")
        self.bus.emit(EventType.DATA_CHANGED, table="daily_logs")
        return removed

    # --- Field and entry edits -----------------------------------------------

    def update_daily_log(self, child_id: str, date: str, **changes) -> DailyLog:
        unknown = set(changes) - set(self.EDITABLE_LOG_FIELDS)
        if unknown:
            raise DataValidationError(
                f"Fields not editable: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        mood = changes.get("overall_mood")
        if mood is not None and mood not in [m.value for m in Mood]:
            raise DataValidationError("Unknown mood", field="overall_mood", actual=str(mood))
        return self._mutate_daily_log(child_id, date, lambda cur: dict(changes))

    @staticmethod
    def _entry_class(kind: str):
        if kind not in ENTRY_TYPES:
            raise DataValidationError(
                f"Unknown entry kind '{kind}'",
                field="kind",
                expected=", ".join(ENTRY_TYPES),
                actual=kind,
            )
        return ENTRY_TYPES[kind]

    def add_entry(self, child_id: str, date: str, kind: str, **fields):
        """Append a sub-entry (meal, bottle, nap, ...) and return it."""
        entry_cls = self._entry_class(kind)
        allowed = set(entry_cls.__dataclass_fields__)
        unknown = set(fields) - allowed
        if unknown:
            raise DataValidationError(
                f"Unknown {kind} fields: {', '.join(sorted(unknown))}", field=sorted(unknown)[0]
            )
        entry = entry_cls(**fields)

        def append(cur: DailyLog) -> Dict[str, Any]:
            return {kind: list(getattr(cur, kind)) + [entry.to_dict()]}

        self._mutate_daily_log(child_id, date, append)
        return entry

    def update_entry(self, child_id: str, date: str, kind: str, entry_id: str, **changes):
        entry_cls = self._entry_class(kind)
        changes.pop("id", None)
        updated = {}

        def edit(cur: DailyLog) -> Dict[str, Any]:
            entries = list(getattr(cur, kind))
            for i, existing in enumerate(entries):
                if existing.get("id") == entry_id:
                    entries[i] = {**existing, **changes}
                    updated["entry"] = entries[i]
                    return {kind: entries}
            raise RecordNotFoundError(
                f"No {kind} entry {entry_id}", collection=kind, record_id=entry_id
            )

        self._mutate_daily_log(child_id, date, edit)
        return entry_cls.from_dict(updated["entry"])

    def remove_entry(self, child_id: str, date: str, kind: str, entry_id: str) -> DailyLog:
        self._entry_class(kind)

        def drop(cur: DailyLog) -> Dict[str, Any]:
            entries = [e for e in getattr(cur, kind) if e.get("id") != entry_id]
            if len(entries) == len(getattr(cur, kind)):
                raise RecordNotFoundError(
                    f"No {kind} entry {entry_id}", collection=kind, record_id=entry_id
                )
            return {kind: entries}

        return self._mutate_daily_log(child_id, date, drop)

    # --- Remote application hooks (realtime channel) -------------------------

    def apply_remote_daily_log(self, row: Dict[str, Any]) -> Optional[DailyLog]:
        """Merge one daily-log row received from another device."""
        record_id = row.get("id")
        if not record_id:
            logger.warning("Ignoring remote daily log without id")
            return None
        self._forget_dirty(keys.DAILY_LOGS, record_id)
        with self._locks[keys.DAILY_LOGS]:
            records = merge_records(self._local_list(keys.DAILY_LOGS), [row])
            self._write_local(keys.DAILY_LOGS, records)
        return DailyLog.from_dict(row)

    def remove_local_record(self, collection: str, record_id: str) -> bool:
        """Drop a record locally only (its cloud row is already gone)."""
        if collection not in self.CLOUD_TABLES:
            logger.debug(f"Ignoring removal from unknown collection '{collection}'")
            return False
        self._forget_dirty(collection, record_id)
        with self._locks[collection]:
            records = self._local_list(collection)
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) == len(records):
                return False
            self._write_local(collection, remaining)
        return True

    # =========================================================================
    # SETTINGS & AUTH
    # =========================================================================

    def get_settings(self) -> Settings:
        stored = self.local.get(keys.SETTINGS, None)
        settings = Settings.from_dict(stored if isinstance(stored, dict) else {})
        if not settings.admin_password:
            settings.admin_password = DEFAULT_ADMIN_PASSWORD
        return settings

    def save_settings(self, settings: Settings) -> Settings:
        """Persist locally, rebuild the cloud client, push shareable settings."""
        with self._locks[keys.SETTINGS]:
            self._write_local(keys.SETTINGS, settings.to_dict())
        self.reset_cloud()
        self._push_settings(settings)
        self.bus.emit(EventType.SETTINGS_UPDATED, table=self.SETTINGS_TABLE, record=settings)
        return settings

    def _push_settings(self, settings: Settings) -> None:
        row = {"id": self.SETTINGS_ROW_ID, "data": settings.shareable()}
        self._submit_cloud(
            keys.SETTINGS,
            f"upsert to '{self.SETTINGS_TABLE}'",
            lambda mirror, data: mirror.upsert(self.SETTINGS_TABLE, [data]),
            row,
        )

    def sync_settings_from_cloud(self) -> Optional[Settings]:
        """Overlay shared settings from the cloud, keeping local credentials."""
        row = self._cloud().fetch_by_id(self.SETTINGS_TABLE, self.SETTINGS_ROW_ID)
        if not row or not isinstance(row.get("data"), dict):
            return None
        with self._locks[keys.SETTINGS]:
            merged = merge_settings(self.get_settings().to_dict(), row["data"])
            self.local.set(keys.SETTINGS, merged)
        logger.info("Settings refreshed from cloud")
        return Settings.from_dict(merged)

    def is_authenticated(self) -> bool:
        return self.local.get(keys.AUTH_FLAG, "false") == "true"

    def set_authenticated(self, value: bool) -> None:
        with self._locks[keys.AUTH_FLAG]:
            self.local.set(keys.AUTH_FLAG, "true" if value else "false")

    # =========================================================================
    # ONE-SHOT SEED
    # =========================================================================

    def sync_local_to_cloud(self) -> bool:
        """
        Seed an empty cloud from local data, then push settings.

        Returns:
            True if the cloud tables were seeded
        """
        mirror = self._cloud()
        if not mirror.enabled:
            return False

        seeded = False
        with LogContext(logger, "Local to cloud sync"):
            if mirror.count(self.CLOUD_TABLES[keys.CHILDREN]) == 0:
                for collection in (keys.CHILDREN, keys.PARENTS, keys.DAILY_LOGS, keys.HOLIDAYS):
                    rows = self._local_list(collection)
                    if rows and not mirror.upsert(self.CLOUD_TABLES[collection], rows):
                        logger.warning(f"Seeding '{collection}' to cloud failed")
                seeded = True
            self._push_settings(self.get_settings())
        return seeded

# =============================================================================
# tests/unit/test_data_store.py
# Unit Tests for the DaycareStore facade
# =============================================================================

import threading

import pytest

from daycare_core.errors import (
    ConfirmationRequiredError,
    DataValidationError,
    LifecycleError,
    RecordNotFoundError,
)
from daycare_core.offline.events import EventType
from daycare_core.offline.models import Child, Holiday, MealEntry, Parent, Settings

DAY = "2024-06-01"


class TestEntityReads:
    """Cloud-authoritative reads with local fallback"""

    def test_local_only_when_cloud_disabled(self, store, offline_mirror):
        store.save_child(Child(id="c1", first_name="Aisha"))

        children = store.get_children()

        assert [c.id for c in children] == ["c1"]
        assert offline_mirror.calls_to("upsert") == []

    def test_cloud_result_replaces_local(self, make_store, fake_mirror, local_store):
        cloud = fake_mirror(tables={"children": [{"id": "c9", "first_name": "Remote"}]})
        local_store.set("children", [{"id": "c1", "first_name": "Local"}])
        store = make_store(cloud)

        children = store.get_children()

        assert [c.first_name for c in children] == ["Remote"]
        assert local_store.get("children") == [{"id": "c9", "first_name": "Remote"}]

    def test_failed_cloud_read_falls_back_to_local(self, cloud_store, cloud):
        cloud_store.save_parent(Parent(id="p1", full_name="Sara"))
        cloud.offline = True

        assert [p.full_name for p in cloud_store.get_parents()] == ["Sara"]

    def test_pending_write_wins_over_cloud_read(self, make_store, cloud, gate):
        store = make_store(cloud, background_writes=True)
        cloud.upsert_gate = gate

        store.save_child(Child(id="c1", first_name="Aisha"))
        children = store.get_children()

        gate.set()
        store.flush(timeout=5)
        assert [c.id for c in children] == ["c1"]
        assert cloud.tables["children"][0]["id"] == "c1"

    def test_get_child_and_parents_for(self, seeded_store):
        child = seeded_store.get_child("c1")

        assert child.first_name == "Aisha"
        assert [p.id for p in seeded_store.get_parents_for(child)] == ["p1", "p2"]
        assert [p.id for p in seeded_store.get_parents_for(child, opted_in_only=True)] == ["p1"]
        assert seeded_store.get_child("missing") is None


class TestEntityWrites:

    def test_save_child_requires_first_name(self, store):
        with pytest.raises(DataValidationError):
            store.save_child(Child(first_name="  "))

    def test_save_parent_requires_name(self, store):
        with pytest.raises(DataValidationError):
            store.save_parent(Parent(full_name=""))

    def test_save_updates_in_place(self, store):
        store.save_child(Child(id="c1", first_name="Aisha"))
        store.save_child(Child(id="c1", first_name="Aisha", nickname="Ash"))

        children = store.get_children()
        assert len(children) == 1
        assert children[0].display_name == "Aisha (Ash)"

    def test_save_mirrors_to_cloud(self, cloud_store, cloud):
        cloud_store.save_child(Child(id="c1", first_name="Aisha"))

        assert cloud.tables["children"][0]["first_name"] == "Aisha"

    def test_delete_requires_confirmation(self, seeded_store):
        with pytest.raises(ConfirmationRequiredError):
            seeded_store.delete_child("c1")

        assert seeded_store.get_child("c1") is not None

    def test_confirmed_delete(self, cloud_store, cloud):
        cloud_store.save_child(Child(id="c1", first_name="Aisha"))

        assert cloud_store.delete_child("c1", confirm=True) is True
        assert cloud_store.get_children() == []
        assert cloud.calls_to("delete", "children") == [("delete", "children", "c1")]

    def test_cloud_write_failure_keeps_local(self, cloud_store, cloud):
        cloud.fail_writes = True

        cloud_store.save_child(Child(id="c1", first_name="Aisha"))
        cloud.offline = True

        assert cloud_store.get_child("c1").first_name == "Aisha"

    def test_save_emits_data_changed(self, store, bus):
        events = []
        bus.subscribe(EventType.DATA_CHANGED, events.append)

        store.save_child(Child(first_name="Aisha"))

        assert events[0].table == "children"


class TestHolidays:

    def test_invalid_date_rejected(self, store):
        with pytest.raises(DataValidationError) as exc:
            store.save_holiday(Holiday(name="Eid", date="06/17/2024"))

        assert exc.value.details["field"] == "date"

    def test_sorted_by_date(self, store):
        store.save_holiday(Holiday(name="B", date="2024-07-04"))
        store.save_holiday(Holiday(name="A", date="2024-06-17"))

        assert [h.name for h in store.get_holidays()] == ["A", "B"]

    def test_upcoming_window(self, store):
        store.save_holiday(Holiday(name="Past", date="2024-05-31"))
        store.save_holiday(Holiday(name="Soon", date="2024-06-17"))
        store.save_holiday(Holiday(name="Edge", date="2024-07-01"))
        store.save_holiday(Holiday(name="Later", date="2024-07-02"))

        upcoming = store.upcoming_holidays(DAY, days=30)

        assert [h.name for h in upcoming] == ["Soon", "Edge"]


class TestDailyLogs:

    def test_get_or_create_builds_blank_log(self, store):
        log = store.get_or_create_daily_log("c1", DAY)

        assert log.id == "c1_2024-06-01"
        assert log.is_present is False
        assert log.status == "In Progress"
        assert log.arrival_time == "08:00"

    def test_get_or_create_is_idempotent(self, store):
        store.get_or_create_daily_log("c1", DAY)
        store.get_or_create_daily_log("c1", DAY)

        assert len(store.get_daily_logs()) == 1

    def test_concurrent_get_or_create_makes_one_log(self, store):
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(store.get_or_create_daily_log("c1", DAY).id)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert set(results) == {"c1_2024-06-01"}
        assert len(store.local.get("daily_logs")) == 1

    def test_legacy_id_found_by_natural_key(self, store, local_store):
        local_store.set("daily_logs", [{"id": "old-uuid", "child_id": "c1", "date": DAY}])

        log = store.get_or_create_daily_log("c1", DAY)

        assert log.id == "old-uuid"
        assert len(local_store.get("daily_logs")) == 1

    def test_logs_for_date_does_not_create(self, store):
        store.get_or_create_daily_log("c1", DAY)

        logs = store.get_logs_for_date(DAY)

        assert list(logs) == ["c1"]
        assert store.get_logs_for_date("2024-06-02") == {}
        assert store.find_daily_log("c2", DAY) is None

    def test_merged_read_unions_and_persists(self, make_store, fake_mirror, local_store):
        local_store.set("daily_logs", [
            {"id": "c1_2024-06-01", "child_id": "c1", "date": DAY, "teacher_notes": "local"},
            {"id": "c2_2024-06-01", "child_id": "c2", "date": DAY},
        ])
        cloud = fake_mirror(tables={"daily_logs": [
            {"id": "c1_2024-06-01", "child_id": "c1", "date": DAY, "teacher_notes": "remote"},
            {"id": "c3_2024-06-01", "child_id": "c3", "date": DAY},
        ]})
        store = make_store(cloud)

        logs = {log.id: log for log in store.get_daily_logs()}

        assert set(logs) == {"c1_2024-06-01", "c2_2024-06-01", "c3_2024-06-01"}
        assert logs["c1_2024-06-01"].teacher_notes == "remote"
        assert len(local_store.get("daily_logs")) == 3

    def test_check_in_and_out(self, cloud_store, cloud):
        cloud_store.check_in("c1", DAY, "08:05")
        log = cloud_store.check_out("c1", DAY, "17:02")

        assert log.is_present is True
        assert log.arrival_time == "08:05"
        assert log.departure_time == "17:02"
        assert log.status == "Completed"
        assert cloud.tables["daily_logs"][0]["status"] == "Completed"

    def test_check_out_without_check_in_rejected(self, store):
        with pytest.raises(LifecycleError):
            store.check_out("c1", DAY, "17:00")

        assert store.find_daily_log("c1", DAY).status == "In Progress"

    def test_undo_check_out(self, store):
        store.check_in("c1", DAY, "08:05")
        store.add_entry("c1", DAY, "meals", time="12:00", type="Lunch", items="Rice")
        store.add_entry("c1", DAY, "naps", start_time="13:00", end_time="14:30")
        store.add_entry("c1", DAY, "diapers", time="15:00", type="Wet")
        before = store.check_out("c1", DAY, "17:02")

        log = store.undo_check_out("c1", DAY)

        assert log.status == "In Progress"
        assert log.is_present is True
        assert log.departure_time == "17:02"
        assert (log.meals, log.naps, log.diapers) == (before.meals, before.naps, before.diapers)
        assert [m["items"] for m in log.meals] == ["Rice"]
        assert len(log.naps) == 1 and len(log.diapers) == 1

    def test_mutation_emits_daily_log_updated(self, store, bus):
        events = []
        bus.subscribe(EventType.DAILY_LOG_UPDATED, events.append)

        store.check_in("c1", DAY, "08:05")

        assert events[0].record.is_present is True

    def test_reset_requires_confirmation(self, store):
        store.check_in("c1", DAY, "08:05")

        with pytest.raises(ConfirmationRequiredError):
            store.reset_daily_log("c1", DAY)

        log = store.reset_daily_log("c1", DAY, confirm=True)
        assert log.is_present is False
        assert log.id == "c1_2024-06-01"

    def test_delete_daily_log(self, store):
        log = store.get_or_create_daily_log("c1", DAY)

        with pytest.raises(ConfirmationRequiredError):
            store.delete_daily_log(log.id)

        assert store.delete_daily_log(log.id, confirm=True) is True
        assert store.get_daily_logs() == []

    def test_update_daily_log_fields(self, store):
        log = store.update_daily_log("c1", DAY, overall_mood="Okay", teacher_notes="Sleepy")

        assert log.overall_mood == "Okay"
        assert log.teacher_notes == "Sleepy"

    def test_update_rejects_non_editable_field(self, store):
        with pytest.raises(DataValidationError):
            store.update_daily_log("c1", DAY, status="Sent")

    def test_update_rejects_unknown_mood(self, store):
        with pytest.raises(DataValidationError):
            store.update_daily_log("c1", DAY, overall_mood="Ecstatic")


class TestEntries:

    def test_add_entry(self, store):
        meal = store.add_entry("c1", DAY, "meals", time="12:00", type="Lunch", items="Rice")

        assert isinstance(meal, MealEntry)
        log = store.find_daily_log("c1", DAY)
        assert log.meals == [meal.to_dict()]

    def test_unknown_kind_rejected(self, store):
        with pytest.raises(DataValidationError):
            store.add_entry("c1", DAY, "snacks", time="10:00")

    def test_unknown_field_rejected(self, store):
        with pytest.raises(DataValidationError):
            store.add_entry("c1", DAY, "naps", duration="1h")

    def test_update_entry(self, store):
        nap = store.add_entry("c1", DAY, "naps", start_time="13:00")

        updated = store.update_entry("c1", DAY, "naps", nap.id, end_time="14:30", id="ignored")

        assert updated.id == nap.id
        assert updated.end_time == "14:30"

    def test_update_missing_entry(self, store):
        with pytest.raises(RecordNotFoundError):
            store.update_entry("c1", DAY, "naps", "nope", end_time="14:30")

    def test_remove_entry(self, store):
        first = store.add_entry("c1", DAY, "diapers", time="09:00", type="Wet")
        second = store.add_entry("c1", DAY, "diapers", time="11:00", type="BM")

        log = store.remove_entry("c1", DAY, "diapers", first.id)

        assert [d["id"] for d in log.diapers] == [second.id]

        with pytest.raises(RecordNotFoundError):
            store.remove_entry("c1", DAY, "diapers", first.id)


class TestUnsyncedWrites:
    """Cloud reads work but cloud writes are rejected"""

    def test_edit_after_failed_upsert_keeps_check_in(self, cloud_store, cloud):
        cloud_store.get_or_create_daily_log("c1", DAY)
        cloud.fail_writes = True

        cloud_store.check_in("c1", DAY, "08:05")
        cloud_store.add_entry("c1", DAY, "meals", time="12:00", type="Lunch", items="Rice")

        log = cloud_store.find_daily_log("c1", DAY)
        assert log.is_present is True
        assert log.arrival_time == "08:05"
        assert len(log.meals) == 1
        assert cloud.tables["daily_logs"][0]["is_present"] is False

    def test_merged_read_prefers_unsynced_local_log(self, cloud_store, cloud):
        cloud_store.get_or_create_daily_log("c1", DAY)
        cloud.fail_writes = True

        cloud_store.check_in("c1", DAY, "08:05")
        logs = cloud_store.get_daily_logs()

        assert [log.is_present for log in logs] == [True]
        assert cloud_store.find_daily_log("c1", DAY).is_present is True
        assert cloud_store.dirty_ids("daily_logs") == {"c1_2024-06-01"}

    def test_successful_upsert_clears_dirty_flag(self, cloud_store, cloud):
        cloud_store.get_or_create_daily_log("c1", DAY)
        cloud.fail_writes = True
        cloud_store.check_in("c1", DAY, "08:05")

        cloud.fail_writes = False
        cloud_store.add_entry("c1", DAY, "diapers", time="10:00", type="Wet")

        assert cloud_store.dirty_ids("daily_logs") == set()
        assert cloud.tables["daily_logs"][0]["is_present"] is True

    def test_cloud_copy_wins_once_synced(self, cloud_store, cloud):
        cloud_store.check_in("c1", DAY, "08:05")
        cloud.tables["daily_logs"][0]["arrival_time"] = "08:30"

        assert cloud_store.get_daily_logs()[0].arrival_time == "08:30"

    def test_unsynced_child_survives_entity_read(self, cloud_store, cloud, local_store):
        cloud.fail_writes = True

        cloud_store.save_child(Child(id="c9", first_name="Noor"))
        children = cloud_store.get_children()

        assert [c.id for c in children] == ["c9"]
        assert [r["id"] for r in local_store.get("children")] == ["c9"]

    def test_unsynced_edit_not_reverted_by_entity_read(self, cloud_store, cloud):
        cloud_store.save_parent(Parent(id="p1", full_name="Sara Khan", phone="555-0101"))
        cloud.fail_writes = True

        cloud_store.save_parent(Parent(id="p1", full_name="Sara Khan", phone="555-0199"))
        cloud.tables["parents"].append({"id": "p2", "full_name": "Omar Khan"})

        parents = {p.id: p for p in cloud_store.get_parents()}

        assert parents["p1"].phone == "555-0199"
        assert "p2" in parents

    def test_delete_forgets_dirty_record(self, cloud_store, cloud):
        cloud.fail_writes = True
        cloud_store.save_child(Child(id="c9", first_name="Noor"))

        cloud_store.delete_child("c9", confirm=True)

        assert cloud_store.dirty_ids("children") == set()


class TestRemoteApplication:

    def test_apply_remote_daily_log(self, store):
        store.check_in("c1", DAY, "08:05")

        log = store.apply_remote_daily_log(
            {"id": "c1_2024-06-01", "child_id": "c1", "date": DAY, "status": "Sent", "is_present": True}
        )

        assert log.status == "Sent"
        assert store.find_daily_log("c1", DAY).status == "Sent"

    def test_apply_remote_without_id_ignored(self, store):
        assert store.apply_remote_daily_log({"child_id": "c1"}) is None

    def test_remove_local_record(self, store):
        store.get_or_create_daily_log("c1", DAY)

        assert store.remove_local_record("daily_logs", "c1_2024-06-01") is True
        assert store.remove_local_record("daily_logs", "c1_2024-06-01") is False
        assert store.remove_local_record("unknown", "x") is False


class TestSettingsAndAuth:

    def test_default_settings(self, store):
        settings = store.get_settings()

        assert settings.daycare_name == "Honeybees Daycare"
        assert settings.admin_password == "honeybees2025"

    def test_blank_password_falls_back_to_default(self, store, local_store):
        local_store.set("settings", {"admin_password": ""})

        assert store.get_settings().admin_password == "honeybees2025"

    def test_saved_settings_never_push_credentials(self, cloud_store, cloud):
        cloud_store.save_settings(Settings(daycare_name="Busy Bees",
                                           cloud_url="https://mine.supabase.co", cloud_key="secret"))

        row = cloud.tables["app_settings"][0]
        assert row["id"] == "global"
        assert row["data"]["daycare_name"] == "Busy Bees"
        assert "cloud_url" not in row["data"]
        assert "cloud_key" not in row["data"]

    def test_save_settings_rebuilds_mirror(self, local_store, bus, fake_mirror):
        from daycare_core.offline.data_store import DaycareStore

        seen = []

        def factory(url, key):
            seen.append(url)
            return fake_mirror(enabled=False)

        store = DaycareStore(local_store, mirror_factory=factory, bus=bus, background_writes=False)
        store.is_cloud_enabled()
        store.save_settings(Settings(cloud_url="https://new.supabase.co", cloud_key="k"))
        store.is_cloud_enabled()

        assert seen == ["", "https://new.supabase.co"]

    def test_sync_settings_keeps_local_credentials(self, make_store, fake_mirror, local_store):
        local_store.set("settings", {"cloud_url": "https://mine.supabase.co", "cloud_key": "mine"})
        cloud = fake_mirror(tables={"app_settings": [
            {"id": "global", "data": {"daycare_name": "Remote Bees", "cloud_url": "https://other.co"}}
        ]})
        store = make_store(cloud)

        settings = store.sync_settings_from_cloud()

        assert settings.daycare_name == "Remote Bees"
        assert settings.cloud_url == "https://mine.supabase.co"
        assert store.get_settings().cloud_key == "mine"

    def test_sync_settings_without_remote_row(self, cloud_store):
        assert cloud_store.sync_settings_from_cloud() is None

    def test_auth_flag(self, store, local_store):
        assert store.is_authenticated() is False

        store.set_authenticated(True)
        assert local_store.get("auth_flag") == "true"
        assert store.is_authenticated() is True

        store.set_authenticated(False)
        assert store.is_authenticated() is False


class TestSeeding:

    def test_seeds_empty_cloud(self, seeded_store, make_store, cloud):
        seeded_store.get_or_create_daily_log("c1", DAY)
        store = make_store(cloud)

        assert store.sync_local_to_cloud() is True
        assert [r["id"] for r in cloud.tables["children"]] == ["c1"]
        assert len(cloud.tables["parents"]) == 2
        assert len(cloud.tables["daily_logs"]) == 1
        assert cloud.tables["app_settings"][0]["id"] == "global"

    def test_skips_when_cloud_has_children(self, seeded_store, make_store, fake_mirror):
        cloud = fake_mirror(tables={"children": [{"id": "remote"}]})
        store = make_store(cloud)

        assert store.sync_local_to_cloud() is False
        assert cloud.calls_to("upsert", "children") == []
        assert cloud.calls_to("upsert", "app_settings")

    def test_noop_when_cloud_disabled(self, seeded_store):
        assert seeded_store.sync_local_to_cloud() is False

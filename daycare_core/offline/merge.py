# =============================================================================
# daycare_core/offline/merge.py
# Merge policy between local and cloud copies of a collection
# =============================================================================
"""
Pure merge functions used by the data store.

Policy is last-write-wins by overwrite: for any id present in both copies the
``remote`` record replaces the ``local`` one wholesale. Records present on
only one side are kept. Swap the arguments to give local precedence.
"""

from typing import Any, Dict, List, Optional

from daycare_core.offline.models import LOCAL_ONLY_SETTINGS


def merge_records(
    local: Optional[List[Dict[str, Any]]],
    remote: Optional[List[Dict[str, Any]]],
) -> List[Dict[str, Any]]:
    """
    Union two record lists keyed by ``id``, ``remote`` winning per id.

    Order: local records first (in their original order, replaced in place
    by their remote version), then remote-only records in remote order.
    Records without an id are kept from ``local`` and dropped from ``remote``.
    """
    local = local or []
    remote = remote or []

    remote_by_id = {r["id"]: r for r in remote if r.get("id")}
    merged: List[Dict[str, Any]] = []
    seen = set()

    for record in local:
        record_id = record.get("id")
        if record_id and record_id in remote_by_id:
            merged.append(remote_by_id[record_id])
        else:
            merged.append(record)
        if record_id:
            seen.add(record_id)

    for record_id, record in remote_by_id.items():
        if record_id not in seen:
            merged.append(record)
            seen.add(record_id)

    return merged


def merge_settings(
    local: Optional[Dict[str, Any]],
    remote: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Overlay shared settings from the cloud on the local settings.

    Device-local credentials (cloud URL and key) always keep their local
    value, even when the remote payload carries its own.
    """
    merged = dict(local or {})
    merged.update(remote or {})
    for key in LOCAL_ONLY_SETTINGS:
        if local and key in local:
            merged[key] = local[key]
        else:
            merged.pop(key, None)
    return merged

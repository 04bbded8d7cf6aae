# =============================================================================
# daycare_core/offline/cloud_mirror.py
# Best-effort Supabase mirror of the local collections
# =============================================================================
"""
CloudMirror - thin, failure-tolerant wrapper around a Supabase client.

The client is built lazily from the URL and key held in Settings. When the
configuration is obviously unusable no client is constructed and no network
call is made. Every operation reports failure through its return value
(``None`` / ``False``) so callers can fall back to the local store.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse
import logging

logger = logging.getLogger(__name__)


PLACEHOLDER_MARKERS = ("your-project", "your_supabase", "example", "<", "xxx")

BATCH_SIZE = 1000

ClientFactory = Callable[[str, str, float], Any]


def validate_cloud_config(url: Optional[str], key: Optional[str]) -> Optional[str]:
    """
    Check whether a URL/key pair is worth handing to the Supabase client.

    Returns:
        None when usable, otherwise a short reason
    """
    url = (url or "").strip()
    key = (key or "").strip()

    if not url:
        return "cloud URL is blank"
    lowered = url.lower()
    for marker in PLACEHOLDER_MARKERS:
        if marker in lowered:
            return f"cloud URL looks like a placeholder ({marker!r})"

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        return "cloud URL must start with http:// or https://"
    host = parsed.hostname or ""
    if not host or ("." not in host and host != "localhost"):
        return "cloud URL has no recognisable host"

    if not key:
        return "cloud key is blank"
    return None


def create_supabase_client(url: str, key: str, timeout: float):
    """Default factory: a synchronous supabase-py client with a bounded timeout."""
    from supabase import ClientOptions, create_client

    return create_client(url, key, options=ClientOptions(postgrest_client_timeout=timeout))


class CloudMirror:
    """
    Per-table fetch/upsert/delete against the shared cloud backend.

    Usage:
        mirror = CloudMirror(settings.cloud_url, settings.cloud_key)
        rows = mirror.fetch_all("children")   # None -> use local
        mirror.upsert("children", [child.to_dict()])
    """

    def __init__(
        self,
        url: Optional[str],
        key: Optional[str],
        timeout: float = 10.0,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.url = (url or "").strip()
        self.key = (key or "").strip()
        self.timeout = timeout
        self._client_factory = client_factory or create_supabase_client
        self._client = None
        self._attempted = False
        self.disabled_reason: Optional[str] = None

    @property
    def client(self):
        """The Supabase client, built on first use; None when disabled."""
        if self._client is None and not self._attempted:
            self._attempted = True
            self._client = self._build_client()
        return self._client

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _build_client(self):
        reason = validate_cloud_config(self.url, self.key)
        if reason:
            self.disabled_reason = reason
            logger.info(f"Cloud mirror disabled: {reason}")
            return None

        try:
            client = self._client_factory(self.url, self.key, self.timeout)
        except Exception as e:
            self.disabled_reason = f"client construction failed: {e}"
            logger.error(f"Cloud mirror init error: {e}")
            return None

        logger.info(f"Cloud mirror connected to {urlparse(self.url).hostname}")
        return client

    # =========================================================================
    # TABLE OPERATIONS
    # =========================================================================

    def fetch_all(self, table: str) -> Optional[List[Dict[str, Any]]]:
        """
        Fetch every row of a table in 1000-row pages.

        Returns:
            List of rows, or None when disabled or on any failure
        """
        client = self.client
        if client is None:
            return None

        try:
            rows: List[Dict[str, Any]] = []
            offset = 0
            while True:
                response = (
                    client.table(table)
                    .select("*")
                    .range(offset, offset + BATCH_SIZE - 1)
                    .execute()
                )
                batch = response.data or []
                rows.extend(batch)
                if len(batch) < BATCH_SIZE:
                    break
                offset += BATCH_SIZE
            return rows
        except Exception as e:
            logger.warning(f"Cloud fetch of '{table}' failed, using local data: {e}")
            return None

    def fetch_by_id(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one row by id; None when absent, disabled or on failure."""
        client = self.client
        if client is None:
            return None

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Cloud fetch of '{table}/{record_id}' failed: {e}")
            return None

        data = response.data or []
        return data[0] if data else None

    def upsert(self, table: str, rows: List[Dict[str, Any]]) -> bool:
        """Insert-or-update rows keyed by id."""
        if not rows:
            return True
        client = self.client
        if client is None:
            return False

        try:
            client.table(table).upsert(rows).execute()
        except Exception as e:
            logger.error(f"Cloud upsert to '{table}' failed ({len(rows)} rows): {e}")
            return False
        logger.debug(f"Cloud upsert to '{table}': {len(rows)} rows")
        return True

    def delete(self, table: str, record_id: str) -> bool:
        """Delete one row by id."""
        client = self.client
        if client is None:
            return False

        try:
            client.table(table).delete().eq("id", record_id).execute()
        except Exception as e:
            logger.error(f"Cloud delete of '{table}/{record_id}' failed: {e}")
            return False
        return True

    def count(self, table: str) -> Optional[int]:
        """Exact row count of a table, or None on failure."""
        client = self.client
        if client is None:
            return None

        try:
            response = client.table(table).select("id", count="exact").limit(1).execute()
        except Exception as e:
            logger.warning(f"Cloud count of '{table}' failed: {e}")
            return None
        if response.count is None:
            return len(response.data or [])
        return response.count

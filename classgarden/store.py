"""
Record store adapters for Class Garden.

The aggregation engine only needs four primitives from a document store:
equality-filtered selects, "field is one of these values" selects, a keyed
get, and a keyed upsert. ``SupabaseStore`` backs them with the hosted
Postgres tables; ``MemoryStore`` keeps rows in dicts and serves the demo
dataset and the test suite.
"""
import copy
import logging
import threading

from supabase import create_client, Client

from .config import MAX_IN_VALUES

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the backing store cannot serve a query."""


class RecordStore:
    """Interface shared by all store adapters."""

    in_limit = MAX_IN_VALUES

    def select(self, table, filters=None):
        raise NotImplementedError

    def select_in(self, table, field, values, filters=None):
        raise NotImplementedError

    def get(self, table, key_field, key):
        raise NotImplementedError

    def upsert(self, table, row, key_field):
        raise NotImplementedError


# ═══════════════════════════════════════════════════════
# SUPABASE
# ═══════════════════════════════════════════════════════

class SupabaseStore(RecordStore):

    def __init__(self, client: Client = None, url=None, key=None):
        self._client = client
        self._url = url
        self._key = key

    @property
    def client(self) -> Client:
        """Get or create the Supabase client."""
        if self._client is None:
            if not self._url or not self._key:
                raise StoreError("Supabase credentials not configured. Check SUPABASE_URL and SUPABASE_SERVICE_KEY in .env")
            self._client = create_client(self._url, self._key)
        return self._client

    def _filtered(self, table, filters):
        query = self.client.table(table).select('*')
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        return query

    def select(self, table, filters=None):
        try:
            return self._filtered(table, filters).execute().data or []
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"select on {table} failed: {e}") from e

    def select_in(self, table, field, values, filters=None):
        values = list(values)
        if len(values) > self.in_limit:
            raise StoreError(f"'in' filter on {table}.{field} got {len(values)} values (limit {self.in_limit})")
        try:
            return self._filtered(table, filters).in_(field, values).execute().data or []
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"select_in on {table}.{field} failed: {e}") from e

    def get(self, table, key_field, key):
        try:
            rows = self._filtered(table, {key_field: key}).limit(1).execute().data
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"get on {table} failed: {e}") from e
        return rows[0] if rows else None

    def upsert(self, table, row, key_field):
        try:
            result = self.client.table(table).upsert(row, on_conflict=key_field).execute()
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"upsert on {table} failed: {e}") from e
        return result.data[0] if result.data else row


# ═══════════════════════════════════════════════════════
# IN-MEMORY
# ═══════════════════════════════════════════════════════

class MemoryStore(RecordStore):
    """Dict-backed store. Every ``select_in`` is recorded in ``queries``."""

    def __init__(self, tables=None, in_limit=MAX_IN_VALUES):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.in_limit = in_limit
        self.queries = []
        self._lock = threading.Lock()

    @staticmethod
    def _matches(row, filters):
        return all(row.get(field) == value for field, value in (filters or {}).items())

    def select(self, table, filters=None):
        return [copy.deepcopy(r) for r in self.tables.get(table, []) if self._matches(r, filters)]

    def select_in(self, table, field, values, filters=None):
        values = list(values)
        with self._lock:
            self.queries.append((table, field, tuple(values)))
        if not values:
            raise StoreError(f"'in' filter on {table}.{field} needs at least one value")
        if len(values) > self.in_limit:
            raise StoreError(f"'in' filter on {table}.{field} got {len(values)} values (limit {self.in_limit})")
        wanted = set(values)
        return [r for r in self.select(table, filters) if r.get(field) in wanted]

    def get(self, table, key_field, key):
        rows = self.select(table, {key_field: key})
        return rows[0] if rows else None

    def upsert(self, table, row, key_field):
        row = copy.deepcopy(row)
        with self._lock:
            rows = self.tables.setdefault(table, [])
            for i, existing in enumerate(rows):
                if existing.get(key_field) == row.get(key_field):
                    rows[i] = row
                    break
            else:
                rows.append(row)
        logger.debug("Upserted %s row %s=%s", table, key_field, row.get(key_field))
        return copy.deepcopy(row)

"""Supabase-backed store.

Expected tables (snake_case columns, ``created_at`` defaulting to now()):

    racks(id text primary key, name text, total_width float8, is_double bool,
          reserved_brand text null, owner_id text, created_at timestamptz)
    tires(id text primary key, eprel_code text, brand text, model text,
          width float8, aspect_ratio int, diameter int, owner_id text,
          rack_id text null references racks(id), rack_row text null,
          created_at timestamptz)

The Supabase client is synchronous, so every call runs in a worker thread.
"""

import asyncio
import threading
import time
from collections.abc import Callable
from typing import Any

from supabase import Client, create_client

from tirestore.core.enums import UNKNOWN_MODEL, Row
from tirestore.core.logging import log_store_call
from tirestore.db.base import GarageStore
from tirestore.models.rack import Rack
from tirestore.models.tire import Location, TireUnit

RACK_COLUMNS = "id, name, total_width, is_double, reserved_brand, owner_id"
TIRE_COLUMNS = (
    "id, eprel_code, brand, model, width, aspect_ratio, diameter, "
    "owner_id, rack_id, rack_row"
)


def _rack_to_row(rack: Rack) -> dict[str, Any]:
    return {
        "id": rack.id,
        "name": rack.name,
        "total_width": rack.total_width,
        "is_double": rack.is_double,
        "reserved_brand": rack.reserved_brand,
        "owner_id": rack.owner,
    }


def _row_to_rack(row: dict[str, Any]) -> Rack:
    return Rack(
        id=str(row["id"]),
        name=row["name"],
        total_width=row["total_width"],
        is_double=bool(row.get("is_double")),
        reserved_brand=row.get("reserved_brand"),
        owner=str(row["owner_id"]),
    )


def _tire_to_row(tire: TireUnit) -> dict[str, Any]:
    return {
        "id": tire.id,
        "eprel_code": tire.catalog_code,
        "brand": tire.brand,
        "model": tire.model,
        "width": tire.width,
        "aspect_ratio": tire.aspect_ratio,
        "diameter": tire.diameter,
        "owner_id": tire.owner,
        "rack_id": tire.location.rack_id if tire.location else None,
        "rack_row": tire.location.row.value if tire.location else None,
    }


def _row_to_tire(row: dict[str, Any]) -> TireUnit:
    location = None
    rack_row = Row.from_string(row.get("rack_row"))
    if row.get("rack_id") and rack_row is not None:
        location = Location(rack_id=str(row["rack_id"]), row=rack_row)
    return TireUnit(
        id=str(row["id"]),
        catalog_code=row["eprel_code"],
        brand=row["brand"],
        model=row.get("model") or UNKNOWN_MODEL,
        width=row["width"],
        aspect_ratio=row["aspect_ratio"],
        diameter=row["diameter"],
        owner=str(row["owner_id"]),
        location=location,
    )


def _rows(data: Any) -> list[dict[str, Any]]:
    if not isinstance(data, list):
        return []
    return [row for row in data if isinstance(row, dict)]


class SupabaseStore(GarageStore):
    """Racks and tires in the two tables above.

    The client is built on first use, so the app starts (and serves
    ``/health``) before Supabase is reachable. Worker threads may race
    to that first use; the lock makes them share one client.
    """

    backend = "supabase"

    def __init__(self, client: Client | None = None, url: str = "", key: str = "") -> None:
        self._client = client
        self._url = url
        self._key = key
        self._client_lock = threading.Lock()

    @property
    def client(self) -> Client:
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = create_client(self._url, self._key)
        return self._client

    async def _run(self, operation: str, table: str, owner: str, call: Callable[[], Any]) -> Any:
        start = time.time()
        result = await asyncio.to_thread(call)
        log_store_call(self.backend, operation, table, owner, (time.time() - start) * 1000)
        return result

    async def add_rack(self, rack: Rack) -> Rack:
        def _insert():
            return self.client.table("racks").insert(_rack_to_row(rack)).execute()

        await self._run("insert", "racks", rack.owner, _insert)
        return rack

    async def list_racks(self, owner: str) -> list[Rack]:
        def _query():
            return (
                self.client.table("racks")
                .select(RACK_COLUMNS)
                .eq("owner_id", owner)
                .order("created_at")
                .execute()
            )

        result = await self._run("select", "racks", owner, _query)
        return [_row_to_rack(row) for row in _rows(result.data)]

    async def add_tire(self, tire: TireUnit) -> TireUnit:
        def _insert():
            return self.client.table("tires").insert(_tire_to_row(tire)).execute()

        await self._run("insert", "tires", tire.owner, _insert)
        return tire

    async def list_tires(self, owner: str) -> list[TireUnit]:
        def _query():
            return (
                self.client.table("tires")
                .select(TIRE_COLUMNS)
                .eq("owner_id", owner)
                .order("created_at")
                .execute()
            )

        result = await self._run("select", "tires", owner, _query)
        return [_row_to_tire(row) for row in _rows(result.data)]

    async def delete_tire(self, owner: str, tire_id: str) -> TireUnit | None:
        def _delete():
            return (
                self.client.table("tires")
                .delete()
                .eq("id", tire_id)
                .eq("owner_id", owner)
                .execute()
            )

        result = await self._run("delete", "tires", owner, _delete)
        deleted = _rows(result.data)
        return _row_to_tire(deleted[0]) if deleted else None

"""In-process store. Default backend and the one the tests run against."""

import threading

from tirestore.core.logging import log_store_call
from tirestore.db.base import GarageStore
from tirestore.models.rack import Rack
from tirestore.models.tire import TireUnit


class MemoryStore(GarageStore):
    def __init__(self) -> None:
        # dicts keep insertion order, which is creation order
        self._racks: dict[str, Rack] = {}
        self._tires: dict[str, TireUnit] = {}
        self._lock = threading.Lock()

    async def add_rack(self, rack: Rack) -> Rack:
        with self._lock:
            self._racks[rack.id] = rack
        log_store_call("memory", "insert", "racks", rack.owner)
        return rack

    async def list_racks(self, owner: str) -> list[Rack]:
        with self._lock:
            racks = [r for r in self._racks.values() if r.owner == owner]
        log_store_call("memory", "select", "racks", owner)
        return racks

    async def add_tire(self, tire: TireUnit) -> TireUnit:
        with self._lock:
            self._tires[tire.id] = tire
        log_store_call("memory", "insert", "tires", tire.owner)
        return tire

    async def list_tires(self, owner: str) -> list[TireUnit]:
        with self._lock:
            tires = [t for t in self._tires.values() if t.owner == owner]
        log_store_call("memory", "select", "tires", owner)
        return tires

    async def delete_tire(self, owner: str, tire_id: str) -> TireUnit | None:
        with self._lock:
            tire = self._tires.get(tire_id)
            if tire is None or tire.owner != owner:
                return None
            del self._tires[tire_id]
        log_store_call("memory", "delete", "tires", owner)
        return tire

"""Garage service - the operation surface the HTTP layer calls.

Flow for a new tire:
1. Resolve the catalog code (network, outside any lock)
2. Under the owner's lock: snapshot racks + placed tires, decide, commit

Holding the owner lock from snapshot to commit keeps two concurrent
placements from both seeing the same free width.
"""

import asyncio
from collections import defaultdict
from typing import Protocol

from tirestore.core.errors import ValidationError
from tirestore.core.logging import log_rack_created, log_tire_removed
from tirestore.db.base import GarageStore
from tirestore.models.rack import Rack, RackCreate, RackView
from tirestore.models.tire import TireAttributes, TireUnit
from tirestore.services.inventory import TireInventory
from tirestore.services.placement import place_tire
from tirestore.services.racks import RackRegistry


class TireResolver(Protocol):
    async def resolve(self, catalog_code: str) -> TireAttributes: ...


class OwnerLocks:
    """One asyncio.Lock per owner, created on first use."""

    def __init__(self) -> None:
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def for_owner(self, owner: str) -> asyncio.Lock:
        return self._locks[owner]


class GarageService:
    """Racks, placement and inventory for every owner of one deployment."""

    def __init__(self, store: GarageStore, catalog: TireResolver) -> None:
        self.store = store
        self.catalog = catalog
        self.racks = RackRegistry(store)
        self.inventory = TireInventory(store)
        self._locks = OwnerLocks()

    async def create_rack(self, owner: str, data: RackCreate) -> Rack:
        async with self._locks.for_owner(owner):
            rack = await self.racks.create(owner, data)
        log_rack_created(owner, rack.id, rack.name, rack.reserved_brand)
        return rack

    async def list_racks(self, owner: str) -> list[RackView]:
        async with self._locks.for_owner(owner):
            return await self.racks.list_with_occupancy(owner)

    async def place_new_tire(self, owner: str, catalog_code: str) -> TireUnit:
        """Look a tire up and store it in the best free slot.

        Raises:
            ValidationError: empty catalog code.
            CatalogLookupFailure: the tire could not be resolved; nothing
                was read or written.
            NoSpaceAvailable: no rack row can take it; nothing was written.
        """
        # Pairing compares codes exactly, so keep one case
        catalog_code = catalog_code.strip().upper()
        if not catalog_code:
            raise ValidationError("An EPREL code is required.")

        attrs = await self.catalog.resolve(catalog_code)

        async with self._locks.for_owner(owner):
            racks = await self.racks.racks(owner)
            placed = await self.inventory.placed(owner)
            location = place_tire(attrs, catalog_code, racks, placed)
            return await self.inventory.place(owner, attrs, catalog_code, location)

    async def search_tires(self, owner: str, query: str) -> list[TireUnit]:
        return await self.inventory.search(owner, query)

    async def delete_tire(self, owner: str, tire_id: str) -> TireUnit:
        async with self._locks.for_owner(owner):
            tire = await self.inventory.delete(owner, tire_id)
        log_tire_removed(owner, tire.id, tire.catalog_code)
        return tire

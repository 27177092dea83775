"""Storage interface for racks and tires.

All reads and writes are scoped by owner. Racks come back in creation
order and tires in insertion order; the placement engine relies on it.
"""

from abc import ABC, abstractmethod

from tirestore.models.rack import Rack
from tirestore.models.tire import TireUnit


class GarageStore(ABC):
    """Persistence for one garage's racks and tire units."""

    @abstractmethod
    async def add_rack(self, rack: Rack) -> Rack: ...

    @abstractmethod
    async def list_racks(self, owner: str) -> list[Rack]: ...

    @abstractmethod
    async def add_tire(self, tire: TireUnit) -> TireUnit: ...

    @abstractmethod
    async def list_tires(self, owner: str) -> list[TireUnit]: ...

    @abstractmethod
    async def delete_tire(self, owner: str, tire_id: str) -> TireUnit | None:
        """Remove a tire owned by ``owner``; None if no such tire."""

    async def list_placed_tires(self, owner: str) -> list[TireUnit]:
        return [t for t in await self.list_tires(owner) if t.location is not None]

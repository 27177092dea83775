"""Rack registry: creation rules and the occupancy view."""

import math
import uuid

from tirestore.core.enums import Row
from tirestore.core.errors import ValidationError
from tirestore.db.base import GarageStore
from tirestore.models.rack import Rack, RackCreate, RackView
from tirestore.models.tire import TireUnit
from tirestore.services.placement import occupied_width


def normalize_brand(brand: str | None) -> str | None:
    """Trim and upper-case a brand reservation; blank means no reservation."""
    if brand is None:
        return None
    brand = brand.strip().upper()
    return brand or None


def build_rack_view(rack: Rack, tires: list[TireUnit]) -> RackView:
    """Join a rack with the tires stored in it."""
    front = [t for t in tires if t.is_at(rack.id, Row.FRONT)]
    back = [t for t in tires if t.is_at(rack.id, Row.BACK)]
    front_used = occupied_width(rack.id, Row.FRONT, tires)
    back_used = occupied_width(rack.id, Row.BACK, tires)
    back_capacity = rack.total_width if rack.is_double else 0.0

    return RackView(
        **rack.model_dump(),
        front_row_tires=front,
        back_row_tires=back,
        front_occupied_width=front_used,
        back_occupied_width=back_used,
        front_free_width=max(rack.total_width - front_used, 0.0),
        back_free_width=max(back_capacity - back_used, 0.0),
    )


class RackRegistry:
    def __init__(self, store: GarageStore) -> None:
        self.store = store

    async def create(self, owner: str, data: RackCreate) -> Rack:
        """Validate and persist a new rack.

        Raises:
            ValidationError: blank name or non-positive width.
        """
        name = data.name.strip()
        if not name:
            raise ValidationError("Rack name is required.")
        if not math.isfinite(data.total_width) or data.total_width <= 0:
            raise ValidationError("Rack totalWidth must be a positive number.")

        rack = Rack(
            id=uuid.uuid4().hex,
            name=name,
            total_width=data.total_width,
            is_double=data.is_double,
            reserved_brand=normalize_brand(data.reserved_brand),
            owner=owner,
        )
        return await self.store.add_rack(rack)

    async def racks(self, owner: str) -> list[Rack]:
        return await self.store.list_racks(owner)

    async def list_with_occupancy(self, owner: str) -> list[RackView]:
        racks = await self.store.list_racks(owner)
        tires = await self.store.list_placed_tires(owner)
        return [build_rack_view(rack, tires) for rack in racks]

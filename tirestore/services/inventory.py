"""Tire inventory: committing placed tires, search and removal."""

import re
import uuid

from tirestore.core.errors import NotFound, ValidationError
from tirestore.db.base import GarageStore
from tirestore.models.tire import Location, TireAttributes, TireUnit

TIRE_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def matches_query(tire: TireUnit, query: str) -> bool:
    """Case-insensitive substring match on brand, model or catalog code."""
    needle = query.casefold()
    return any(
        needle in field.casefold()
        for field in (tire.brand, tire.model, tire.catalog_code)
    )


class TireInventory:
    def __init__(self, store: GarageStore) -> None:
        self.store = store

    async def place(
        self,
        owner: str,
        attrs: TireAttributes,
        catalog_code: str,
        location: Location,
    ) -> TireUnit:
        """Persist a tire at a location already chosen by the placement engine."""
        tire = TireUnit(
            id=uuid.uuid4().hex,
            catalog_code=catalog_code,
            brand=attrs.brand,
            model=attrs.model,
            width=attrs.width,
            aspect_ratio=attrs.aspect_ratio,
            diameter=attrs.diameter,
            owner=owner,
            location=location,
        )
        return await self.store.add_tire(tire)

    async def placed(self, owner: str) -> list[TireUnit]:
        return await self.store.list_placed_tires(owner)

    async def search(self, owner: str, query: str) -> list[TireUnit]:
        if not query.strip():
            raise ValidationError("A search query is required.")
        tires = await self.store.list_tires(owner)
        return [t for t in tires if matches_query(t, query)]

    async def delete(self, owner: str, tire_id: str) -> TireUnit:
        """Remove a tire, freeing its width immediately.

        Raises:
            ValidationError: the id is not a tire id at all.
            NotFound: no tire with this id belongs to ``owner``.
        """
        if not TIRE_ID_PATTERN.match(tire_id):
            raise ValidationError("Invalid tire id.")
        deleted = await self.store.delete_tire(owner, tire_id)
        if deleted is None:
            raise NotFound("Tire not found.")
        return deleted

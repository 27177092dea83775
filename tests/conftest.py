"""Shared fixtures: in-memory store, a fake catalog, and model builders."""

import asyncio

import pytest

from tirestore.core.enums import Row
from tirestore.core.errors import CatalogLookupFailure
from tirestore.db.memory import MemoryStore
from tirestore.models.rack import Rack
from tirestore.models.tire import Location, TireAttributes, TireUnit
from tirestore.services.garage import GarageService

OWNER = "garage-1"
OTHER_OWNER = "garage-2"


def make_rack(
    rack_id: str,
    total_width: float,
    is_double: bool = False,
    reserved_brand: str | None = None,
    owner: str = OWNER,
) -> Rack:
    return Rack(
        id=rack_id,
        name=f"Rack {rack_id}",
        total_width=total_width,
        is_double=is_double,
        reserved_brand=reserved_brand,
        owner=owner,
    )


def make_attrs(
    width: float, brand: str = "MICHELIN", model: str = "Pilot Sport 4"
) -> TireAttributes:
    return TireAttributes(
        brand=brand, model=model, width=width, aspect_ratio=55, diameter=16
    )


def make_tire(
    tire_id: str,
    catalog_code: str,
    width: float,
    rack_id: str | None,
    row: Row = Row.FRONT,
    brand: str = "MICHELIN",
    owner: str = OWNER,
) -> TireUnit:
    return TireUnit(
        id=tire_id,
        catalog_code=catalog_code,
        brand=brand,
        model="Pilot Sport 4",
        width=width,
        aspect_ratio=55,
        diameter=16,
        owner=owner,
        location=Location(rack_id=rack_id, row=row) if rack_id else None,
    )


class FakeCatalog:
    """Catalog resolver backed by a dict; unknown codes fail like a 404."""

    def __init__(self, tires: dict[str, TireAttributes] | None = None) -> None:
        self.tires = dict(tires or {})
        self.calls: list[str] = []

    async def resolve(self, catalog_code: str) -> TireAttributes:
        self.calls.append(catalog_code)
        await asyncio.sleep(0)
        if catalog_code not in self.tires:
            raise CatalogLookupFailure(
                f"No tire information found for EPREL {catalog_code}.", catalog_code
            )
        return self.tires[catalog_code]


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(
        {
            "ABC123": make_attrs(20.0),
            "XYZ789": make_attrs(20.0, brand="Pirelli", model="P Zero"),
            "NARROW1": make_attrs(1.0),
            "BRANDY20": make_attrs(20.0, brand="brandy", model="Grip"),
            "BRANDX20": make_attrs(20.0, brand="brandx", model="Grip"),
        }
    )


@pytest.fixture
def garage(store: MemoryStore, catalog: FakeCatalog) -> GarageService:
    return GarageService(store, catalog)

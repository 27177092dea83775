"""Placement engine: decides which rack row a new tire goes to.

Pure functions over a snapshot of one owner's racks and placed tires.
No I/O, so the caller is responsible for taking the snapshot and
committing the result without another placement interleaving.

Two passes, both in rack creation order:

1. Pairing: on double racks holding more tires of this catalog code in
   front than in back, put the tire in the back row so the set stays
   together.
2. Fallback: first eligible rack whose front row still has room.

A rack reserved for a brand is skipped entirely for other brands.
Remaining width equal to the tire width counts as room.
"""

from collections.abc import Sequence

from tirestore.core.enums import Row
from tirestore.core.errors import NoSpaceAvailable
from tirestore.core.logging import log_no_space, log_placement
from tirestore.models.rack import Rack
from tirestore.models.tire import Location, TireAttributes, TireUnit


def occupied_width(rack_id: str, row: Row, tires: Sequence[TireUnit]) -> float:
    """Sum of the widths of tires stored in a rack row."""
    return sum(t.width for t in tires if t.is_at(rack_id, row))


def eligible_racks(racks: Sequence[Rack], brand: str) -> list[Rack]:
    """Racks that may hold a tire of ``brand``, keeping input order."""
    return [r for r in racks if r.accepts_brand(brand)]


def has_unmatched_front(rack: Rack, catalog_code: str, tires: Sequence[TireUnit]) -> bool:
    """True when the front row holds a tire of this code with no back partner."""
    front = sum(
        1 for t in tires if t.catalog_code == catalog_code and t.is_at(rack.id, Row.FRONT)
    )
    back = sum(
        1 for t in tires if t.catalog_code == catalog_code and t.is_at(rack.id, Row.BACK)
    )
    return front > back


def _fits(rack: Rack, row: Row, width: float, tires: Sequence[TireUnit]) -> bool:
    return rack.total_width - occupied_width(rack.id, row, tires) >= width


def find_location(
    attrs: TireAttributes,
    catalog_code: str,
    racks: Sequence[Rack],
    placed_tires: Sequence[TireUnit],
) -> Location | None:
    """Return the first free slot for the tire, or None if there is none.

    ``racks`` must be in creation order.
    """
    candidates = eligible_racks(racks, attrs.brand)

    for rack in candidates:
        if not rack.is_double:
            continue
        if has_unmatched_front(rack, catalog_code, placed_tires) and _fits(
            rack, Row.BACK, attrs.width, placed_tires
        ):
            return Location(rack_id=rack.id, row=Row.BACK)

    for rack in candidates:
        if _fits(rack, Row.FRONT, attrs.width, placed_tires):
            return Location(rack_id=rack.id, row=Row.FRONT)

    return None


def place_tire(
    attrs: TireAttributes,
    catalog_code: str,
    racks: Sequence[Rack],
    placed_tires: Sequence[TireUnit],
) -> Location:
    """Decide a location for the tire.

    Raises:
        NoSpaceAvailable: no eligible rack row has enough free width.
    """
    location = find_location(attrs, catalog_code, racks, placed_tires)
    if location is None:
        log_no_space(catalog_code, attrs.brand, attrs.width)
        raise NoSpaceAvailable(attrs, catalog_code)

    log_placement(catalog_code, location.rack_id, location.row.value)
    return location

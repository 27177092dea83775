"""FastAPI route definitions for racks and tires."""

from fastapi import APIRouter, Query, Request

from tirestore.api.deps import Garage, Owner, limiter
from tirestore.config import get_settings
from tirestore.models.rack import Rack, RackCreate, RackView
from tirestore.models.tire import DeleteTireResponse, PlaceTireRequest, TireUnit

router = APIRouter()


# ---------------------------------------------------------------------------
# Racks
# ---------------------------------------------------------------------------


@router.post("/racks", response_model=Rack, status_code=201)
async def create_rack(req: RackCreate, owner: Owner, garage: Garage):
    """Register a new rack for the current owner."""
    return await garage.create_rack(owner, req)


@router.get("/racks", response_model=list[RackView])
async def list_racks(owner: Owner, garage: Garage):
    """List racks with the tires currently stored in each row."""
    return await garage.list_racks(owner)


# ---------------------------------------------------------------------------
# Tires
# ---------------------------------------------------------------------------


@router.post("/tires", response_model=TireUnit, status_code=201)
@limiter.limit(lambda: get_settings().rate_limit_placement)
async def place_tire(
    request: Request, req: PlaceTireRequest, owner: Owner, garage: Garage
):
    """Look up an EPREL code and store the tire in the first free slot.

    409 with the resolved ``tireData`` when no rack has room.
    """
    return await garage.place_new_tire(owner, req.catalog_code)


@router.get("/tires/search", response_model=list[TireUnit])
async def search_tires(owner: Owner, garage: Garage, query: str = Query(default="")):
    """Search tires by brand, model or EPREL code."""
    return await garage.search_tires(owner, query)


@router.delete("/tires/{tire_id}", response_model=DeleteTireResponse)
async def delete_tire(tire_id: str, owner: Owner, garage: Garage):
    """Remove a tire and free its slot."""
    tire = await garage.delete_tire(owner, tire_id)
    return DeleteTireResponse(message="Tire removed.", deleted_tire=tire)

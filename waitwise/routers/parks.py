from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from waitwise.errors import NotFoundError
from waitwise.models.schemas import Resort
from waitwise.parks.catalog import ParkCatalog
from waitwise.runtime import get_aggregator, get_catalog
from waitwise.services.wait_times import WaitTimeAggregator

router = APIRouter()


@router.get("/parks", summary="Resorts and parks", response_model=List[Resort])
async def list_parks(catalog: ParkCatalog = Depends(get_catalog)):
    """Catalog of known resorts and their parks, refreshed daily from upstream."""
    return catalog.resorts


@router.get("/parks/resolve", summary="Resolve a park name or abbreviation")
async def resolve_park(
    q: str = Query(..., min_length=1, description="Park name, alias or a sentence mentioning one"),
    catalog: ParkCatalog = Depends(get_catalog),
):
    park_id = catalog.resolve_park_id(q)
    park = catalog.get(park_id) if park_id is not None else None
    if park is None:
        raise NotFoundError(f"No park matches '{q}'.")
    return {"park_id": park.id, "park_name": park.name, "resort_name": park.resort_name}


@router.get("/parks/{park_id}/waits", summary="Top wait times for one park")
async def park_waits(
    park_id: int,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    catalog: ParkCatalog = Depends(get_catalog),
    aggregator: WaitTimeAggregator = Depends(get_aggregator),
):
    """Open rides first, longest waits first. Served from a short-lived cache."""
    park = catalog.get(park_id)
    if park is None:
        raise NotFoundError(f"Park {park_id} not found.")
    rides = await aggregator.park_snapshot(park_id, limit=limit)
    return {
        "park_id":   park.id,
        "park_name": park.name,
        "rides":     [r.model_dump(mode="json") for r in rides],
    }

from fastapi import APIRouter, Depends, Query

from waitwise.models.schemas import WaitLookup
from waitwise.runtime import get_aggregator
from waitwise.services.wait_times import WaitTimeAggregator

router = APIRouter()


@router.get("/waits", summary="Find wait times for a ride", response_model=WaitLookup)
async def find_waits(
    q: str = Query(..., min_length=1, description='e.g. "space mountain at magic kingdom" or "7dmt"'),
    aggregator: WaitTimeAggregator = Depends(get_aggregator),
):
    """
    Ride matches across every park, or only the park the query names.
    When no ride matches but a park was named, returns that park's top waits
    with fallback=true.
    """
    return await aggregator.lookup(q)

# api/routers/earthquakes.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Query, Request

from listing.engine import ListingEngine, ListingRequest
from listing.filters import DateFilter, FilterSpec, MagnitudeFilter
from listing.pagination import PaginationSpec
from listing.sorting import SortSpec
from schemas.models import Connection, EarthquakeOut, FilterOptionsOut

router = APIRouter(prefix="/earthquakes", tags=["earthquakes"])


def _engine(request: Request) -> ListingEngine:
    return request.app.state.listing_engine


# Filter and sort values stay raw strings: the engine coerces them and bad
# values come back as 400. Non-integer skip/take are rejected here with 422.
@router.get("", response_model=Connection)
async def list_earthquakes(
    request: Request,
    location: Optional[str] = Query(None, description="Case-insensitive substring of the location"),
    min_magnitude: Optional[str] = Query(None),
    max_magnitude: Optional[str] = Query(None),
    start: Optional[str] = Query(None, description="ISO-8601, inclusive"),
    end: Optional[str] = Query(None, description="ISO-8601, inclusive"),
    skip: Optional[int] = Query(None, description="Offset, at least 0"),
    take: Optional[int] = Query(None, description="Capped at 10"),
    sort: Optional[str] = Query(None, description="location | magnitude | date | createdAt"),
    direction: Optional[str] = Query(None, description="asc | desc"),
):
    listing = ListingRequest(
        filter=FilterSpec(
            location=location,
            magnitude=MagnitudeFilter(min_magnitude, max_magnitude),
            date=DateFilter(start, end),
        ),
        pagination=PaginationSpec(skip, take),
        sort=SortSpec(sort, direction),
    )
    return await _engine(request).list(listing)


@router.post("/search", response_model=Connection)
async def search_earthquakes(request: Request, payload: Optional[Dict[str, Any]] = Body(None)):
    """Same listing, with the request given as ``{filter, pagination, sort}`` JSON."""
    return await _engine(request).list(ListingRequest.from_dict(payload))


@router.get("/filter-options", response_model=FilterOptionsOut)
async def filter_options(request: Request):
    return await _engine(request).filter_options()


@router.get("/{earthquake_id}", response_model=EarthquakeOut)
async def get_earthquake(request: Request, earthquake_id: str):
    record = await _engine(request).get(earthquake_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Earthquake {earthquake_id} not found.")
    return record

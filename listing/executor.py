# listing/executor.py
import asyncio
from typing import List, Tuple

from starlette.concurrency import run_in_threadpool

from listing.filters import Predicate
from listing.pagination import PageWindow
from listing.sorting import SortOrder
from listing.store import RecordStore
from schemas.models import EarthquakeOut


async def run_query(
    store: RecordStore,
    predicate: Predicate,
    window: PageWindow,
    order: SortOrder,
) -> Tuple[int, List[EarthquakeOut]]:
    """Count every match and fetch one ordered page, both from the same predicate.

    The two calls are independent reads, so they run side by side on the
    thread pool. Store errors are not caught here.
    """
    total_count, records = await asyncio.gather(
        run_in_threadpool(store.count, predicate),
        run_in_threadpool(store.find, predicate, order, window.skip, window.take),
    )
    return total_count, list(records)

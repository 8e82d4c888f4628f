# listing/assembler.py
import logging
from typing import Sequence

from listing.pagination import PageWindow, page_info
from schemas.models import Connection, EarthquakeOut

logger = logging.getLogger(__name__)


def assemble(records: Sequence[EarthquakeOut], total_count: int, window: PageWindow) -> Connection:
    edges = list(records)
    if len(edges) > window.take:
        logger.warning("store returned %d records for a page of %d, truncating", len(edges), window.take)
        edges = edges[: window.take]
    return Connection(edges=edges, page_info=page_info(window, total_count, len(edges)))

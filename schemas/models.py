# schemas/models.py
from datetime import datetime, timezone
from typing import Annotated, List

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive timestamps; everything is stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class EarthquakeOut(CamelModel):
    id: str
    location: str
    magnitude: float
    date: UtcDatetime
    created_at: UtcDatetime
    updated_at: UtcDatetime


class PageInfo(CamelModel):
    total_count: int
    has_next_page: bool
    has_previous_page: bool


class Connection(CamelModel):
    edges: List[EarthquakeOut]
    page_info: PageInfo


class MagnitudeBounds(CamelModel):
    min: float
    max: float


class DateBounds(CamelModel):
    earliest: UtcDatetime
    latest: UtcDatetime


class FilterOptionsOut(CamelModel):
    locations: List[str]
    magnitude_range: MagnitudeBounds
    date_range: DateBounds

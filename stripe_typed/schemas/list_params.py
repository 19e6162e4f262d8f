"""List Parameters — pagination and `created` filters shared by list endpoints.

Invariants:
    - `created` is either one exact timestamp or a {gt, gte, lt, lte} range
    - Encoded as query parameters: created=1475761243 or created[gte]=1475761243
    - limit stays within 1..100
"""

from typing import Annotated, Literal, Union

from pydantic import ConfigDict, Field, RootModel

from stripe_typed.core.codec import RepeatedKeys, Shape, Timestamp, WireModel, is_integer, is_mapping, variant


class CreatedAt(RootModel[Timestamp]):
    """Exact creation time."""
    model_config = ConfigDict(frozen=True)


class CreatedRange(WireModel):
    gt: Timestamp | None = None
    gte: Timestamp | None = None
    lt: Timestamp | None = None
    lte: Timestamp | None = None


CreatedFilter = variant(
    "created filter",
    Union[CreatedAt, CreatedRange],
    Shape("timestamp", CreatedAt, is_integer),
    Shape("range", CreatedRange, is_mapping),
)


class ListParams(WireModel):
    created: CreatedFilter | None = None
    limit: int | None = Field(default=None, ge=1, le=100)
    starting_after: str | None = None
    ending_before: str | None = None
    include: Annotated[list[Literal["total_count"]] | None, RepeatedKeys] = None

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union


@dataclass(frozen=True)
class Object:
    """A real object selected from a listing."""

    name: str
    last_modified: datetime
    size: Optional[int] = None


@dataclass(frozen=True)
class RealObject:
    """Listing entry for an addressable object."""

    name: str
    last_modified: datetime
    size: Optional[int] = None


@dataclass(frozen=True)
class GroupingPrefix:
    """Listing entry for a virtual folder (common prefix), never downloadable."""

    prefix: str


ListingEntry = Union[RealObject, GroupingPrefix]


def to_object(entry: ListingEntry) -> Optional[Object]:
    if isinstance(entry, RealObject):
        return Object(name=entry.name, last_modified=entry.last_modified, size=entry.size)
    return None

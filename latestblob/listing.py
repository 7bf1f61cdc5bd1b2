import sys
from typing import Iterable, List, Optional

from .models import ListingEntry, Object, to_object
from .providers.base import CloudProvider


def list_entries(provider: CloudProvider, prefix: str, verbose: bool = False) -> List[ListingEntry]:
    """Collect every listing entry under prefix, page by page, in service order.

    A failure on any page propagates; nothing gathered so far is returned.
    """
    entries = []
    next_token = None
    page_number = 0
    while True:
        page_number += 1
        if verbose:
            print(f"[List: {provider.describe()}{prefix} page {page_number}]", file=sys.stderr)
        page, next_token = provider.list_page(prefix, next_token)
        entries.extend(page)
        if not next_token:
            break
    return entries


def filter_objects(entries: Iterable[ListingEntry]) -> List[Object]:
    """Drop grouping prefixes, keeping real objects in their listing order."""
    objects = []
    for entry in entries:
        obj = to_object(entry)
        if obj is not None:
            objects.append(obj)
    return objects


def select_latest(entries: Iterable[ListingEntry]) -> Optional[Object]:
    """Return the most recently modified real object, or None when there is none.

    Ties on last_modified go to the entry listed first.
    """
    latest = None
    for obj in filter_objects(entries):
        if latest is None or obj.last_modified > latest.last_modified:
            latest = obj
    return latest


def find_latest(provider: CloudProvider, prefix: str, verbose: bool = False) -> Optional[Object]:
    return select_latest(list_entries(provider, prefix, verbose=verbose))

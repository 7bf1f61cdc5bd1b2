from ..formatting import format_object_entry
from ..listing import filter_objects, list_entries, select_latest
from ..providers.base import CloudProvider


def do_list(provider: CloudProvider, prefix: str, show_latest: bool = False, verbose: bool = False) -> int:
    """Print every real object under prefix in listing order. Returns the count."""
    entries = list_entries(provider, prefix, verbose=verbose)
    objects = filter_objects(entries)
    if not objects:
        print("No objects found.")
        return 0

    latest = select_latest(entries) if show_latest else None
    for obj in objects:
        marker = '<- latest' if latest is not None and obj == latest else ''
        print(format_object_entry(obj, marker))
    return len(objects)

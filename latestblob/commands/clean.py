import os

from prompt_toolkit.shortcuts import confirm

from ..localfs import clean_cache


def do_clean(cache_root: str, assume_yes: bool = False) -> int:
    """Empty the local cache directory after confirmation. Returns the number of entries removed."""
    if os.path.isdir(cache_root) and os.listdir(cache_root) and not assume_yes:
        if not confirm(f"Remove everything under {cache_root}?"):
            print("Aborted.")
            return 0

    removed = clean_cache(cache_root)
    if os.path.isdir(cache_root):
        print(f"Removed {removed} item(s) from {cache_root}.")
    return removed

import sys
from typing import Callable, Optional

from ..errors import OpenerError
from ..listing import find_latest
from ..localfs import map_local_path, write_file
from ..opener import open_with_default_app
from ..progress import Progress
from ..providers.base import CloudProvider
from ..retrieval import ensure_text, fetch


def download_latest(
    provider: CloudProvider,
    prefix: str,
    name: Optional[str] = None,
    local_root: Optional[str] = None,
    text_only: bool = True,
    progress: Optional[Progress] = None,
    verbose: bool = False,
) -> Optional[str]:
    """Fetch the newest object under prefix (or exactly `name`) and write it locally.

    Returns the local path, or None when nothing matches the prefix.
    """
    progress = progress or Progress()
    try:
        if name is None:
            progress.update("Finding the latest blob.")
            latest = find_latest(provider, prefix, verbose=verbose)
            if latest is None:
                return None
            name = latest.name

        progress.update(f"Downloading {name}")
        content = fetch(provider, name, verbose=verbose)
        if text_only:
            content = ensure_text(content, name)

        local_path = map_local_path(name, local_root)
        progress.update(f"Writing {local_path}")
        write_file(local_path, content, verbose=verbose)
        return local_path
    finally:
        progress.finish()


def do_open(
    provider: CloudProvider,
    prefix: str,
    name: Optional[str] = None,
    local_root: Optional[str] = None,
    text_only: bool = True,
    progress: Optional[Progress] = None,
    opener: Callable[[str], None] = open_with_default_app,
    verbose: bool = False,
) -> Optional[str]:
    """Download the latest object under prefix and open it with the system viewer."""
    local_path = download_latest(
        provider, prefix, name=name, local_root=local_root,
        text_only=text_only, progress=progress, verbose=verbose,
    )
    if local_path is None:
        print(f"No objects found matching prefix '{prefix}'.")
        return None

    print(f"Saved {local_path}")
    try:
        opener(local_path)
    except OpenerError as e:
        print(f"Warning: {e} The file remains at {local_path}.", file=sys.stderr)
    return local_path

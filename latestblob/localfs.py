import os
import shutil
import sys
from typing import Optional

from .errors import FilesystemError

CACHE_DIR_NAME = 'blob_cache'
FALLBACK_NAME = 'unknown'


def default_cache_root() -> str:
    """Cache folder next to the running script."""
    script_dir = os.path.dirname(os.path.realpath(sys.argv[0] or '.'))
    return os.path.join(script_dir, CACHE_DIR_NAME)


def _is_safe_segment(segment: str) -> bool:
    return segment not in ('', '.', '..') and os.sep not in segment and (
        os.altsep is None or os.altsep not in segment
    )


def map_local_path(object_name: str, local_root: Optional[str] = None) -> str:
    """Map a remote object name to a local file path.

    'a/b/c.txt' under root 'R' becomes 'R/a/b/c.txt'. Without a root only the
    base name is kept, relative to the working directory.

    Empty, '.' and '..' segments are dropped so the result always stays under
    local_root. As a consequence 'a//c.txt', '/a/c.txt', 'a/./c.txt' and
    'a/c.txt' all map to the same local path.
    """
    parts = object_name.split('/')
    base_name = parts[-1].strip()
    if not _is_safe_segment(base_name):
        base_name = FALLBACK_NAME
    if local_root is None:
        return base_name

    sub_dirs = [p for p in parts[:-1] if _is_safe_segment(p)]
    local_path = os.path.join(local_root, *sub_dirs, base_name)

    real_root = os.path.realpath(local_root)
    if os.path.commonpath([real_root, os.path.realpath(local_path)]) != real_root:
        raise FilesystemError(f"Refusing to write '{object_name}' outside {local_root}")
    return local_path


def write_file(local_path: str, content: bytes, verbose: bool = False):
    """Create missing parent directories and overwrite local_path with content."""
    if verbose:
        print(f"[Write: {local_path}]", file=sys.stderr)
    try:
        local_parent = os.path.dirname(local_path)
        if local_parent:
            os.makedirs(local_parent, exist_ok=True)
        with open(local_path, 'wb') as f:
            f.write(content)
    except OSError as e:
        raise FilesystemError(f"Could not write {local_path}: {e}") from e


def clean_cache(cache_root: str) -> int:
    """Remove everything under cache_root, keeping the directory itself.

    Returns the number of top-level entries removed; a missing root removes nothing.
    """
    if not os.path.exists(cache_root):
        print(f"Cache directory {cache_root} does not exist, nothing to clean.", file=sys.stderr)
        return 0
    if not os.path.isdir(cache_root):
        print(f"Cache path {cache_root} is not a directory, nothing to clean.", file=sys.stderr)
        return 0

    removed = 0
    try:
        for entry in sorted(os.listdir(cache_root)):
            path = os.path.join(cache_root, entry)
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
            else:
                os.unlink(path)
            removed += 1
    except OSError as e:
        raise FilesystemError(f"Could not clean {cache_root}: {e}") from e
    return removed

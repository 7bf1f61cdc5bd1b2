import sys

from .errors import DecodeError
from .providers.base import CloudProvider


def fetch(provider: CloudProvider, name: str, verbose: bool = False) -> bytes:
    """Read an object's whole content into memory, concatenating chunks in stream order."""
    if verbose:
        print(f"[Fetch: {provider.describe()}{name}]", file=sys.stderr)
    buffer = bytearray()
    for chunk in provider.iter_chunks(name):
        buffer.extend(chunk)
    return bytes(buffer)


def ensure_text(content: bytes, name: str) -> bytes:
    """Reject content that is not valid UTF-8 so corrupted text never reaches disk."""
    try:
        content.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError(
            f"Unable to decode '{name}' as text (likely binary file): {e}. Use --binary to keep it as-is."
        ) from e
    return content

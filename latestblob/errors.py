class LatestBlobError(Exception):
    """Base class for failures surfaced by the list/open/clean pipeline."""


class TransportError(LatestBlobError):
    """Network or service failure while listing or fetching."""


class ObjectNotFoundError(TransportError):
    """The named object does not exist in the container."""

    def __init__(self, name: str):
        super().__init__(f"Object not found: {name}")
        self.name = name


class DecodeError(LatestBlobError):
    """Retrieved content is not valid UTF-8 text."""


class FilesystemError(LatestBlobError):
    """Local directory or file could not be created or written."""


class OpenerError(LatestBlobError):
    """The system could not open the downloaded file."""

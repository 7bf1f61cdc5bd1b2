from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Tuple

from ..models import ListingEntry


class CloudProvider(ABC):
    """Abstract base class for cloud storage providers."""

    @abstractmethod
    def describe(self) -> str:
        """Return a display location for the container (e.g., 's3://bucket/')."""
        pass

    @abstractmethod
    def list_page(
        self,
        prefix: str,
        next_token: Optional[str] = None,
    ) -> Tuple[List[ListingEntry], Optional[str]]:
        """Fetch one page of entries under prefix and the token for the next page, if any."""
        pass

    @abstractmethod
    def iter_chunks(self, name: str) -> Iterator[bytes]:
        """Yield the content of an object as byte chunks, in stream order."""
        pass

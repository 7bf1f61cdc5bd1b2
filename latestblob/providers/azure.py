from typing import Iterator, List, Optional, Tuple

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import BlobPrefix

from ..errors import ObjectNotFoundError, TransportError
from ..models import GroupingPrefix, ListingEntry, RealObject
from .base import CloudProvider


def account_url(account_name: str) -> str:
    return f"https://{account_name}.blob.core.windows.net"


class AzureBlobProvider(CloudProvider):
    """Azure Blob Storage provider backed by a ContainerClient."""

    def __init__(self, container_client, delimiter: Optional[str] = None):
        self.container_client = container_client
        self.delimiter = delimiter

    def describe(self) -> str:
        return f"{self.container_client.url.rstrip('/')}/"

    def _pager(self, prefix: str):
        if self.delimiter:
            return self.container_client.walk_blobs(
                name_starts_with=prefix or None, delimiter=self.delimiter
            )
        return self.container_client.list_blobs(name_starts_with=prefix or None)

    def list_page(
        self,
        prefix: str,
        next_token: Optional[str] = None,
    ) -> Tuple[List[ListingEntry], Optional[str]]:
        try:
            pages = self._pager(prefix).by_page(continuation_token=next_token)
            page = next(pages, [])
            entries = []
            for item in page:
                if isinstance(item, BlobPrefix):
                    entries.append(GroupingPrefix(prefix=item.name))
                else:
                    entries.append(RealObject(
                        name=item.name,
                        last_modified=item.last_modified,
                        size=item.size,
                    ))
            return entries, pages.continuation_token or None
        except AzureError as e:
            raise TransportError(f"Error listing blobs at '{prefix}': {e}") from e

    def iter_chunks(self, name: str) -> Iterator[bytes]:
        try:
            downloader = self.container_client.download_blob(name)
            for chunk in downloader.chunks():
                yield chunk
        except ResourceNotFoundError as e:
            raise ObjectNotFoundError(name) from e
        except AzureError as e:
            raise TransportError(f"Error retrieving blob '{name}': {e}") from e

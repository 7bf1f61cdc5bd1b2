from datetime import datetime, timezone

import pytest

from latestblob.errors import ObjectNotFoundError, TransportError
from latestblob.providers.base import CloudProvider


def ts(minute):
    return datetime(2024, 1, 1, 12, minute, tzinfo=timezone.utc)


class FakeProvider(CloudProvider):
    """In-memory provider serving pre-built pages and chunked content."""

    def __init__(self, pages=None, contents=None, chunk_size=3, fail_on_page=None):
        self.pages = pages or [[]]
        self.contents = contents or {}
        self.chunk_size = chunk_size
        self.fail_on_page = fail_on_page
        self.list_calls = []
        self.fetched = []

    def describe(self):
        return "fake://container/"

    def list_page(self, prefix, next_token=None):
        index = int(next_token) if next_token else 0
        self.list_calls.append((prefix, next_token))
        if self.fail_on_page == index:
            raise TransportError(f"page {index} failed")
        next_index = index + 1
        return list(self.pages[index]), (str(next_index) if next_index < len(self.pages) else None)

    def iter_chunks(self, name):
        self.fetched.append(name)
        if name not in self.contents:
            raise ObjectNotFoundError(name)
        data = self.contents[name]
        for start in range(0, len(data), self.chunk_size):
            yield data[start:start + self.chunk_size]


@pytest.fixture
def fake_provider_cls():
    return FakeProvider

"""Tests for streaming retrieval and text validation."""

import pytest

from latestblob.errors import DecodeError, ObjectNotFoundError, TransportError
from latestblob.providers.base import CloudProvider
from latestblob.retrieval import ensure_text, fetch

from conftest import FakeProvider


class BrokenStreamProvider(CloudProvider):
    def describe(self):
        return "broken://"

    def list_page(self, prefix, next_token=None):
        return [], None

    def iter_chunks(self, name):
        yield b"partial"
        raise TransportError("connection reset")


class TestFetch:
    def test_concatenates_chunks_in_order(self):
        provider = FakeProvider(contents={"doc.txt": b"hello, world"}, chunk_size=4)
        assert fetch(provider, "doc.txt") == b"hello, world"

    def test_empty_object(self):
        provider = FakeProvider(contents={"empty": b""})
        assert fetch(provider, "empty") == b""

    def test_missing_object(self):
        with pytest.raises(ObjectNotFoundError) as exc_info:
            fetch(FakeProvider(), "missing.txt")
        assert exc_info.value.name == "missing.txt"
        assert isinstance(exc_info.value, TransportError)

    def test_read_error_mid_stream_propagates(self):
        with pytest.raises(TransportError, match="connection reset"):
            fetch(BrokenStreamProvider(), "x")


class TestEnsureText:
    def test_valid_utf8_passes_through(self):
        data = "héllo".encode("utf-8")
        assert ensure_text(data, "a.txt") is data

    def test_invalid_utf8_raises(self):
        with pytest.raises(DecodeError, match="a.bin"):
            ensure_text(b"\xff\xfe\x00bad", "a.bin")


def test_verbose_fetch_trace_names_location(capsys):
    provider = FakeProvider(contents={"logs/a.csv": b"x"})
    fetch(provider, "logs/a.csv", verbose=True)
    assert "[Fetch: fake://container/logs/a.csv]" in capsys.readouterr().err

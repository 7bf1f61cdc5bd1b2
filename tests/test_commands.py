"""End-to-end tests for the list, open and clean commands against an in-memory provider."""

import os
from unittest.mock import MagicMock, patch

import pytest

from latestblob.commands.clean import do_clean
from latestblob.commands.ls import do_list
from latestblob.commands.open import do_open, download_latest
from latestblob.errors import DecodeError, ObjectNotFoundError, OpenerError, TransportError
from latestblob.models import GroupingPrefix, RealObject
from latestblob.progress import Progress

from conftest import FakeProvider, ts


class RecordingProgress(Progress):
    def __init__(self):
        self.messages = []
        self.finished = False

    def update(self, message):
        self.messages.append(message)

    def finish(self):
        self.finished = True


@pytest.fixture
def logs_provider():
    return FakeProvider(
        pages=[
            [RealObject("logs/a.csv", ts(1), 7), GroupingPrefix("logs/archive/")],
            [RealObject("logs/b.csv", ts(2), 8)],
        ],
        contents={"logs/a.csv": b"a,older", "logs/b.csv": b"b,newest"},
    )


class TestOpen:
    def test_opens_latest_under_cache_root(self, logs_provider, tmp_path):
        opener = MagicMock()
        progress = RecordingProgress()

        local_path = do_open(logs_provider, "logs/", local_root=str(tmp_path),
                             progress=progress, opener=opener)

        expected = os.path.join(str(tmp_path), "logs", "b.csv")
        assert local_path == expected
        with open(expected, "rb") as f:
            assert f.read() == b"b,newest"
        assert logs_provider.fetched == ["logs/b.csv"]
        opener.assert_called_once_with(expected)
        assert progress.messages[0] == "Finding the latest blob."
        assert progress.messages[1] == "Downloading logs/b.csv"
        assert progress.finished

    def test_explicit_name_skips_listing(self, logs_provider, tmp_path):
        local_path = do_open(logs_provider, "logs/", name="logs/a.csv",
                             local_root=str(tmp_path), opener=MagicMock())

        assert logs_provider.list_calls == []
        assert local_path == os.path.join(str(tmp_path), "logs", "a.csv")

    def test_without_cache_writes_base_name_to_cwd(self, logs_provider, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        local_path = do_open(logs_provider, "logs/", opener=MagicMock())

        assert local_path == "b.csv"
        assert (tmp_path / "b.csv").read_bytes() == b"b,newest"

    def test_no_match_is_not_an_error(self, tmp_path, capsys):
        opener = MagicMock()
        progress = RecordingProgress()

        result = do_open(FakeProvider(pages=[[]]), "none/", local_root=str(tmp_path),
                         progress=progress, opener=opener)

        assert result is None
        opener.assert_not_called()
        assert progress.finished
        assert "No objects found" in capsys.readouterr().out

    def test_opener_failure_keeps_file(self, logs_provider, tmp_path, capsys):
        opener = MagicMock(side_effect=OpenerError("no viewer."))

        local_path = do_open(logs_provider, "logs/", local_root=str(tmp_path), opener=opener)

        assert os.path.exists(local_path)
        assert "Warning: no viewer." in capsys.readouterr().err

    def test_binary_content_rejected_by_default(self, tmp_path):
        provider = FakeProvider(pages=[[RealObject("img.png", ts(1))]],
                                contents={"img.png": b"\x89PNG\xff\x00"})
        progress = RecordingProgress()

        with pytest.raises(DecodeError):
            download_latest(provider, "", local_root=str(tmp_path), progress=progress)
        assert not (tmp_path / "img.png").exists()
        assert progress.finished

    def test_binary_content_allowed(self, tmp_path):
        provider = FakeProvider(pages=[[RealObject("img.png", ts(1))]],
                                contents={"img.png": b"\x89PNG\xff\x00"})

        local_path = download_latest(provider, "", local_root=str(tmp_path), text_only=False)

        with open(local_path, "rb") as f:
            assert f.read() == b"\x89PNG\xff\x00"

    def test_listing_failure_propagates(self, tmp_path):
        provider = FakeProvider(pages=[[RealObject("a", ts(1))], []], fail_on_page=1)
        progress = RecordingProgress()

        with pytest.raises(TransportError):
            download_latest(provider, "", local_root=str(tmp_path), progress=progress)
        assert progress.finished

    def test_missing_named_object(self, logs_provider, tmp_path):
        with pytest.raises(ObjectNotFoundError):
            download_latest(logs_provider, "logs/", name="logs/zzz.csv", local_root=str(tmp_path))

    def test_parent_segments_in_name_stay_in_cache(self, tmp_path):
        provider = FakeProvider(pages=[[RealObject("logs/../../escaped.txt", ts(1))]],
                                contents={"logs/../../escaped.txt": b"data"})
        root = tmp_path / "cache"

        local_path = download_latest(provider, "logs/", local_root=str(root))

        assert os.path.realpath(local_path).startswith(os.path.realpath(str(root)) + os.sep)
        assert not (tmp_path / "escaped.txt").exists()
        assert (root / "logs" / "escaped.txt").read_bytes() == b"data"


class TestList:
    def test_prints_real_objects_in_listing_order(self, logs_provider, capsys):
        count = do_list(logs_provider, "logs/")

        lines = capsys.readouterr().out.splitlines()
        assert count == 2
        assert len(lines) == 2
        assert lines[0].endswith("logs/a.csv")
        assert lines[1].endswith("logs/b.csv")
        assert logs_provider.fetched == []

    def test_marks_latest(self, logs_provider, capsys):
        do_list(logs_provider, "logs/", show_latest=True)

        lines = capsys.readouterr().out.splitlines()
        assert "<- latest" not in lines[0]
        assert lines[1].endswith("logs/b.csv  <- latest")

    def test_empty(self, capsys):
        assert do_list(FakeProvider(pages=[[GroupingPrefix("x/")]]), "") == 0
        assert "No objects found." in capsys.readouterr().out


class TestClean:
    def test_confirmed_clean(self, tmp_path):
        (tmp_path / "f.txt").write_bytes(b"1")
        with patch("latestblob.commands.clean.confirm", return_value=True) as confirm:
            assert do_clean(str(tmp_path)) == 1
        confirm.assert_called_once()
        assert os.listdir(tmp_path) == []

    def test_declined_clean_keeps_files(self, tmp_path):
        (tmp_path / "f.txt").write_bytes(b"1")
        with patch("latestblob.commands.clean.confirm", return_value=False):
            assert do_clean(str(tmp_path)) == 0
        assert os.listdir(tmp_path) == ["f.txt"]

    def test_assume_yes_does_not_prompt(self, tmp_path):
        (tmp_path / "sub").mkdir()
        with patch("latestblob.commands.clean.confirm") as confirm:
            assert do_clean(str(tmp_path), assume_yes=True) == 1
        confirm.assert_not_called()

    def test_missing_directory(self, tmp_path):
        with patch("latestblob.commands.clean.confirm") as confirm:
            assert do_clean(str(tmp_path / "missing")) == 0
        confirm.assert_not_called()

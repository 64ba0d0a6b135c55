"""
StrToFile Backend — Archive Builder Unit Tests
================================================

What:  Tests for build_to_buffer, build_to_stream and generate_archive_filename.
How:   Archives are inspected with zipfile directly so the checks do not depend
       on the reader under test.

Test Strategy:
    ✅ Entry names, order and payloads (UTF-8, no BOM, deflate)
    ✅ Blank-path records skipped, duplicates kept
    ✅ Empty input → valid empty archive; None input → ValidationError
    ✅ Streaming to seekable and non-seekable sinks, sink left open
    ✅ Sink failures → InternalError
    ✅ Download filename pattern
"""

import io
import zipfile
from datetime import datetime

import pytest

from strtofile.exceptions import InternalError, ValidationError
from strtofile.schemas.file_record import FileRecord
from strtofile.services.archive_builder import (
    build_to_buffer,
    build_to_stream,
    generate_archive_filename,
)


def _open(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


class _NonSeekableSink(io.RawIOBase):
    """Write-only sink like an HTTP response body: no tell/seek."""

    def __init__(self):
        self.chunks = []

    def writable(self):
        return True

    def write(self, b):
        self.chunks.append(bytes(b))
        return len(b)

    def getvalue(self) -> bytes:
        return b"".join(self.chunks)


class _FailingSink(io.BytesIO):
    def write(self, b):
        raise OSError("disk full")


class TestBuildToBuffer:
    """In-memory archive construction."""

    def test_two_records_produce_two_entries_in_order(self):
        records = [
            FileRecord(path="readme.txt", content="hi"),
            FileRecord(path="docs/a.txt", content="x"),
        ]
        with _open(build_to_buffer(records)) as zf:
            assert zf.namelist() == ["readme.txt", "docs/a.txt"]
            assert zf.read("readme.txt") == b"hi"
            assert zf.read("docs/a.txt") == b"x"

    def test_input_order_is_preserved(self):
        names = ["z.txt", "a.txt", "m/n.txt", "b.txt"]
        records = [FileRecord(path=n, content=n) for n in names]
        with _open(build_to_buffer(records)) as zf:
            assert zf.namelist() == names

    def test_entry_names_are_sanitized(self):
        records = [
            FileRecord(path="\\folder\\file.txt", content="1"),
            FileRecord(path="a/../b.txt", content="2"),
            FileRecord(path="/lead/slash.txt", content="3"),
        ]
        with _open(build_to_buffer(records)) as zf:
            assert zf.namelist() == ["folder/file.txt", "a/b.txt", "lead/slash.txt"]

    def test_entries_use_deflate(self):
        records = [FileRecord(path="big.txt", content="abc" * 1000)]
        with _open(build_to_buffer(records)) as zf:
            info = zf.getinfo("big.txt")
            assert info.compress_type == zipfile.ZIP_DEFLATED
            assert info.compress_size < info.file_size

    def test_content_is_utf8_without_bom(self):
        records = [FileRecord(path="u.txt", content="naïve ✓ 中文")]
        with _open(build_to_buffer(records)) as zf:
            payload = zf.read("u.txt")
        assert not payload.startswith(b"\xef\xbb\xbf")
        assert payload == "naïve ✓ 中文".encode("utf-8")

    def test_empty_content_produces_empty_entry(self):
        with _open(build_to_buffer([FileRecord(path="e.txt", content="")])) as zf:
            assert zf.read("e.txt") == b""

    @pytest.mark.parametrize("blank", ["", "   ", "\t"])
    def test_blank_path_records_are_skipped(self, blank):
        records = [
            FileRecord(path="keep1.txt", content="1"),
            FileRecord(path=blank, content="dropped"),
            FileRecord(path="keep2.txt", content="2"),
        ]
        with _open(build_to_buffer(records)) as zf:
            assert zf.namelist() == ["keep1.txt", "keep2.txt"]

    def test_duplicate_paths_produce_duplicate_entries(self):
        records = [
            FileRecord(path="same.txt", content="first"),
            FileRecord(path="/same.txt", content="second"),
        ]
        with pytest.warns(UserWarning, match="Duplicate name"):
            data = build_to_buffer(records)
        with _open(data) as zf:
            infos = zf.infolist()
            assert [i.filename for i in infos] == ["same.txt", "same.txt"]
            assert [zf.read(i) for i in infos] == [b"first", b"second"]

    def test_empty_list_yields_valid_empty_archive(self):
        data = build_to_buffer([])
        assert zipfile.is_zipfile(io.BytesIO(data))
        with _open(data) as zf:
            assert zf.namelist() == []
            assert zf.testzip() is None

    def test_accepts_any_iterable(self):
        records = (FileRecord(path=f"{i}.txt", content=str(i)) for i in range(3))
        with _open(build_to_buffer(records)) as zf:
            assert zf.namelist() == ["0.txt", "1.txt", "2.txt"]

    def test_none_records_raises_validation_error(self):
        with pytest.raises(ValidationError, match="must not be null"):
            build_to_buffer(None)

    def test_none_record_item_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            build_to_buffer([FileRecord(path="a.txt", content="a"), None])
        assert exc_info.value.context["index"] == 1

    def test_nul_in_path_raises_validation_error(self):
        records = [
            FileRecord(path="ok.txt", content="ok"),
            FileRecord(path="a\x00b.txt", content="cut"),
        ]
        with pytest.raises(ValidationError, match="NUL") as exc_info:
            build_to_buffer(records)
        assert exc_info.value.context["index"] == 1


class TestBuildToStream:
    """Streaming archive construction into caller-owned sinks."""

    def test_matches_buffer_variant(self, sample_records):
        sink = io.BytesIO()
        assert build_to_stream(sample_records, sink) is None
        with _open(sink.getvalue()) as streamed, _open(build_to_buffer(sample_records)) as buffered:
            assert streamed.namelist() == buffered.namelist()
            for name in streamed.namelist():
                assert streamed.read(name) == buffered.read(name)

    def test_sink_is_left_open(self, sample_records):
        sink = io.BytesIO()
        build_to_stream(sample_records, sink)
        assert not sink.closed

    def test_non_seekable_sink_receives_valid_archive(self, sample_records):
        sink = _NonSeekableSink()
        build_to_stream(sample_records, sink)
        with _open(sink.getvalue()) as zf:
            assert zf.namelist() == [
                "readme.txt", "docs/a.txt", "src/main.py", "empty.txt", "unicode/中文.md",
            ]
            assert zf.read("src/main.py") == b"print('hello')\n"
            assert zf.testzip() is None

    def test_empty_list_streams_valid_empty_archive(self):
        sink = io.BytesIO()
        build_to_stream([], sink)
        with _open(sink.getvalue()) as zf:
            assert zf.namelist() == []

    def test_none_records_raises_validation_error(self):
        with pytest.raises(ValidationError):
            build_to_stream(None, io.BytesIO())

    def test_null_record_mid_list_leaves_sink_empty(self):
        sink = io.BytesIO()
        with pytest.raises(ValidationError):
            build_to_stream([FileRecord(path="a.txt", content="a"), None], sink)
        assert sink.getvalue() == b""

    def test_null_record_from_generator_leaves_sink_empty(self):
        records = (r for r in [FileRecord(path="a.txt", content="a"), None])
        sink = _NonSeekableSink()
        with pytest.raises(ValidationError):
            build_to_stream(records, sink)
        assert sink.getvalue() == b""

    def test_nul_path_leaves_sink_empty(self):
        sink = io.BytesIO()
        records = [
            FileRecord(path="first.txt", content="1"),
            FileRecord(path="x\x00y.txt", content="2"),
        ]
        with pytest.raises(ValidationError):
            build_to_stream(records, sink)
        assert sink.getvalue() == b""

    def test_none_sink_raises_validation_error(self, sample_records):
        with pytest.raises(ValidationError, match="output stream"):
            build_to_stream(sample_records, None)

    def test_failing_sink_raises_internal_error(self, sample_records):
        with pytest.raises(InternalError) as exc_info:
            build_to_stream(sample_records, _FailingSink())
        assert "disk full" in exc_info.value.context["error"]

    def test_closed_sink_raises_internal_error(self, sample_records):
        sink = io.BytesIO()
        sink.close()
        with pytest.raises(InternalError):
            build_to_stream(sample_records, sink)


class TestGenerateArchiveFilename:
    """Download name helper."""

    def test_pattern_with_prefix(self):
        now = datetime(2024, 1, 1, 15, 30, 45)
        assert generate_archive_filename("download", now=now) == "download_20240101_153045.zip"

    def test_default_prefix_is_files(self):
        now = datetime(2023, 12, 31, 9, 5, 7)
        assert generate_archive_filename(now=now) == "files_20231231_090507.zip"

    @pytest.mark.parametrize("prefix", [None, "", "   "])
    def test_blank_prefix_falls_back(self, prefix):
        name = generate_archive_filename(prefix, now=datetime(2024, 6, 1, 0, 0, 0))
        assert name == "files_20240601_000000.zip"

    def test_uses_current_time_by_default(self):
        before = datetime.now().replace(microsecond=0)
        name = generate_archive_filename("sample")
        after = datetime.now()
        stamp = datetime.strptime(name[len("sample_"):-len(".zip")], "%Y%m%d_%H%M%S")
        assert before <= stamp <= after

"""
StrToFile Backend — ZIP Archive Reader
========================================

What:  Parses uploaded ZIP archives back into FileRecords.
How:   parse_one walks a single archive in central-directory order;
       parse_many runs parse_one over several uploads and concatenates the
       results, source by source, without deduplicating or reordering.
Who:   Called by the upload route; usable directly from any Python caller.

Per-entry rules:
    - Entries with an empty leaf name ("docs/", "docs\\") are directory
      markers and produce no record
    - The payload is decoded as UTF-8; a leading UTF-8 BOM (EF BB BF) is
      stripped, any other bytes are decoded as-is
    - The record path is the entry's full name with "\\" turned into "/"

Failure policy:
    Any failure aborts the whole call; records gathered from earlier sources
    are discarded.
        zero-length or missing upload     → ValidationError
        not a ZIP / corrupt entry data    → FormatError
        payload not valid UTF-8, I/O      → InternalError
"""

import codecs
import io
import logging
import zipfile
import zlib
from typing import BinaryIO, Iterable, List, Optional, Tuple, Union

from strtofile.exceptions import FormatError, InternalError, ValidationError
from strtofile.schemas.file_record import ArchiveSource, FileRecord

logger = logging.getLogger(__name__)

UTF8_BOM = codecs.BOM_UTF8

# Bit 0 of the general purpose flag marks an encrypted entry
_ENCRYPTED_FLAG = 0x1

SourceLike = Union[ArchiveSource, bytes, bytearray, BinaryIO]


def _leaf_name(entry_name: str) -> str:
    return entry_name.replace("\\", "/").rsplit("/", 1)[-1]


def _decode_text(payload: bytes, entry_name: str) -> str:
    """Decode an entry payload as UTF-8, dropping a leading BOM if present."""
    if payload.startswith(UTF8_BOM):
        payload = payload[len(UTF8_BOM):]
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InternalError(
            message=f"Entry '{entry_name}' is not valid UTF-8 text",
            context={"entry": entry_name, "position": e.start},
        ) from e


def _as_seekable(source: Union[bytes, bytearray, BinaryIO]) -> BinaryIO:
    """zipfile needs random access to reach the central directory."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    seekable = getattr(source, "seekable", None)
    if seekable is not None and seekable():
        return source
    return io.BytesIO(source.read())


def parse_one(source: Optional[Union[bytes, bytearray, BinaryIO]]) -> List[FileRecord]:
    """
    Parse one ZIP archive into records, in archive entry order.

    Args:
        source: Raw archive bytes or a readable binary stream. The stream is
                read from its current position and is not closed.

    Raises:
        ValidationError: `source` is None
        FormatError:     not a valid archive, or an entry cannot be decompressed
        InternalError:   an entry is not UTF-8 text, or the stream failed
    """
    if source is None:
        raise ValidationError(message="The ZIP stream must not be null", field="source")

    records: List[FileRecord] = []
    entry_name = None
    try:
        with zipfile.ZipFile(_as_seekable(source), mode="r") as archive:
            for info in archive.infolist():
                entry_name = info.filename
                if not _leaf_name(entry_name):
                    continue
                if info.flag_bits & _ENCRYPTED_FLAG:
                    raise FormatError(
                        message=f"Entry '{entry_name}' is encrypted; encrypted archives are not supported",
                        context={"entry": entry_name},
                    )

                with archive.open(info, mode="r") as entry:
                    payload = entry.read()

                records.append(
                    FileRecord(
                        path=entry_name.replace("\\", "/"),
                        content=_decode_text(payload, entry_name),
                    )
                )

    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, ValueError) as e:
        # ValueError: negative offsets from a corrupted central directory
        logger.warning("Invalid ZIP data (entry=%s): %s", entry_name, str(e))
        raise FormatError(
            message="The ZIP file is invalid or corrupted",
            context={"entry": entry_name, "error": str(e)},
        ) from e
    except OSError as e:
        logger.error("I/O error while reading ZIP stream: %s", str(e))
        raise InternalError(
            message="Failed to read the ZIP stream",
            context={"entry": entry_name, "error": str(e)},
        ) from e

    logger.debug("Parsed ZIP archive: %d records", len(records))
    return records


def _stream_length(stream: BinaryIO) -> Tuple[int, BinaryIO]:
    """Bytes remaining in `stream`, plus a stream positioned where it started."""
    seekable = getattr(stream, "seekable", None)
    if seekable is not None and seekable():
        start = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(start)
        return end - start, stream
    buffered = io.BytesIO(stream.read())
    return len(buffered.getbuffer()), buffered


def _open_source(source: Optional[SourceLike], index: int) -> Tuple[Optional[str], BinaryIO]:
    """Normalize one upload into (filename, stream), rejecting missing or empty ones."""
    filename: Optional[str] = None
    if isinstance(source, ArchiveSource):
        filename, data = source.filename, source.data
        length, stream = len(data), io.BytesIO(data)
    elif isinstance(source, (bytes, bytearray, memoryview)):
        length, stream = len(source), io.BytesIO(bytes(source))
    elif source is not None:
        filename = getattr(source, "name", None)
        if not isinstance(filename, str):
            filename = None
        try:
            length, stream = _stream_length(source)
        except OSError as e:
            raise InternalError(
                message="Failed to read an uploaded file",
                context={"index": index, "error": str(e)},
            ) from e
    else:
        length, stream = 0, None

    if stream is None or length == 0:
        raise ValidationError(
            message="An uploaded file is empty, please check the ZIP uploads",
            field="zipFile",
            context={"index": index, "filename": filename},
        )
    return filename, stream


def parse_many(sources: Optional[Iterable[Optional[SourceLike]]]) -> List[FileRecord]:
    """
    Parse several uploaded archives and merge their records.

    The result holds every record of the first source (in entry order), then
    every record of the second, and so on. A source whose name does not end
    with ".zip" is still parsed; the mismatch is only logged.

    Raises:
        ValidationError: `sources` is None, or one source is missing or empty
        FormatError:     one source is not a valid archive
        InternalError:   see parse_one
    """
    if sources is None:
        raise ValidationError(message="The uploaded file list must not be null", field="zipFile")

    aggregated: List[FileRecord] = []
    source_count = 0
    for index, source in enumerate(sources):
        filename, stream = _open_source(source, index)
        if filename is not None and not filename.lower().endswith(".zip"):
            logger.warning("Uploaded file does not have a .zip extension: %s", filename)

        try:
            aggregated.extend(parse_one(stream))
        except FormatError as e:
            e.context.setdefault("source_index", index)
            if filename is not None:
                e.context.setdefault("filename", filename)
            raise
        source_count += 1

    logger.info("ZIP parse complete: %d records from %d archives", len(aggregated), source_count)
    return aggregated

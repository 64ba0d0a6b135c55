"""
StrToFile Backend — ZIP Archive Builder
=========================================

What:  Packs an ordered list of FileRecords into a ZIP archive.
How:   One algorithm, two targets: an in-memory buffer (build_to_buffer) or a
       caller-owned writable stream (build_to_stream). Each record becomes one
       deflate-compressed entry whose name is the sanitized record path and
       whose payload is the record content encoded as UTF-8 without a BOM.
Who:   Called by the download routes; usable directly from any Python caller.

Entry rules (applied in input order):
    1. A record whose path is blank after trimming is skipped silently
    2. The entry name is sanitize(record.path)
    3. A sanitized path containing NUL is rejected (zipfile would truncate it)
    4. Entries are never deduplicated: two records with the same sanitized
       path produce two entries with the same name (zipfile emits a
       "Duplicate name" UserWarning for the second one)

Memory:
    build_to_buffer holds the whole archive in memory and is meant for
    moderate payloads. build_to_stream writes through to the sink; the sink is
    left open and stays owned by the caller.
"""

import io
import logging
import zipfile
from datetime import datetime
from typing import BinaryIO, Iterable, List, Optional, Tuple

from strtofile.config import settings
from strtofile.exceptions import InternalError, ValidationError
from strtofile.schemas.file_record import FileRecord
from strtofile.services.path_sanitizer import sanitize

logger = logging.getLogger(__name__)

# e.g. download_20240101_153045.zip
ARCHIVE_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def _checked_entries(records: Iterable[FileRecord]) -> List[Tuple[str, bytes]]:
    """
    Resolve every record to (entry name, UTF-8 payload) before anything is written.

    A bad record anywhere in the list fails the build while the target is
    still untouched, so the caller never receives a truncated archive.
    """
    entries: List[Tuple[str, bytes]] = []
    for index, record in enumerate(records):
        if record is None:
            raise ValidationError(
                message=f"File #{index + 1} in the list is null",
                field="files",
                context={"index": index},
            )
        if not record.path or not record.path.strip():
            logger.debug("Skipping file #%d: blank path", index + 1)
            continue

        safe_path = sanitize(record.path)
        # zipfile cuts entry names at the first NUL
        if "\x00" in safe_path:
            raise ValidationError(
                message=f"File #{index + 1} has a path containing a NUL character",
                field="files",
                context={"index": index},
            )
        try:
            payload = record.content.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InternalError(
                message=f"File #{index + 1} content cannot be encoded as UTF-8",
                context={"index": index, "error": str(e)},
            ) from e
        entries.append((safe_path, payload))
    return entries


def _write_archive(target: BinaryIO, records: Iterable[FileRecord]) -> int:
    """
    Write every non-blank record into a new archive over `target`.

    Returns the number of entries written. Closing the ZipFile (end of the
    `with` block) writes the central directory; the target itself is not
    closed because zipfile never closes file objects it did not open.
    """
    entries = _checked_entries(records)

    written = 0
    try:
        with zipfile.ZipFile(
            target,
            mode="w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=settings.zip_compress_level,
        ) as archive:
            for safe_path, payload in entries:
                archive.writestr(safe_path, payload)
                written += 1
                logger.debug("Added entry %s (%d bytes)", safe_path, len(payload))

    except (OSError, ValueError) as e:
        # ValueError: closed sink
        logger.error("Failed to write ZIP archive: %s", str(e))
        raise InternalError(
            message="Failed to write the ZIP archive",
            context={"error": str(e), "entries_written": written},
        ) from e

    return written


def build_to_buffer(records: Optional[Iterable[FileRecord]]) -> bytes:
    """
    Build a ZIP archive in memory and return its bytes.

    An empty record list is legal and yields a valid archive with no entries.

    Raises:
        ValidationError: `records` is None, a record is None, or a sanitized
                         path contains a NUL character
        InternalError:   a record's content cannot be encoded
    """
    if records is None:
        raise ValidationError(message="The file list must not be null", field="files")

    buffer = io.BytesIO()
    count = _write_archive(buffer, records)
    data = buffer.getvalue()

    logger.info("ZIP archive built: %d entries, %d bytes", count, len(data))
    return data


def build_to_stream(records: Optional[Iterable[FileRecord]], sink: Optional[BinaryIO]) -> None:
    """
    Build a ZIP archive directly into a writable binary stream.

    The sink does not need to be seekable (zipfile falls back to data
    descriptors). On return the sink has received the complete archive and
    has been flushed; it is not closed.

    Raises:
        ValidationError: `records` or `sink` is None, a record is None, or a
                         sanitized path contains a NUL character
        InternalError:   writing to or flushing the sink failed

    Records are checked before the first byte is written, so a rejected list
    leaves the sink untouched.
    """
    if records is None:
        raise ValidationError(message="The file list must not be null", field="files")
    if sink is None:
        raise ValidationError(message="The output stream must not be null", field="sink")

    count = _write_archive(sink, records)

    try:
        sink.flush()
    except (OSError, ValueError) as e:
        raise InternalError(
            message="Failed to flush the ZIP output stream",
            context={"error": str(e)},
        ) from e

    logger.info("ZIP archive streamed: %d entries", count)


def generate_archive_filename(
    prefix: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Build a download name of the form `{prefix}_{YYYYMMDD_HHMMSS}.zip`.

    Args:
        prefix: Name prefix; None or blank falls back to "files"
                (settings.default_archive_prefix).
        now:    Timestamp to format; defaults to the current local time.
    """
    if not prefix or not prefix.strip():
        prefix = settings.default_archive_prefix
    timestamp = (now or datetime.now()).strftime(ARCHIVE_TIMESTAMP_FORMAT)
    return f"{prefix}_{timestamp}.zip"

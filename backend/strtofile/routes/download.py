"""
StrToFile Backend — Download Route Handlers
=============================================

What:  Turns JSON record lists into ZIP downloads.
How:   Routes check the request shape, then hand the records to the archive
       builder in the thread pool (zipfile is blocking) and return the bytes
       as an attachment.

Endpoints:
    POST /api/download/download-zip          buffered build → download_<ts>.zip
    POST /api/download/download-zip-stream   streamed build → stream_download_<ts>.zip
    GET  /api/download/download-sample       demo records   → sample_<ts>.zip
    GET  /api/download/info                  service description

Request body (both POST routes):
    [{"fileName": "readme.txt", "content": "hi"}, ...]
"""

import logging
import tempfile
from datetime import datetime
from typing import BinaryIO, Iterator, List

from fastapi import APIRouter, Body
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask

from strtofile import __version__
from strtofile.config import settings
from strtofile.exceptions import ValidationError
from strtofile.schemas.file_record import FileRecord
from strtofile.schemas.responses import ApiInfoResponse, EndpointInfo, ErrorResponse
from strtofile.services.archive_builder import (
    build_to_buffer,
    build_to_stream,
    generate_archive_filename,
)
from strtofile.services.sample_files import sample_records

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/download", tags=["Download"])

ZIP_MEDIA_TYPE = "application/zip"

# Spooled archives stay in memory up to this size, then move to a temp file
STREAM_SPOOL_MAX_MEMORY = 4 * 1024 * 1024
STREAM_CHUNK_SIZE = 64 * 1024

_ZIP_RESPONSES = {
    200: {"content": {ZIP_MEDIA_TYPE: {}}, "description": "ZIP archive download"},
    400: {"description": "Empty file list or invalid file entries", "model": ErrorResponse},
    500: {"description": "Archive could not be built", "model": ErrorResponse},
}


def _attachment_headers(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def _require_files(files: List[FileRecord]) -> None:
    if not files:
        raise ValidationError(message="The file list must not be empty", field="files")


def _validate_file_list(files: List[FileRecord]) -> None:
    """Reject empty lists and entries with a blank fileName (1-based positions)."""
    _require_files(files)

    problems = [
        f"File #{position} must have a non-empty fileName"
        for position, record in enumerate(files, start=1)
        if not record.path or not record.path.strip()
    ]
    if problems:
        raise ValidationError(
            message="Validation failed",
            field="files",
            context={"errors": problems},
        )


def _iter_chunks(fileobj: BinaryIO) -> Iterator[bytes]:
    while True:
        chunk = fileobj.read(STREAM_CHUNK_SIZE)
        if not chunk:
            break
        yield chunk


@router.post(
    "/download-zip",
    response_class=Response,
    responses=_ZIP_RESPONSES,
    summary="Download files as a ZIP archive",
    description="Packs the posted text files into a ZIP archive built in memory.",
)
async def download_zip(files: List[FileRecord] = Body(...)) -> Response:
    _validate_file_list(files)
    logger.info("Creating ZIP archive with %d files", len(files))

    zip_bytes = await run_in_threadpool(build_to_buffer, files)
    filename = generate_archive_filename("download")

    logger.info("ZIP archive created: %s (%d bytes)", filename, len(zip_bytes))
    return Response(
        content=zip_bytes,
        media_type=ZIP_MEDIA_TYPE,
        headers=_attachment_headers(filename),
    )


@router.post(
    "/download-zip-stream",
    response_class=StreamingResponse,
    responses=_ZIP_RESPONSES,
    summary="Download files as a streamed ZIP archive",
    description=(
        "Packs the posted text files into a ZIP archive written straight to a "
        "spooled temporary file and streams it back; suited to large payloads."
    ),
)
async def download_zip_stream(files: List[FileRecord] = Body(...)) -> StreamingResponse:
    _require_files(files)
    logger.info("Streaming ZIP archive with %d files", len(files))

    spool = tempfile.SpooledTemporaryFile(max_size=STREAM_SPOOL_MAX_MEMORY)
    try:
        await run_in_threadpool(build_to_stream, files, spool)
        spool.seek(0)
    except Exception:
        spool.close()
        raise

    filename = generate_archive_filename("stream_download")
    return StreamingResponse(
        _iter_chunks(spool),
        media_type=ZIP_MEDIA_TYPE,
        headers=_attachment_headers(filename),
        background=BackgroundTask(spool.close),
    )


@router.get(
    "/download-sample",
    response_class=Response,
    responses={200: _ZIP_RESPONSES[200], 500: _ZIP_RESPONSES[500]},
    summary="Download a sample ZIP archive",
)
async def download_sample() -> Response:
    zip_bytes = await run_in_threadpool(build_to_buffer, sample_records())
    filename = generate_archive_filename("sample")

    logger.info("Sample ZIP archive created: %s (%d bytes)", filename, len(zip_bytes))
    return Response(
        content=zip_bytes,
        media_type=ZIP_MEDIA_TYPE,
        headers=_attachment_headers(filename),
    )


@router.get(
    "/info",
    response_model=ApiInfoResponse,
    summary="Service information",
)
async def get_info() -> ApiInfoResponse:
    return ApiInfoResponse(
        name=settings.app_name,
        version=__version__,
        description=settings.app_description,
        endpoints=[
            EndpointInfo(method="POST", path="/api/download/download-zip", description="Buffered ZIP download"),
            EndpointInfo(method="POST", path="/api/download/download-zip-stream", description="Streamed ZIP download"),
            EndpointInfo(method="GET", path="/api/download/download-sample", description="Sample ZIP download"),
            EndpointInfo(method="GET", path="/api/download/info", description="Service information"),
            EndpointInfo(method="POST", path="/api/upload/parse-zip", description="Parse uploaded ZIP files"),
        ],
        timestamp=datetime.now(),
    )

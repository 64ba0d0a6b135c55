"""
StrToFile Backend — Upload Route Handler
==========================================

What:  POST /api/upload/parse-zip turns uploaded ZIP archives into records.
How:   Reads every multipart part of the `zipFile` field into memory (bounded
       by the body size middleware), then runs parse_many in the thread pool.

Error responses (handled by global exception handlers):
    HTTP 400: no files, an empty file (ValidationError), or an invalid /
              corrupted archive (FormatError)
    HTTP 500: an entry that is not UTF-8 text, or any unexpected error
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from strtofile.exceptions import ValidationError
from strtofile.schemas.file_record import ArchiveSource, FileRecord
from strtofile.schemas.responses import ErrorResponse
from strtofile.services.archive_reader import parse_many

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["Upload"])


@router.post(
    "/parse-zip",
    response_model=List[FileRecord],
    responses={
        200: {"description": "Records parsed from all uploaded archives, in upload order"},
        400: {"description": "Missing/empty upload or invalid ZIP", "model": ErrorResponse},
        500: {"description": "Unexpected server error", "model": ErrorResponse},
    },
    summary="Parse uploaded ZIP files into text files",
)
async def parse_zip(
    zip_files: Optional[List[UploadFile]] = File(
        default=None,
        alias="zipFile",
        description="One or more ZIP archives (multipart/form-data field 'zipFile')",
    ),
) -> List[FileRecord]:
    if not zip_files:
        raise ValidationError(message="Uploaded files must not be empty", field="zipFile")

    sources: List[ArchiveSource] = []
    try:
        for upload in zip_files:
            sources.append(ArchiveSource(filename=upload.filename, data=await upload.read()))
    finally:
        for upload in zip_files:
            await upload.close()

    records = await run_in_threadpool(parse_many, sources)

    logger.info(
        "ZIP parse complete: %d records from %d archives",
        len(records),
        len(sources),
    )
    return records

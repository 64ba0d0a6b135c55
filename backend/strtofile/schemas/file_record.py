"""
StrToFile Backend — Record Schemas
====================================

What:  The value types exchanged between the archive services and their callers.
How:   Frozen Pydantic models; FastAPI uses FileRecord directly as the JSON body
       of the download routes and as the response item of the upload route.

Wire format:
    The JSON field for the record path is `fileName`, the name the browser
    front end sends. Python code uses `path`; both names are accepted
    on input, and responses are serialized with `fileName`.

    [
        {"fileName": "readme.txt", "content": "hi"},
        {"fileName": "docs/a.txt", "content": "x"}
    ]
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class FileRecord(BaseModel):
    """
    One named text file: a relative path plus its text content.

    Records carry no identity beyond their two fields. Paths may use either
    slash style and are only sanitized when written into an archive.
    """
    path: str = Field(
        validation_alias=AliasChoices("fileName", "path"),
        serialization_alias="fileName",
        description="Relative file path, e.g. 'folder/file.txt'",
    )
    content: str = Field(description="Text content of the file (may be empty)")

    model_config = {"frozen": True, "populate_by_name": True}


class ArchiveSource(BaseModel):
    """
    An uploaded ZIP archive handed to the reader.

    `filename` is informational only (used for logging); `data` holds the raw
    archive bytes and may be empty, in which case the reader rejects it.
    """
    filename: Optional[str] = Field(default=None, description="Client-supplied upload name")
    data: bytes = Field(description="Raw ZIP bytes")

    model_config = {"frozen": True}

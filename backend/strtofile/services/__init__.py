# Services package init
"""
StrToFile Backend — Services Layer
====================================

What:  The archive conversion core, free of any HTTP concerns.
How:   Stateless module-level functions; callers pass plain values in and get
       plain values (bytes, record lists) back.

Service Inventory:
    - path_sanitizer:   sanitize() record paths into safe entry names
    - archive_builder:  build_to_buffer(), build_to_stream(),
                        generate_archive_filename()
    - archive_reader:   parse_one(), parse_many()
    - sample_files:     demo records for the sample download
"""

from strtofile.services.archive_builder import (
    build_to_buffer,
    build_to_stream,
    generate_archive_filename,
)
from strtofile.services.archive_reader import parse_many, parse_one
from strtofile.services.path_sanitizer import sanitize

__all__ = [
    "build_to_buffer",
    "build_to_stream",
    "generate_archive_filename",
    "parse_many",
    "parse_one",
    "sanitize",
]

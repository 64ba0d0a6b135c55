"""
StrToFile Backend — Application Package Initializer
====================================================

What: Marks the `strtofile` directory as a Python package.
Who:  Used by Python's import system, pytest, and uvicorn (`strtofile.main:app`).

Architecture Note:
    The backend is layered so the conversion logic never touches HTTP:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Services (Archive Conversion)    │  ← build / parse / sanitize
    ├─────────────────────────────────────┤
    │        Schemas (FileRecord)         │  ← Pydantic value types
    └─────────────────────────────────────┘

    - Routes deserialize requests into FileRecord lists or raw archive bytes
    - Services turn records into ZIP bytes and ZIP bytes back into records
    - Schemas are immutable values shared by both layers
"""

__version__ = "1.0.0"

# Middleware package init
"""
StrToFile Backend — Middleware Package
========================================

Middleware Chain (request direction):
    Request → [Body Size Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Body Size Limit first: oversized uploads are refused before any work
    2. Request ID: correlation ID for logs and error responses
    3. Logging: access line with status and duration
    4. CORS: FastAPI's CORSMiddleware (handles preflight)
"""

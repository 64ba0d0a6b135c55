# Routes package init
"""
StrToFile Backend — API Routes Package
========================================

Route Inventory:
    - download.py:  POST /api/download/download-zip
                    POST /api/download/download-zip-stream
                    GET  /api/download/download-sample
                    GET  /api/download/info
    - upload.py:    POST /api/upload/parse-zip
    - health.py:    GET  /health, GET / (redirect to /docs)

Routes stay thin: they extract records or uploaded bytes from the request,
call the archive services, and shape the HTTP response.
"""

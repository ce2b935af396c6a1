# Middleware package init
"""
Book Catalog API: Middleware Package
====================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

Request ID runs first so the access log line and any error log written while
handling the request carry the same id.
"""

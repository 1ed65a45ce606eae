# Middleware package init
"""
EntrySync Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Open CORS] → [Request ID] → [Logging] → [GZip] → Route Handler

    - Open CORS is outermost so preflights are answered before anything else
      runs and every response, errors included, carries the CORS headers
    - Request ID runs before Logging so the access line carries the ID
"""

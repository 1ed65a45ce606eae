# Routes package init
"""
EntrySync Backend — API Routes Package
========================================

Route Inventory:
    - entries.py: GET    /api/entries          (list with limit/offset)
                  POST   /api/entries          (insert or replace, one or many)
                  DELETE /api/entries/{id}     (delete by id)
    - sync.py:    POST   /api/sync             (reconcile client and server sets)
    - health.py:  GET    /health               (service health check)

Routes stay thin: they read the request, call a service with the
request-scoped gateway from dependencies.py, and return the result.
"""

# Services package init
"""
EntrySync Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - gateway.PersistenceGateway: bound query/execute and conflict-aware inserts
    - entry_codec: wire entry ⇄ storage row mapping
    - entry_service.EntryService: list, batch-upsert, delete
    - sync_service.SyncService: client/server reconciliation

Services are stateless. Each call receives the request's PersistenceGateway,
so the same service instance is shared by all requests.
"""

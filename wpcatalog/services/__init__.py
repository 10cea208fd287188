"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes between the API endpoints and the catalog stores.

This package provides:
- SyncOrchestrator / SyncTaskManager: catalog refresh
- QueryService: listing, search and lookup
- LinkService: download link resolution

Architecture Pattern: Service Layer
----------------------------------
    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Service      │  ← Business Logic
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │ Partition Store │  ← Snapshots (memory + database)
    └─────────────────┘

Services receive their collaborators through the constructor; the
application builds them once at startup.

==============================================================================
"""

from .sync_service import (
    CycleBatch,
    SyncOrchestrator,
    SyncResult,
    SyncState,
    SyncStatus,
    SyncTaskManager,
)
from .query_service import QueryService
from .link_service import LinkService

__all__ = [
    "CycleBatch",
    "SyncOrchestrator",
    "SyncResult",
    "SyncState",
    "SyncStatus",
    "SyncTaskManager",
    "QueryService",
    "LinkService",
]

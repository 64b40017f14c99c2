"""Storage adapter package.

Scope:
    Provides the object-store and document-store contracts used by the generation
    workflow, with filesystem implementations for local and single-host deployments.

Non-goals:
    - No cross-invocation locking or deduplication.
    - No read-modify-write of stored documents.
"""

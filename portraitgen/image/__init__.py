"""Image generation adapter package.

Scope:
    Provides the external generation client (request build, status classification,
    response traversal) and the writer that persists extracted images.

Non-goals:
    - No retries or streaming.
    - No image post-processing; payloads are stored as returned.
"""

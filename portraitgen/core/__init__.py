"""Core orchestration package.

Architectural role:
    Exposes the generation workflow that sits between the API/CLI entrypoints and
    the lower-level adapters (storage, generation client, artifact writer).

Composition:
    - `types`: data contracts and path conventions.
    - `request_gate`: validation and authorization of incoming requests.
    - `record_keeper`: audit record creation.
    - `orchestrator`: workflow sequencing and the failure boundary.

Determinism and side effects:
    Package import itself is deterministic and side-effect free. Runtime side effects
    are performed by `orchestrator` during request processing.
"""

"""Portrait generation API adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level parsing, principal resolution and response shaping.
- Delegates validation and execution to the core layer.
"""

"""Domain models and errors.

Why:
- Pure, strict data structures live here (Pydantic v2 + exceptions).
- The domain knows nothing about HTTP, the CLI or SDKs: only block concepts.
"""

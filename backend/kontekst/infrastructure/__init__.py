"""Infrastructure Layer — database engine, Anthropic client and logging setup.

Invariants:
    - Infrastructure may import core/errors.py, never core domain logic
    - All external calls wrapped with retry/timeout/error mapping

Design Decisions:
    - Resilient wrappers over raw clients: callers see KontekstError, never SDK errors
"""

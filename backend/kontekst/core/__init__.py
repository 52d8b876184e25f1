"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic; `now` is always passed in

Design Decisions:
    - Functional core separated from imperative shell: services/ reads, calls core, writes
    - Boundaries the shell must satisfy are declared as Protocols in repository_protocols
"""

"""API Layer — FastAPI routes, request dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Errors leave the API as the structured KontekstError envelope

Design Decisions:
    - Thin routes delegate to services; services delegate decisions to core
"""

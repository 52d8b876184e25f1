"""Kontekst backend — discussion rounds, premium content votes, vote-driven articles.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""

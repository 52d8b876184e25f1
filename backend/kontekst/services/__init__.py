"""Services Layer — database reads/writes, generation, presence and background work.

Invariants:
    - Services receive an AsyncSession (or a session factory) and never build engines
    - Domain decisions are delegated to core/; services only gather inputs and persist

Design Decisions:
    - One module per feature (votes, payments, seo, gamification, presence) for locality
"""

"""Database package — SQLAlchemy declarative Base shared by every model.

Design Decisions:
    - asyncpg driver for PostgreSQL in production, aiosqlite in tests
"""

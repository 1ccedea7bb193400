"""Database Layer — SQLAlchemy Base shared by models and migrations.

Invariants:
    - All sessions are async (AsyncSession), handed out by infrastructure/database.py

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for tests (same models, no dialect types)
"""

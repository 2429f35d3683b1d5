"""Infrastructure layer — SQLite entity store, id counters, and migrations.

This layer depends on stdlib, SQLAlchemy, Alembic, and the domain records.
It must never import from services, commands, or output.
"""

"""Adapters: concrete implementations of PLAUDIT's ports.

- `db`: engine factory, shared metadata, portable column types, error
  translation and Alembic migrations.
- `persistence`: table definitions plus SQLAlchemy and in-memory stores.
- `unit_of_work`: SQLAlchemy and in-memory units of work.
- `sanitizer`, `id_generators`: small pure adapters.
"""

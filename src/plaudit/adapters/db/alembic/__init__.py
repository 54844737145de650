"""Alembic migration scripts for PLAUDIT (see `plaudit.config.build_alembic_config`)."""

"""Unit tests keeping the initial migration in step with the models."""

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from libs.db.base import Base
from services.store_service.models import Order
from sqlalchemy import create_engine, inspect

MIGRATION_PATH = (
    Path(__file__).resolve().parents[2]
    / "alembic"
    / "versions"
    / "0001_create_store_tables.py"
)


def _load_migration():
    spec = importlib.util.spec_from_file_location("create_store_tables", MIGRATION_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def migrated_columns():
    """Run the migration on a fresh SQLite database and reflect its columns."""
    migration = _load_migration()
    engine = create_engine("sqlite://")
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            migration.upgrade()
        inspector = inspect(conn)
        columns = {
            table: {col["name"]: col for col in inspector.get_columns(table)}
            for table in inspector.get_table_names()
        }
    engine.dispose()
    return columns


@pytest.mark.unit
def test_order_amount_is_required():
    assert Order.__table__.c.amount_paise.nullable is False


@pytest.mark.unit
def test_migration_creates_every_model_table(migrated_columns):
    assert set(Base.metadata.tables) <= set(migrated_columns)


@pytest.mark.unit
def test_migration_columns_match_models(migrated_columns):
    for table in Base.metadata.sorted_tables:
        migrated = migrated_columns[table.name]
        assert set(migrated) == set(table.columns.keys()), table.name
        for column in table.columns:
            assert migrated[column.name]["nullable"] == column.nullable, (
                f"{table.name}.{column.name}"
            )

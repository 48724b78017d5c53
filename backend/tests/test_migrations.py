"""The Alembic baseline must build the same schema the models declare."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from intranet.models import SQLModel

VERSIONS_DIR = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def _load_revision(filename: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(filename.removesuffix(".py"), VERSIONS_DIR / filename)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_baseline_matches_models() -> None:
    baseline = _load_revision("0001_baseline.py")
    engine = create_engine("sqlite://")
    with engine.begin() as connection, Operations.context(MigrationContext.configure(connection)):
        baseline.upgrade()
        inspector = inspect(connection)
        assert set(inspector.get_table_names()) == set(SQLModel.metadata.tables)
        for name, table in SQLModel.metadata.tables.items():
            migrated = {column["name"] for column in inspector.get_columns(name)}
            assert migrated == set(table.columns.keys()), name
            migrated_indexes = {index["name"] for index in inspector.get_indexes(name)}
            assert {index.name for index in table.indexes} <= migrated_indexes, name


def test_baseline_downgrade_drops_everything() -> None:
    baseline = _load_revision("0001_baseline.py")
    engine = create_engine("sqlite://")
    with engine.begin() as connection, Operations.context(MigrationContext.configure(connection)):
        baseline.upgrade()
        baseline.downgrade()
        assert inspect(connection).get_table_names() == []

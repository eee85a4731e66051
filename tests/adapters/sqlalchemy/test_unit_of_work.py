from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect, select, update

from gridrows.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from gridrows.domain import MaterializedSelection
from tests.helpers.emp import emp_table, salaries
from tests.helpers.selection import stored_entries

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_applies_migrations(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    tables = set(inspect(sqlite_engine).get_table_names())
    assert {"gridrows_selection", "alembic_version"} <= tables


def test_unit_of_work_commits_changes(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyUnitOfWork() as uow:
        uow.session.execute(update(emp_table).where(emp_table.c.empno == 7839).values(sal=1))
        uow.commit()

    assert salaries(sqlite_engine)[7839] == 1


def test_unit_of_work_rolls_back_on_exception(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    before = salaries(sqlite_engine)

    with pytest.raises(RuntimeError), SqlAlchemyUnitOfWork() as uow:
        uow.session.execute(update(emp_table).values(sal=0))
        raise RuntimeError("boom")

    assert salaries(sqlite_engine) == before


def test_unit_of_work_exposes_processing_repositories(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    selection = MaterializedSelection.build([("7839",)], 1)

    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.selections.materialize(selection)
        assert stored_entries(uow.session, selection) == 1
        rows = uow.session.execute(select(emp_table.c.empno)).scalars().all()
        assert 7839 in rows

    with SqlAlchemyUnitOfWork() as uow:
        # nothing committed
        assert stored_entries(uow.session, selection) == 0


def test_repositories_are_unavailable_outside_the_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
    with pytest.raises(StartupError):
        _ = uow.session

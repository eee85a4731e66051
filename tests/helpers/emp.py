"""Employee fixtures shared by persistence and end-to-end tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import Column, Integer, MetaData, String, Table, insert, select, update

from gridrows.adapters.sqlalchemy import SqlDataset
from gridrows.domain import FragmentError

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session

    from gridrows.domain import RowContext

sample_metadata = MetaData()

emp_table = Table(
    "emp",
    sample_metadata,
    Column("empno", Integer, primary_key=True),
    Column("ename", String(30), nullable=False),
    Column("deptno", Integer, nullable=False),
    Column("sal", Integer, nullable=False),
)

# composite key: one row per employee and project
assignment_table = Table(
    "assignment",
    sample_metadata,
    Column("empno", Integer, primary_key=True),
    Column("project", String(20), primary_key=True),
    Column("hours", Integer, nullable=False),
)

EMPLOYEES: tuple[tuple[int, str, int, int], ...] = (
    (7839, "KING", 10, 5000),
    (7698, "BLAKE", 30, 2850),
    (7782, "CLARK", 10, 2450),
    (7566, "JONES", 20, 2975),
    (7788, "SCOTT", 20, 3000),
    (7902, "FORD", 20, 3000),
    (7369, "SMITH", 20, 800),
)

ASSIGNMENTS: tuple[tuple[int, str, int], ...] = (
    (7839, "APOLLO", 10),
    (7839, "GEMINI", 20),
    (7698, "APOLLO", 30),
    (7698, "GEMINI", 40),
)


def seed(engine: Engine) -> None:
    sample_metadata.create_all(engine)
    with engine.begin() as connection:
        connection.execute(
            insert(emp_table),
            [
                {"empno": empno, "ename": ename, "deptno": deptno, "sal": sal}
                for empno, ename, deptno, sal in EMPLOYEES
            ],
        )
        connection.execute(
            insert(assignment_table),
            [
                {"empno": empno, "project": project, "hours": hours}
                for empno, project, hours in ASSIGNMENTS
            ],
        )


def salaries(engine: Engine) -> dict[int, int]:
    with engine.connect() as connection:
        rows = connection.execute(select(emp_table.c.empno, emp_table.c.sal))
        return {int(empno): int(sal) for empno, sal in rows}


def hours(engine: Engine) -> dict[tuple[int, str], int]:
    with engine.connect() as connection:
        rows = connection.execute(
            select(assignment_table.c.empno, assignment_table.c.project, assignment_table.c.hours)
        )
        return {(int(empno), str(project)): int(value) for empno, project, value in rows}


def emp_dataset(*, deptno: int | None = None) -> SqlDataset:
    where = [emp_table.c.deptno == deptno] if deptno is not None else []
    return SqlDataset.from_table(emp_table, where=where)


def session_of(row: RowContext) -> Session:
    return cast("Session", row.session)


def raise_salary(amount: int, *, seen: list[int] | None = None) -> Callable[[RowContext], None]:
    def fragment(row: RowContext) -> None:
        if seen is not None:
            seen.append(cast("int", row["empno"]))
        session_of(row).execute(
            update(emp_table)
            .where(emp_table.c.empno == row["empno"])
            .values(sal=emp_table.c.sal + amount)
        )

    return fragment


def fail_on(empno: int, fragment: Callable[[RowContext], None]) -> Callable[[RowContext], None]:
    def failing(row: RowContext) -> None:
        if row["empno"] == empno:
            raise FragmentError(f"Salary of {row['ename']} is frozen", code="-20001")
        fragment(row)

    return failing

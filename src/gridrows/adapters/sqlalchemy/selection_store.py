"""Materialized selection storage and the predicate that joins against it."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import cast, delete, insert, select, tuple_

from gridrows.adapters.sqlalchemy.mappings import selection_table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session

    from gridrows.domain.selection import MaterializedSelection


class SqlAlchemySelectionStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def materialize(self, selection: MaterializedSelection) -> None:
        rows = selection.rows()
        if rows:
            self.session.execute(insert(selection_table), rows)

    def teardown(self, selection: MaterializedSelection) -> None:
        self.session.execute(
            delete(selection_table).where(selection_table.c.selection_id == selection.selection_id)
        )


def selection_predicate(
    columns: Sequence[ColumnElement[Any]],
    selection: MaterializedSelection,
) -> ColumnElement[bool]:
    """``(id columns) IN (SELECT c001, ... FROM selection)`` for one selection.

    Stored values are text; each is cast to the type of the identifier column it is
    compared with.
    """

    if len(columns) != selection.column_count:
        raise ValueError(
            f"Selection holds {selection.column_count} column(s), "
            f"dataset has {len(columns)} identifier column(s)"
        )
    stored = [
        cast(selection_table.c[name], column.type)
        for name, column in zip(selection.column_names, columns, strict=True)
    ]
    subquery = select(*stored).where(selection_table.c.selection_id == selection.selection_id)
    if len(columns) == 1:
        return columns[0].in_(subquery)
    return tuple_(*columns).in_(subquery)

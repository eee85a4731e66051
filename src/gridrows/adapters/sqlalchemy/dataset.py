"""Row iteration contexts over SQLAlchemy selects."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from gridrows.adapters.sqlalchemy.selection_store import selection_predicate
from gridrows.config.errors import ConfigurationError
from gridrows.domain.errors import MissingIdentifierColumnsError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence

    from sqlalchemy import ColumnElement, Result, Select, Table
    from sqlalchemy.orm import Session

    from gridrows.domain.selection import MaterializedSelection

log = getLogger(__name__)

type FilterFactory = Callable[[Mapping[str, str | None]], Sequence[ColumnElement[bool]]]


@dataclass(frozen=True, slots=True)
class SqlDataset:
    """A select statement plus the filters currently in effect on it.

    ``filters`` derives extra conditions from the request's item values (a search
    field, a status toggle, ...). Identifier columns default to the primary-key
    columns of the select, in select order.
    """

    name: str
    query: Select[Any]
    filters: FilterFactory | None = None
    identifier_columns: tuple[str, ...] | None = None

    @classmethod
    def from_table(
        cls,
        table: Table,
        *,
        name: str | None = None,
        where: Iterable[ColumnElement[bool]] = (),
        order_by: Iterable[ColumnElement[Any]] | None = None,
        filters: FilterFactory | None = None,
        identifier_columns: tuple[str, ...] | None = None,
    ) -> SqlDataset:
        query = select(table).where(*where)
        ordering = tuple(order_by) if order_by is not None else tuple(table.primary_key.columns)
        if ordering:
            query = query.order_by(*ordering)
        return cls(
            name=name or table.name,
            query=query,
            filters=filters,
            identifier_columns=identifier_columns,
        )

    def resolve_identifier_columns(self) -> tuple[ColumnElement[Any], ...]:
        selected = self.query.selected_columns
        if self.identifier_columns is not None:
            missing = [name for name in self.identifier_columns if name not in selected]
            if missing:
                raise ConfigurationError(
                    f'Identifier column(s) not selected by dataset "{self.name}": '
                    + ", ".join(missing)
                )
            return tuple(selected[name] for name in self.identifier_columns)
        return tuple(column for column in selected if getattr(column, "primary_key", False))


class SqlAlchemyExecutionContext:
    """Live cursor over the rows of one request."""

    def __init__(self, result: Result[Any]) -> None:
        self._result = result
        self._closed = False

    def __iter__(self) -> Iterator[Mapping[str, object]]:
        if self._closed:
            return
        for row in self._result.mappings():
            yield dict(row)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._result.close()

    @property
    def closed(self) -> bool:
        return self._closed


class SqlAlchemyContextBuilder:
    def __init__(self, session: Session) -> None:
        self.session = session

    def identifier_columns(self, dataset: SqlDataset) -> tuple[str, ...]:
        return tuple(column.key for column in self._identifier_columns(dataset) if column.key)

    def _identifier_columns(self, dataset: SqlDataset) -> tuple[ColumnElement[Any], ...]:
        columns = dataset.resolve_identifier_columns()
        log.debug("Identifier columns of %s: %s", dataset.name, [column.key for column in columns])
        return columns

    def build_statement(
        self,
        dataset: SqlDataset,
        *,
        state: Mapping[str, str | None],
        selection: MaterializedSelection | None = None,
    ) -> Select[Any]:
        stmt = dataset.query
        if dataset.filters is not None:
            conditions = tuple(dataset.filters(state))
            if conditions:
                stmt = stmt.where(*conditions)
        if selection is not None:
            columns = self._identifier_columns(dataset)
            if not columns:
                raise MissingIdentifierColumnsError(dataset.name)
            stmt = stmt.where(selection_predicate(columns, selection))
        return stmt

    def open(
        self,
        dataset: SqlDataset,
        *,
        state: Mapping[str, str | None],
        selection: MaterializedSelection | None = None,
    ) -> SqlAlchemyExecutionContext:
        stmt = self.build_statement(dataset, state=state, selection=selection)
        return SqlAlchemyExecutionContext(self.session.execute(stmt))

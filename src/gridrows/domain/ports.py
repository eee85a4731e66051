"""Ports implemented by persistence adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from types import TracebackType

    from gridrows.domain.selection import MaterializedSelection


@runtime_checkable
class Dataset(Protocol):
    """A named, queryable row source."""

    @property
    def name(self) -> str: ...


class ExecutionContext(Protocol):
    """Live row cursor over a dataset; ``close`` may be called any number of times."""

    def __iter__(self) -> Iterator[Mapping[str, object]]: ...

    def close(self) -> None: ...

    @property
    def closed(self) -> bool: ...


class ContextBuilder(Protocol):
    def identifier_columns(self, dataset: Dataset) -> tuple[str, ...]: ...

    def open(
        self,
        dataset: Dataset,
        *,
        state: Mapping[str, str | None],
        selection: MaterializedSelection | None = None,
    ) -> ExecutionContext: ...


class SelectionStore(Protocol):
    def materialize(self, selection: MaterializedSelection) -> None: ...

    def teardown(self, selection: MaterializedSelection) -> None: ...


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@dataclass(slots=True)
class ProcessingRepositories(RepositoryCollection):
    """Collaborators needed to process one request inside a transaction."""

    contexts: ContextBuilder
    selections: SelectionStore


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Transaction boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    @property
    def session(self) -> object: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


type ProcessingUnitOfWork = UnitOfWork[ProcessingRepositories]

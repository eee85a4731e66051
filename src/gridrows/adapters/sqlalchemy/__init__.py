"""SQLAlchemy adapter package for gridrows."""

from __future__ import annotations

from .dataset import SqlAlchemyContextBuilder, SqlAlchemyExecutionContext, SqlDataset
from .mappings import metadata, selection_table
from .selection_store import SqlAlchemySelectionStore, selection_predicate
from .unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyContextBuilder",
    "SqlAlchemyExecutionContext",
    "SqlAlchemySelectionStore",
    "SqlAlchemyUnitOfWork",
    "SqlDataset",
    "metadata",
    "selection_table",
    "selection_predicate",
    "shutdown",
    "startup",
]

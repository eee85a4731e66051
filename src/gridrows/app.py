"""Application orchestration entry points."""

from __future__ import annotations

from importlib import import_module
from logging import getLogger
from typing import TYPE_CHECKING

from gridrows.adapters.http.server import create_app
from gridrows.adapters.sqlalchemy.migrations import upgrade_head
from gridrows.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from gridrows.config.errors import ConfigurationError
from gridrows.config.storage import get_database_uri
from gridrows.domain.actions import ActionRegistry

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.engine import Engine

log = getLogger(__name__)


def load_registry(reference: str) -> ActionRegistry:
    """Import ``package.module:attribute`` and return the action registry it names.

    The attribute may be a registry or a zero-argument callable returning one.
    """

    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise ConfigurationError(
            f"Action registry reference must be 'module:attribute', got {reference!r}"
        )
    try:
        module = import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import action module {module_name!r}: {exc}") from exc
    try:
        target = getattr(module, attribute)
    except AttributeError as exc:
        raise ConfigurationError(f"{module_name!r} has no attribute {attribute!r}") from exc

    registry = target() if callable(target) and not isinstance(target, ActionRegistry) else target
    if not isinstance(registry, ActionRegistry):
        raise ConfigurationError(f"{reference} does not provide an ActionRegistry")
    return registry


def initialise_database(*, database_uri: str | None = None) -> str:
    """Apply migrations to ``database_uri`` (or the configured database) and return its URI."""

    uri = database_uri or get_database_uri()
    log.info("Upgrading database schema at %s", uri)
    upgrade_head(database_uri=uri)
    return uri


def create_server_app(
    registry: ActionRegistry,
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
) -> FastAPI:
    """Initialise persistence (once) and build the HTTP application for ``registry``."""

    if not is_started():
        startup(engine=engine, database_uri=database_uri)
    log.info("Serving %s action(s): %s", len(registry), ", ".join(sorted(registry)))
    return create_app(registry, unit_of_work_factory=SqlAlchemyUnitOfWork)

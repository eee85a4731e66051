"""Domain error definitions."""

from __future__ import annotations

from gridrows.config.errors import ConfigurationError


class MissingIdentifierColumnsError(ConfigurationError):
    """Raised when a selection cannot be scoped because the dataset has no identifier columns."""

    def __init__(self, dataset: str) -> None:
        super().__init__(
            f'The dataset "{dataset}" must have at least one identifier (primary key) column '
            "to process selected rows."
        )
        self.dataset = dataset


class SelectionPayloadError(ValueError):
    """Raised when a transported selection payload cannot be parsed."""


class UnknownActionError(LookupError):
    """Raised when a request references an action id that is not registered."""

    def __init__(self, action_id: str) -> None:
        super().__init__(f"Unknown action: {action_id}")
        self.action_id = action_id


class FragmentError(Exception):
    """Raised by mutation fragments to abort processing with an explicit error code."""

    def __init__(self, message: str, *, code: str | int = "FRAGMENT") -> None:
        super().__init__(message)
        self.code = str(code)
        self.message = message

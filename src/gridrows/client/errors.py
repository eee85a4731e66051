"""Client-side error definitions."""

from __future__ import annotations


class TransportError(RuntimeError):
    """Raised when a request never reaches the server or its answer is unusable."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

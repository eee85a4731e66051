"""Defaults for the row-processing request cycle."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_float, env_int

DEFAULT_CHUNK_SIZE = 8000
DEFAULT_SERVER_URL = "http://127.0.0.1:8000"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class ProcessingConfig:
    chunk_size: int = DEFAULT_CHUNK_SIZE


@dataclass(frozen=True, slots=True)
class ClientConfig:
    server_url: str = DEFAULT_SERVER_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    chunk_size: int = DEFAULT_CHUNK_SIZE


def get_processing_config() -> ProcessingConfig:
    return ProcessingConfig(
        chunk_size=env_int("GRIDROWS_CHUNK_SIZE", DEFAULT_CHUNK_SIZE, minimum=1),
    )


def get_client_config() -> ClientConfig:
    return ClientConfig(
        server_url=os.getenv("GRIDROWS_SERVER_URL") or DEFAULT_SERVER_URL,
        timeout_seconds=env_float("GRIDROWS_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        chunk_size=get_processing_config().chunk_size,
    )

"""
Code generation backends.

A flat registry of rendering tables keyed by generator name.
"""

from __future__ import annotations

from ..errors import UnknownBackendError
from .base import Dialect, SchemaBackend
from .typebox_backend import ELYSIA, TYPEBOX
from .zod_backend import ZOD

DIALECTS: dict[str, Dialect] = {d.name: d for d in (ELYSIA, TYPEBOX, ZOD)}


def available_backends() -> list[str]:
    return list(DIALECTS)


def get_backend(name: str) -> SchemaBackend:
    """
    Create the backend registered under a generator name.

    Raises:
        UnknownBackendError: If no backend has that name
    """
    dialect = DIALECTS.get(name)
    if dialect is None:
        raise UnknownBackendError(name, available_backends())
    return SchemaBackend(dialect)


__all__ = [
    "DIALECTS",
    "Dialect",
    "SchemaBackend",
    "available_backends",
    "get_backend",
]

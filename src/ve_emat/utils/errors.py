from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class Err(Enum):
    DATA_MISSING = auto()
    INVALID_CONFIG = auto()
    SCHEMA_MISMATCH = auto()
    ENGINE_FAILURE = auto()
    IO_ERROR = auto()
    PARSER_FAILURE = auto()
    UNKNOWN = auto()


@dataclass(eq=False)
class VEError(Exception):
    code: Err
    ctx: dict[str, Any] | None = None
    cause: Exception | None = None

    def __post_init__(self) -> None:
        if self.ctx is None:
            self.ctx = {}
        if self.cause is not None:
            self.__cause__ = self.cause
        super().__init__(self.code.name)

    def __str__(self) -> str:  # pragma: no cover - convenience for logging
        parts = [self.code.name]
        if self.ctx:
            parts.append(str(self.ctx))
        return ": ".join(parts)


class ConfigurationError(VEError):
    """A parameter has no usable manipulation entry, or a config file is invalid."""

    def __init__(self, *, reason: str, ctx: dict[str, Any] | None = None, cause: Exception | None = None):
        base_ctx = {"reason": reason}
        if ctx:
            base_ctx.update(ctx)
        super().__init__(Err.INVALID_CONFIG, ctx=base_ctx, cause=cause)


class InputNotFoundError(VEError):
    """An expected scenario-input directory or file is missing."""

    def __init__(self, *, reason: str, ctx: dict[str, Any] | None = None, cause: Exception | None = None):
        base_ctx = {"reason": reason}
        if ctx:
            base_ctx.update(ctx)
        super().__init__(Err.DATA_MISSING, ctx=base_ctx, cause=cause)


class SchemaMismatchError(VEError):
    """Mixture endpoint tables cannot be combined positionally."""

    def __init__(self, *, reason: str, ctx: dict[str, Any] | None = None):
        base_ctx = {"reason": reason}
        if ctx:
            base_ctx.update(ctx)
        super().__init__(Err.SCHEMA_MISMATCH, ctx=base_ctx)


class EngineError(VEError):
    def __init__(self, *, reason: str, ctx: dict[str, Any] | None = None, cause: Exception | None = None):
        base_ctx = {"reason": reason}
        if ctx:
            base_ctx.update(ctx)
        super().__init__(Err.ENGINE_FAILURE, ctx=base_ctx, cause=cause)


__all__ = [
    "Err",
    "VEError",
    "ConfigurationError",
    "InputNotFoundError",
    "SchemaMismatchError",
    "EngineError",
]

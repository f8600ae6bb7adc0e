"""Surface input-resolution and engine errors as Dagster failures.

A failed experiment asset reports which stage broke, the error code, the
scenario parameter involved and the machine-readable reason, e.g.::

    [setup] DATA_MISSING LUDENSITYMIX: value_dir_missing

The full error context is attached as JSON metadata so the run page shows
the offending path, file or column without digging through logs.
"""

from __future__ import annotations

from functools import wraps
from typing import Any

import dagster as dg
from dagster import Failure, MetadataValue, get_dagster_logger

from ve_emat.utils.errors import Err, VEError

__all__ = ["describe_error", "experiment_asset", "failure_metadata", "with_experiment_boundary"]

# Context keys promoted to their own metadata entries.
_PROMOTED_KEYS = ("reason", "parameter", "file", "column", "path")


def describe_error(stage: str, err: VEError) -> str:
    ctx = err.ctx or {}
    head = f"[{stage}] {err.code.name}"
    if ctx.get("parameter"):
        head = f"{head} {ctx['parameter']}"
    reason = ctx.get("reason")
    return f"{head}: {reason}" if reason else head


def failure_metadata(err: VEError) -> dict[str, MetadataValue]:
    ctx = err.ctx or {}
    metadata: dict[str, MetadataValue] = {"error_code": MetadataValue.text(err.code.name)}
    for key in _PROMOTED_KEYS:
        value = ctx.get(key)
        if value not in (None, ""):
            metadata[f"error_{key}"] = MetadataValue.text(str(value))
    if ctx:
        metadata.update(_ctx_to_metadata(ctx))
    return metadata


def _ctx_to_metadata(ctx: dict[str, Any]) -> dict[str, MetadataValue]:
    try:
        return {"error_ctx": MetadataValue.json(ctx)}
    except TypeError:
        return {"error_ctx_repr": MetadataValue.text(repr(ctx))}


def with_experiment_boundary(stage: str):
    """Convert ``VEError`` and file-system errors raised by an asset into ``Failure``.

    ``functools.wraps`` keeps the signature so Dagster still binds inputs,
    config and resources.
    """

    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except Failure:
                raise
            except VEError as err:
                description = describe_error(stage, err)
                get_dagster_logger().error(f"{description} {err.ctx}")
                raise Failure(description=description, metadata=failure_metadata(err)) from err
            except OSError as exc:
                description = f"[{stage}] {Err.IO_ERROR.name}: {exc.strerror or exc}"
                metadata = {"error_code": MetadataValue.text(Err.IO_ERROR.name)}
                if exc.filename:
                    metadata["error_path"] = MetadataValue.path(str(exc.filename))
                get_dagster_logger().error(description)
                raise Failure(description=description, metadata=metadata) from exc

        return wrapper

    return deco


def experiment_asset(*, stage: str, name: str | None = None, group_name: str = "experiment", **asset_kwargs):
    """``@dagster.asset`` for experiment stages, wrapped in the error boundary."""

    def deco(fn):
        wrapped = with_experiment_boundary(stage)(fn)
        return dg.asset(name=name, group_name=group_name, **asset_kwargs)(wrapped)

    return deco

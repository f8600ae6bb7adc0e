from __future__ import annotations

"""
Strategy registry for scenario-input manipulation.

Maps a manipulation kind (``"categorical"``, ``"mixture"``, ...) to the
callable that materializes a parameter's files. Strategies are simple
callables ``(spec, value, output_dir, settings) -> list[Path]`` that return
the files they wrote and may raise ``VEError`` subclasses on failure.

New kinds (scaling, additive deltas, template injection) are added with
``register_strategy`` without touching the resolver's dispatch loop.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..utils.errors import ConfigurationError
from .models import CATEGORICAL, MIXTURE, ParameterSpec, ResolverSettings

StrategyFn = Callable[[ParameterSpec, Any, Path, ResolverSettings], List[Path]]


_REGISTRY: Dict[str, StrategyFn] = {}


def register_strategy(kind: str, fn: StrategyFn, *, replace: bool = False) -> None:
    if not isinstance(kind, str) or not kind.strip():
        raise ConfigurationError(reason="empty_strategy_kind")
    if not callable(fn):
        raise ConfigurationError(reason="strategy_not_callable", ctx={"kind": kind})
    key = kind.strip()
    if key in _REGISTRY and not replace:
        raise ConfigurationError(reason="strategy_already_registered", ctx={"kind": key})
    _REGISTRY[key] = fn


def unregister_strategy(kind: str) -> None:
    _REGISTRY.pop(str(kind).strip(), None)


def get_strategy(kind: str) -> Optional[StrategyFn]:
    if not isinstance(kind, str):
        return None
    return _REGISTRY.get(kind.strip())


def list_strategies() -> Dict[str, StrategyFn]:
    return dict(_REGISTRY)


# ---- Built-in registrations ----

from .categorical import copy_categorical_inputs
from .mixture import mix_scenario_tables

register_strategy(CATEGORICAL, copy_categorical_inputs)
register_strategy(MIXTURE, mix_scenario_tables)


__all__ = [
    "StrategyFn",
    "register_strategy",
    "unregister_strategy",
    "get_strategy",
    "list_strategies",
]

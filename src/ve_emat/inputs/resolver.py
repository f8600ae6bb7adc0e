"""Materialize one experiment's parameter values into a model input directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from ..utils.errors import ConfigurationError
from .models import ParameterSpec, ResolverSettings
from .registry import StrategyFn, get_strategy

logger = logging.getLogger(__name__)


def _select_strategies(
    parameter_mapping: Mapping[str, Any],
    parameter_specs: Mapping[str, ParameterSpec],
    overrides: Mapping[str, StrategyFn],
) -> dict[str, StrategyFn]:
    missing = [name for name in parameter_mapping if name not in parameter_specs]
    if missing:
        raise ConfigurationError(reason="parameter_spec_missing", ctx={"parameters": missing})

    selected: dict[str, StrategyFn] = {}
    for name in parameter_mapping:
        spec = parameter_specs[name]
        fn = overrides.get(name) or get_strategy(spec.kind)
        if fn is None:
            raise ConfigurationError(
                reason="unsupported_strategy_kind",
                ctx={"parameter": name, "kind": spec.kind},
            )
        selected[name] = fn
    return selected


def resolve(
    parameter_mapping: Mapping[str, Any],
    parameter_specs: Mapping[str, ParameterSpec],
    output_dir: Path | str,
    *,
    settings: Optional[ResolverSettings] = None,
    overrides: Optional[Mapping[str, StrategyFn]] = None,
) -> dict[str, list[Path]]:
    """Overlay the files for every parameter in ``parameter_mapping`` onto ``output_dir``.

    All parameters are checked for a spec and a strategy before any file is
    touched. Files in ``output_dir`` that no parameter writes are left alone.
    Any error aborts the whole call and may leave ``output_dir`` partially
    overlaid; callers should not run the model on it.

    Returns the files written, keyed by parameter name.
    """
    settings = settings or ResolverSettings()
    strategies = _select_strategies(parameter_mapping, parameter_specs, overrides or {})

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    written: dict[str, list[Path]] = {}
    for name, value in parameter_mapping.items():
        spec = parameter_specs[name]
        logger.info("Resolving %s (%s) = %r", name, spec.kind, value)
        written[name] = list(strategies[name](spec, value, out, settings))
    return written

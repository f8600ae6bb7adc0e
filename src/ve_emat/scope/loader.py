"""Scope loader: experiment inputs plus their scenario-input manipulations."""

from __future__ import annotations

import json
from collections import OrderedDict
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..inputs.models import CATEGORICAL, MIXTURE, ParameterSpec
from ..inputs.registry import get_strategy
from ..utils.errors import ConfigurationError
from .models import CONSTANT, DTYPE_ALIASES, PTYPES, ModelScope, ScopeParameter

DEFAULT_SCENARIO_INPUTS_DIR = "Scenario-Inputs"

_SPEC_KEYS = {"kind", "group", "path"}


def _invalid(path: Path, error: str, **ctx: Any) -> ConfigurationError:
    return ConfigurationError(reason="invalid_scope", ctx={"path": str(path), "error": error, **ctx})


def _load_mapping(data: Any, *, path: Path) -> Mapping[str, Any]:
    if isinstance(data, Mapping):
        return data
    raise _invalid(path, "top-level must be mapping")


def _parse_file(path: Path) -> Mapping[str, Any]:
    suffix = path.suffix.lower()
    if not path.is_file():
        raise _invalid(path, "scope file not found")
    raw = path.read_text(encoding="utf-8")
    if suffix in {".yaml", ".yml"}:
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                reason="invalid_scope",
                ctx={"path": str(path), "error": "malformed YAML"},
                cause=exc,
            )
        return _load_mapping(data or {}, path=path)
    if suffix == ".json":
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                reason="invalid_scope",
                ctx={"path": str(path), "error": "malformed JSON"},
                cause=exc,
            )
        return _load_mapping(data, path=path)
    raise _invalid(path, "unsupported scope format")


def load_scope(path: Path | str) -> ModelScope:
    """Load a scope file into a :class:`ModelScope`."""

    scope_path = Path(path)
    data = _parse_file(scope_path)
    return parse_scope_mapping(data, source=scope_path, base_dir=scope_path.parent)


def parse_scope_mapping(
    data: Mapping[str, Any],
    *,
    source: Path | str,
    base_dir: Path | str,
) -> ModelScope:
    """Build a :class:`ModelScope` from an in-memory mapping.

    ``base_dir`` anchors a relative ``manipulations.scenario_inputs_dir``.
    """
    source = Path(source)
    base_dir = Path(base_dir)
    data = _load_mapping(data, path=source)

    header = data.get("scope", {}) or {}
    if not isinstance(header, Mapping):
        raise _invalid(source, "scope must be mapping")

    inputs_section = data.get("inputs")
    if not isinstance(inputs_section, Mapping) or not inputs_section:
        raise _invalid(source, "inputs mapping required")

    parameters: OrderedDict[str, ScopeParameter] = OrderedDict()
    for name, payload in inputs_section.items():
        parameters[str(name)] = _parse_parameter(str(name), payload, config_path=source)

    manipulations = data.get("manipulations", {}) or {}
    if not isinstance(manipulations, Mapping):
        raise _invalid(source, "manipulations must be mapping")

    specs = _parse_manipulations(
        manipulations,
        parameters=parameters,
        config_path=source,
        base_dir=base_dir,
    )

    return ModelScope(
        name=str(header.get("name") or source.stem),
        desc=str(header.get("desc") or ""),
        parameters=parameters,
        parameter_specs=specs,
    )


def _optional_float(value: Any, *, name: str, field: str, config_path: Path) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise _invalid(config_path, f"{field} not numeric", parameter=name)


def _parse_parameter(name: str, payload: Any, *, config_path: Path) -> ScopeParameter:
    if not isinstance(payload, Mapping):
        raise _invalid(config_path, "input must be mapping", parameter=name)

    ptype = str(payload.get("ptype", "")).strip().lower()
    if ptype not in PTYPES:
        raise _invalid(config_path, "unknown ptype", parameter=name, ptype=payload.get("ptype"))

    raw_dtype = str(payload.get("dtype", "")).strip().lower()
    dtype = DTYPE_ALIASES.get(raw_dtype)
    if dtype is None:
        raise _invalid(config_path, "unknown dtype", parameter=name, dtype=payload.get("dtype"))

    default = payload.get("default")
    values = None
    lower = upper = None

    if dtype == "categorical":
        values = payload.get("values")
        if not isinstance(values, list) or not values:
            raise _invalid(config_path, "categorical input requires values list", parameter=name)
        values = tuple(str(v) for v in values)
        if default is not None and str(default) not in values:
            raise _invalid(config_path, "default not in values", parameter=name, default=default)
        if default is not None:
            default = str(default)
    else:
        lower = _optional_float(payload.get("min"), name=name, field="min", config_path=config_path)
        upper = _optional_float(payload.get("max"), name=name, field="max", config_path=config_path)
        if lower is not None and upper is not None and lower > upper:
            raise _invalid(config_path, "min greater than max", parameter=name)
        if default is not None:
            try:
                numeric_default = float(default)
            except (TypeError, ValueError):
                raise _invalid(config_path, "default not numeric", parameter=name, default=default)
            if (lower is not None and numeric_default < lower) or (
                upper is not None and numeric_default > upper
            ):
                raise _invalid(config_path, "default outside range", parameter=name, default=default)

    return ScopeParameter(
        name=name,
        ptype=ptype,
        dtype=dtype,
        default=default,
        shortname=str(payload.get("shortname") or ""),
        desc=str(payload.get("desc") or ""),
        values=values,
        min=lower,
        max=upper,
    )


def _parse_manipulations(
    section: Mapping[str, Any],
    *,
    parameters: Mapping[str, ScopeParameter],
    config_path: Path,
    base_dir: Path,
) -> "OrderedDict[str, ParameterSpec]":
    scenario_root = Path(section.get("scenario_inputs_dir") or DEFAULT_SCENARIO_INPUTS_DIR)
    if not scenario_root.is_absolute():
        scenario_root = (base_dir / scenario_root).resolve()

    entries = section.get("parameters", {}) or {}
    if not isinstance(entries, Mapping):
        raise _invalid(config_path, "manipulations.parameters must be mapping")

    unknown = [name for name in entries if name not in parameters]
    if unknown:
        raise _invalid(config_path, "manipulation for unknown input", parameters=sorted(map(str, unknown)))

    specs: OrderedDict[str, ParameterSpec] = OrderedDict()
    for name, param in parameters.items():
        entry = entries.get(name)
        if entry is None:
            if param.ptype == CONSTANT:
                continue
            raise _invalid(config_path, "input has no manipulation", parameter=name)
        specs[name] = _parse_spec_entry(name, entry, param=param, config_path=config_path, scenario_root=scenario_root)
    return specs


def _parse_spec_entry(
    name: str,
    entry: Any,
    *,
    param: ScopeParameter,
    config_path: Path,
    scenario_root: Path,
) -> ParameterSpec:
    if not isinstance(entry, Mapping):
        raise _invalid(config_path, "manipulation must be mapping", parameter=name)

    kind = entry.get("kind")
    if not isinstance(kind, str) or not kind.strip():
        raise _invalid(config_path, "manipulation kind required", parameter=name)
    kind = kind.strip()
    if get_strategy(kind) is None:
        raise _invalid(config_path, "unsupported manipulation kind", parameter=name, kind=kind)

    if kind == MIXTURE:
        if param.dtype == "categorical":
            raise _invalid(config_path, "categorical input cannot use mixture", parameter=name)
        lower = param.min if param.min is not None else 0.0
        upper = param.max if param.max is not None else 1.0
        if lower < 0.0 or upper > 1.0:
            raise _invalid(config_path, "mixture range must lie within [0, 1]", parameter=name)
    if kind == CATEGORICAL and param.dtype == "float":
        raise _invalid(config_path, "continuous input cannot use categorical drop-in", parameter=name)

    if "path" in entry:
        source_dir = Path(str(entry["path"]))
        if not source_dir.is_absolute():
            source_dir = scenario_root / source_dir
    elif "group" in entry:
        source_dir = scenario_root / str(entry["group"]) / name
    else:
        source_dir = scenario_root / name

    options = {key: value for key, value in entry.items() if key not in _SPEC_KEYS}
    if "exclude_columns" in options:
        excluded = options["exclude_columns"]
        if not isinstance(excluded, list) or not all(isinstance(c, str) for c in excluded):
            raise _invalid(config_path, "exclude_columns must be list of strings", parameter=name)
        options["exclude_columns"] = tuple(excluded)

    return ParameterSpec(name=name, kind=kind, source_dir=source_dir, options=options)

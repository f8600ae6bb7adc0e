"""Data structures backing an experiment scope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..inputs.models import ParameterSpec
from ..utils.errors import ConfigurationError

UNCERTAINTY = "exogenous uncertainty"
LEVER = "policy lever"
CONSTANT = "constant"
PTYPES = (UNCERTAINTY, LEVER, CONSTANT)

DTYPE_ALIASES = {
    "cat": "categorical",
    "categorical": "categorical",
    "float": "float",
    "real": "float",
    "int": "int",
    "integer": "int",
}


@dataclass(frozen=True)
class ScopeParameter:
    """One declared experiment input."""

    name: str
    ptype: str
    dtype: str
    default: Any = None
    shortname: str = ""
    desc: str = ""
    values: Optional[Sequence[Any]] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def label(self) -> str:
        return self.shortname or self.name

    def coerce(self, value: Any) -> Any:
        if self.dtype == "categorical":
            return str(value)
        try:
            coerced = int(value) if self.dtype == "int" else float(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                reason="parameter_value_not_numeric",
                ctx={"parameter": self.name, "dtype": self.dtype, "value": value},
                cause=exc,
            )
        # Written as negated comparisons so NaN is rejected too.
        too_low = self.min is not None and not coerced >= self.min
        too_high = self.max is not None and not coerced <= self.max
        if too_low or too_high:
            raise ConfigurationError(
                reason="parameter_value_out_of_range",
                ctx={"parameter": self.name, "value": coerced, "min": self.min, "max": self.max},
            )
        return coerced


@dataclass(frozen=True)
class ModelScope:
    """Top-level scope bundle loaded from disk."""

    name: str
    parameters: Mapping[str, ScopeParameter]
    parameter_specs: Mapping[str, ParameterSpec]
    desc: str = ""

    def defaults(self) -> dict[str, Any]:
        """Default value for every non-constant parameter that declares one."""
        return {
            name: param.default
            for name, param in self.parameters.items()
            if param.ptype != CONSTANT and param.default is not None
        }

    def coerce(self, mapping: Mapping[str, Any]) -> dict[str, Any]:
        """Convert raw (often string) values to each parameter's dtype.

        Unknown names are passed through so the resolver can report them.
        """
        coerced: dict[str, Any] = {}
        for name, value in mapping.items():
            param = self.parameters.get(name)
            coerced[name] = param.coerce(value) if param is not None else value
        return coerced

    def experiment(self, mapping: Mapping[str, Any]) -> dict[str, Any]:
        """Defaults overlaid with ``mapping``, coerced, in scope order."""
        merged = self.defaults()
        merged.update(mapping)
        return self.coerce(merged)

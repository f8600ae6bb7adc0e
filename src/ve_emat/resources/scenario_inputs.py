from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from dagster import ConfigurableResource
from pydantic import Field, PrivateAttr

from ve_emat.data_layer.paths import ModelPaths
from ve_emat.inputs.models import (
    DEFAULT_EXCLUDE_COLUMNS,
    DEFAULT_FLOAT_FORMAT,
    DEFAULT_NA_REP,
    ResolverSettings,
)
from ve_emat.scope import ModelScope, load_scope


class ScenarioInputsResource(ConfigurableResource):
    """Model root, scope file and mixing settings for experiment setup.

    Attributes:
        model_root: Directory holding ``Scenario-Inputs/``, ``inputs/`` and
            optionally ``base-inputs/``.
        scope_path: Scope YAML/JSON; relative paths resolve against model_root.
        exclude_columns: Columns copied from endpoint 1 instead of mixed.
        integers_as_floats: Mix integer columns as floats, without rounding.
        clear_inputs: Recreate ``inputs/`` from base inputs before each overlay.
    """

    model_root: str
    scope_path: str = "scope.yml"
    exclude_columns: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_COLUMNS))
    integers_as_floats: bool = False
    float_format: str = DEFAULT_FLOAT_FORMAT
    na_rep: str = DEFAULT_NA_REP
    clear_inputs: bool = True

    _scope_cache: Dict[str, ModelScope] = PrivateAttr(default_factory=dict)

    def paths(self) -> ModelPaths:
        return ModelPaths.from_str(self.model_root)

    def settings(self) -> ResolverSettings:
        return ResolverSettings(
            exclude_columns=tuple(self.exclude_columns),
            integers_as_floats=self.integers_as_floats,
            float_format=self.float_format,
            na_rep=self.na_rep,
        )

    def scope_file(self) -> Path:
        candidate = Path(self.scope_path)
        if not candidate.is_absolute():
            candidate = Path(self.model_root) / candidate
        return candidate

    def scope(self) -> ModelScope:
        key = str(self.scope_file())
        if key not in self._scope_cache:
            self._scope_cache[key] = load_scope(self.scope_file())
        return self._scope_cache[key]

"""Data structures shared by the input manipulation strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

DEFAULT_EXCLUDE_COLUMNS: tuple[str, ...] = ("Year", "Geo")
DEFAULT_FLOAT_FORMAT = "%.5f"
DEFAULT_NA_REP = "NA"

CATEGORICAL = "categorical"
MIXTURE = "mixture"


@dataclass(frozen=True)
class ParameterSpec:
    """How one experiment parameter maps onto scenario-input files.

    ``source_dir`` is the per-parameter scenario-input tree: one subdirectory
    per categorical value, or the ``1``/``2`` endpoints for a mixture.
    ``options`` carries strategy-specific overrides.
    """

    name: str
    kind: str
    source_dir: Path
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolverSettings:
    """Run-wide defaults for table mixing and output formatting."""

    exclude_columns: Sequence[str] = DEFAULT_EXCLUDE_COLUMNS
    integers_as_floats: bool = False
    float_format: str = DEFAULT_FLOAT_FORMAT
    na_rep: str = DEFAULT_NA_REP

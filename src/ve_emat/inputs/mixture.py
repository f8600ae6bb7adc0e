"""Mixture of data tables: linear blend between two bounding scenarios.

A mixture parameter's scenario tree holds exactly two endpoint directories,
``1`` and ``2``, with identically named and identically shaped CSV tables.
For weight ``w`` each numeric cell becomes ``v1 * (1 - w) + v2 * w``.

Tables are read with pandas' nullable dtypes, so an integer column with gaps
stays ``Int64`` instead of decaying to float; excluded columns such as
``Year`` are therefore written back exactly as read from endpoint ``1``.

Integer columns are rounded half-to-even (numpy/pandas ``round``) so that
``0`` and ``1`` mixed at ``w=0.5`` yields ``0``; set ``integers_as_floats``
to keep them unrounded instead.

Missing cells are treated as zero for the arithmetic. When either table of a
pair had any missing cell, every zero in the mixed output (outside the
excluded columns) is written back as missing. This cannot tell a genuine zero
from a formerly missing cell, so real zeros in such tables come out missing.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Iterable, Sequence

import pandas as pd
from pandas.api.types import is_bool_dtype, is_float_dtype, is_integer_dtype

from ..utils.csv_reading import read_csv_with_context
from ..utils.errors import ConfigurationError, InputNotFoundError, SchemaMismatchError
from .models import ParameterSpec, ResolverSettings

logger = logging.getLogger(__name__)

ENDPOINT_1 = "1"
ENDPOINT_2 = "2"


def coerce_weight(name: str, value: Any) -> float:
    """Return ``value`` as a float weight in [0, 1]."""
    if isinstance(value, bool):
        raise ConfigurationError(reason="mixture_weight_not_numeric", ctx={"parameter": name, "value": value})
    try:
        weight = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            reason="mixture_weight_not_numeric",
            ctx={"parameter": name, "value": value},
            cause=exc,
        )
    if math.isnan(weight) or not 0.0 <= weight <= 1.0:
        raise ConfigurationError(
            reason="mixture_weight_out_of_range",
            ctx={"parameter": name, "value": weight},
        )
    return weight


def endpoint_pairs(spec: ParameterSpec) -> list[tuple[str, Path, Path]]:
    """List ``(filename, path_in_1, path_in_2)`` for every table in endpoint 1.

    Every file in ``1`` must have a namesake in ``2``; nothing is skipped.
    """
    source_dir = Path(spec.source_dir)
    dir_1 = source_dir / ENDPOINT_1
    dir_2 = source_dir / ENDPOINT_2
    for endpoint in (dir_1, dir_2):
        if not endpoint.is_dir():
            raise InputNotFoundError(
                reason="mixture_endpoint_missing",
                ctx={"parameter": spec.name, "path": str(endpoint)},
            )

    names = sorted(p.name for p in dir_1.iterdir() if p.is_file())
    if not names:
        raise InputNotFoundError(
            reason="mixture_endpoint_empty",
            ctx={"parameter": spec.name, "path": str(dir_1)},
        )

    missing = [name for name in names if not (dir_2 / name).is_file()]
    if missing:
        raise InputNotFoundError(
            reason="mixture_pair_missing",
            ctx={"parameter": spec.name, "path": str(dir_2), "files": missing},
        )
    return [(name, dir_1 / name, dir_2 / name) for name in names]


def _is_numeric(dtype) -> bool:
    return not is_bool_dtype(dtype) and (is_integer_dtype(dtype) or is_float_dtype(dtype))


def partition_columns(
    df1: pd.DataFrame,
    df2: pd.DataFrame,
    *,
    exclude_columns: Iterable[str],
    integers_as_floats: bool = False,
    parameter: str = "",
    filename: str = "",
) -> tuple[list[str], list[str]]:
    """Split mixable columns into ``(float_cols, int_cols)``.

    A column is integer only when it is integer-typed (numpy or nullable
    ``Int64``) in both tables. Excluded columns and columns that are
    non-numeric in both tables are not mixed; a column numeric in only one
    table raises ``SchemaMismatchError``.
    """
    excluded = set(exclude_columns)
    float_cols: list[str] = []
    int_cols: list[str] = []
    for col in df1.columns:
        if col in excluded:
            continue
        left, right = df1[col].dtype, df2[col].dtype
        numeric_left, numeric_right = _is_numeric(left), _is_numeric(right)
        if numeric_left != numeric_right:
            raise SchemaMismatchError(
                reason="column_type_mismatch",
                ctx={
                    "parameter": parameter,
                    "file": filename,
                    "column": str(col),
                    "dtype_1": str(left),
                    "dtype_2": str(right),
                },
            )
        if not numeric_left:
            continue
        if is_integer_dtype(left) and is_integer_dtype(right):
            int_cols.append(col)
        else:
            float_cols.append(col)

    if integers_as_floats:
        float_cols.extend(int_cols)
        int_cols = []
    return float_cols, int_cols


def _check_shapes(df1: pd.DataFrame, df2: pd.DataFrame, *, parameter: str, filename: str) -> None:
    cols_1, cols_2 = list(df1.columns), list(df2.columns)
    if set(cols_1) != set(cols_2) or len(cols_1) != len(cols_2):
        raise SchemaMismatchError(
            reason="column_mismatch",
            ctx={
                "parameter": parameter,
                "file": filename,
                "only_in_1": sorted(set(cols_1) - set(cols_2)),
                "only_in_2": sorted(set(cols_2) - set(cols_1)),
            },
        )
    if len(df1) != len(df2):
        raise SchemaMismatchError(
            reason="row_count_mismatch",
            ctx={"parameter": parameter, "file": filename, "rows_1": len(df1), "rows_2": len(df2)},
        )


def mix_tables(
    df1: pd.DataFrame,
    df2: pd.DataFrame,
    weight: float,
    *,
    exclude_columns: Sequence[str] = ("Year", "Geo"),
    integers_as_floats: bool = False,
    parameter: str = "",
    filename: str = "",
) -> pd.DataFrame:
    """Blend two same-shaped tables positionally; ``weight`` is the share of ``df2``."""
    _check_shapes(df1, df2, parameter=parameter, filename=filename)
    df1 = df1.reset_index(drop=True)
    df2 = df2[list(df1.columns)].reset_index(drop=True)

    had_missing = bool(df1.isna().to_numpy().any() or df2.isna().to_numpy().any())

    float_cols, int_cols = partition_columns(
        df1,
        df2,
        exclude_columns=exclude_columns,
        integers_as_floats=integers_as_floats,
        parameter=parameter,
        filename=filename,
    )

    weight_1 = 1.0 - weight
    out = df1.copy()
    for col in float_cols:
        out[col] = _filled(df1[col]) * weight_1 + _filled(df2[col]) * weight
    for col in int_cols:
        mixed = _filled(df1[col]) * weight_1 + _filled(df2[col]) * weight
        out[col] = mixed.round().astype("Int64")

    if had_missing:
        for col in float_cols + int_cols:
            series = out[col]
            out[col] = series.mask(series == 0)
    return out


def _filled(series: pd.Series) -> pd.Series:
    # Missing cells count as zero in the arithmetic.
    return series.astype("Float64").fillna(0.0).astype("float64")


def mix_scenario_tables(
    spec: ParameterSpec,
    value: Any,
    output_dir: Path,
    settings: ResolverSettings,
) -> list[Path]:
    weight = coerce_weight(spec.name, value)
    exclude_columns = tuple(spec.options.get("exclude_columns", settings.exclude_columns))
    integers_as_floats = bool(spec.options.get("integers_as_floats", settings.integers_as_floats))

    pairs = endpoint_pairs(spec)

    # Mix everything before writing so a bad pair leaves no output behind.
    mixed: list[tuple[Path, pd.DataFrame]] = []
    for filename, path_1, path_2 in pairs:
        df1 = read_csv_with_context(path_1, nullable=True)
        df2 = read_csv_with_context(path_2, nullable=True)
        table = mix_tables(
            df1,
            df2,
            weight,
            exclude_columns=exclude_columns,
            integers_as_floats=integers_as_floats,
            parameter=spec.name,
            filename=filename,
        )
        mixed.append((Path(output_dir) / filename, table))

    written: list[Path] = []
    for dest, table in mixed:
        table.to_csv(dest, index=False, float_format=settings.float_format, na_rep=settings.na_rep)
        written.append(dest)

    logger.info("Mixed %d table(s) for %s at weight %.5f", len(written), spec.name, weight)
    return written

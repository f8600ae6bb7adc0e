"""Categorical drop-in: copy the files for the chosen value verbatim."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any

from ..utils.errors import InputNotFoundError
from .models import ParameterSpec, ResolverSettings

logger = logging.getLogger(__name__)


def available_values(source_dir: Path) -> list[str]:
    """Names of the value subdirectories under a categorical scenario tree."""
    return sorted(p.name for p in Path(source_dir).iterdir() if p.is_dir())


def copy_categorical_inputs(
    spec: ParameterSpec,
    value: Any,
    output_dir: Path,
    settings: ResolverSettings,
) -> list[Path]:
    source_dir = Path(spec.source_dir)
    if not source_dir.is_dir():
        raise InputNotFoundError(
            reason="scenario_dir_missing",
            ctx={"parameter": spec.name, "path": str(source_dir)},
        )

    # Match against listed names so case-insensitive filesystems cannot
    # resolve "High" to "high".
    choice = str(value)
    values = available_values(source_dir)
    if choice not in values:
        raise InputNotFoundError(
            reason="value_dir_missing",
            ctx={
                "parameter": spec.name,
                "value": choice,
                "path": str(source_dir),
                "available": values,
            },
        )

    value_dir = source_dir / choice
    files = sorted(p for p in value_dir.iterdir() if p.is_file())
    if not files:
        logger.warning("Categorical value %s=%s has no files in %s", spec.name, choice, value_dir)

    written: list[Path] = []
    for src in files:
        dest = Path(output_dir) / src.name
        shutil.copyfile(src, dest)
        written.append(dest)

    logger.info("Copied %d file(s) for %s=%s", len(written), spec.name, choice)
    return written

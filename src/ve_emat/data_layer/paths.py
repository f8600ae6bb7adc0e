from __future__ import annotations

"""Path helpers for a files-based model root and its input directories."""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from ..utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Canonical directory names under a model root (single source of truth)
SCENARIO_INPUTS_DIRNAME = "Scenario-Inputs"
INPUTS_DIRNAME = "inputs"
BASE_INPUTS_DIRNAME = "base-inputs"
DEFS_DIRNAME = "defs"
OUTPUTS_DIRNAME = "outputs"


@dataclass(frozen=True)
class ModelPaths:
    """Project path helper bound to a model root."""

    model_root: Path

    def __post_init__(self):
        if self.model_root is None or str(self.model_root).strip() == "":
            raise ConfigurationError(reason="paths_missing_model_root")
        object.__setattr__(self, "model_root", Path(self.model_root))

    @classmethod
    def from_str(cls, model_root: str) -> "ModelPaths":
        return cls(Path(model_root))

    # --- Core directories ---
    @property
    def scenario_inputs_dir(self) -> Path:
        return self.model_root / SCENARIO_INPUTS_DIRNAME

    @property
    def inputs_dir(self) -> Path:
        return self.model_root / INPUTS_DIRNAME

    @property
    def base_inputs_dir(self) -> Path:
        return self.model_root / BASE_INPUTS_DIRNAME

    @property
    def defs_dir(self) -> Path:
        return self.model_root / DEFS_DIRNAME

    @property
    def outputs_dir(self) -> Path:
        return self.model_root / OUTPUTS_DIRNAME

    def scenario_dir(self, group: str, parameter: str) -> Path:
        return self.scenario_inputs_dir / group / parameter

    def input_file(self, filename: str) -> Path:
        return self.inputs_dir / filename


def prepare_inputs_dir(paths: ModelPaths, *, clear: bool = True, seed_from_base: bool = True) -> Path:
    """Reset ``inputs/`` before an experiment's overlay.

    With ``clear`` the directory is removed and recreated; with
    ``seed_from_base`` the files in ``base-inputs/`` (when present) are
    copied in so untouched inputs keep their baseline values.
    """
    target = paths.inputs_dir
    if clear and target.exists():
        shutil.rmtree(target)
    target.mkdir(parents=True, exist_ok=True)

    if seed_from_base and paths.base_inputs_dir.is_dir():
        seeded = 0
        for src in sorted(paths.base_inputs_dir.iterdir()):
            if src.is_file():
                shutil.copyfile(src, target / src.name)
                seeded += 1
        logger.info("Seeded %d base input file(s) into %s", seeded, target)
    return target

"""One experiment's setup: defaults, a fresh inputs directory, then the overlay."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from .data_layer.paths import ModelPaths, prepare_inputs_dir
from .inputs.models import ResolverSettings
from .inputs.resolver import resolve
from .scope.models import ModelScope

logger = logging.getLogger(__name__)


def setup_experiment(
    scope: ModelScope,
    parameters: Mapping[str, Any],
    paths: ModelPaths,
    *,
    settings: Optional[ResolverSettings] = None,
    clear: bool = True,
) -> dict[str, list[Path]]:
    """Prepare ``paths.inputs_dir`` for one experiment.

    Unspecified non-constant parameters take their scope defaults. Any error
    propagates; the engine must not be run on the resulting directory then.
    """
    experiment = scope.experiment(parameters)
    target = prepare_inputs_dir(paths, clear=clear)
    logger.info("Setting up experiment with %d parameter(s) in %s", len(experiment), target)
    return resolve(experiment, scope.parameter_specs, target, settings=settings)

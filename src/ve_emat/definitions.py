import os

from dagster import Definitions, in_process_executor

from ve_emat.assets.group_experiment import engine_run, resolved_model_inputs
from ve_emat.data_layer.paths import ModelPaths
from ve_emat.resources import EngineResource, ScenarioInputsResource

EXPERIMENT_ASSETS = (
    resolved_model_inputs,
    engine_run,
)


def _default_paths() -> ModelPaths:
    model_root = os.environ.get("VE_EMAT_MODEL_ROOT", "model")
    return ModelPaths.from_str(model_root)


def _shared_resources(paths: ModelPaths, scope_path: str) -> dict:
    return {
        "scenario_inputs": ScenarioInputsResource(
            model_root=str(paths.model_root),
            scope_path=scope_path,
        ),
        "engine": EngineResource(
            executable=os.environ.get("VE_EMAT_ENGINE", "Rscript"),
            script=os.environ.get("VE_EMAT_ENGINE_SCRIPT", "run_model.R"),
        ),
    }


def build_definitions(*, paths: ModelPaths | None = None, scope_path: str | None = None) -> Definitions:
    resolved_paths = paths or _default_paths()
    resolved_scope = scope_path or os.environ.get("VE_EMAT_SCOPE", "scope.yml")

    # Experiments share one inputs/ directory, so steps must not run in parallel.
    return Definitions(
        assets=list(EXPERIMENT_ASSETS),
        resources=_shared_resources(resolved_paths, resolved_scope),
        executor=in_process_executor,
    )


defs = build_definitions()

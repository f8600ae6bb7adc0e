"""
Group: experiment

Assets preparing one experiment's model inputs and running the engine on them.
Parameter values arrive as run config strings and are coerced by the scope.
"""

from typing import Dict

from dagster import Config, MetadataValue
from pydantic import Field

from .boundary import experiment_asset
from ..experiment import setup_experiment


class ExperimentConfig(Config):
    """Parameter values for one experiment; omitted inputs use scope defaults."""

    experiment_id: str = "default"
    parameters: Dict[str, str] = Field(default_factory=dict)


@experiment_asset(
    stage="setup",
    description="Overlay scenario inputs for one experiment onto the model's inputs/ directory",
    compute_kind="pandas",
    required_resource_keys={"scenario_inputs"},
)
def resolved_model_inputs(context, config: ExperimentConfig) -> dict:
    scenario_inputs = context.resources.scenario_inputs
    paths = scenario_inputs.paths()
    written = setup_experiment(
        scenario_inputs.scope(),
        config.parameters,
        paths,
        settings=scenario_inputs.settings(),
        clear=scenario_inputs.clear_inputs,
    )
    files = {name: sorted(p.name for p in out) for name, out in written.items()}
    context.add_output_metadata(
        {
            "experiment_id": MetadataValue.text(config.experiment_id),
            "inputs_dir": MetadataValue.path(str(paths.inputs_dir)),
            "parameters": MetadataValue.int(len(files)),
            "files_written": MetadataValue.int(sum(len(v) for v in files.values())),
            "files": MetadataValue.json(files),
        }
    )
    return {"experiment_id": config.experiment_id, "files": files}


@experiment_asset(
    stage="engine",
    description="Run the simulation engine against the resolved model inputs",
    required_resource_keys={"scenario_inputs", "engine"},
)
def engine_run(context, resolved_model_inputs: dict) -> dict:
    paths = context.resources.scenario_inputs.paths()
    result = context.resources.engine.run(paths.model_root)
    context.add_output_metadata(
        {
            "experiment_id": MetadataValue.text(str(resolved_model_inputs.get("experiment_id", ""))),
            "returncode": MetadataValue.int(result.returncode),
            "duration_s": MetadataValue.float(float(result.duration_s)),
            "outputs_dir": MetadataValue.path(str(paths.outputs_dir)),
        }
    )
    return {
        "experiment_id": resolved_model_inputs.get("experiment_id"),
        "returncode": result.returncode,
        "duration_s": result.duration_s,
    }

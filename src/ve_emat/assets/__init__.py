from .group_experiment import ExperimentConfig, engine_run, resolved_model_inputs

__all__ = [
    "ExperimentConfig",
    "engine_run",
    "resolved_model_inputs",
]

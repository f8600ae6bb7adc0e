from .engine import EngineResource
from .scenario_inputs import ScenarioInputsResource

__all__ = [
    "EngineResource",
    "ScenarioInputsResource",
]

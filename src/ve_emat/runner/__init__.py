from .engine import EngineCommand, EngineResult, build_env, run_engine

__all__ = ["EngineCommand", "EngineResult", "build_env", "run_engine"]

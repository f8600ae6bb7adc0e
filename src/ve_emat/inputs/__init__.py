"""Scenario-input resolution: turn parameter values into model input files."""

from .models import CATEGORICAL, MIXTURE, ParameterSpec, ResolverSettings
from .registry import get_strategy, list_strategies, register_strategy, unregister_strategy
from .resolver import resolve

__all__ = [
    "CATEGORICAL",
    "MIXTURE",
    "ParameterSpec",
    "ResolverSettings",
    "get_strategy",
    "list_strategies",
    "register_strategy",
    "unregister_strategy",
    "resolve",
]

"""Experiment scope: declared inputs and how each maps onto scenario files."""

from .loader import load_scope, parse_scope_mapping
from .models import CONSTANT, LEVER, UNCERTAINTY, ModelScope, ScopeParameter

__all__ = [
    "CONSTANT",
    "LEVER",
    "UNCERTAINTY",
    "ModelScope",
    "ScopeParameter",
    "load_scope",
    "parse_scope_mapping",
]

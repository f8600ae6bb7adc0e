"""Filesystem layout of a files-based model root."""

from .paths import ModelPaths, prepare_inputs_dir

__all__ = ["ModelPaths", "prepare_inputs_dir"]

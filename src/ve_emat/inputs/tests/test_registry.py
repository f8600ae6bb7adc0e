from pathlib import Path

import pytest

from ve_emat.inputs.categorical import copy_categorical_inputs
from ve_emat.inputs.mixture import mix_scenario_tables
from ve_emat.inputs.registry import (
    get_strategy,
    list_strategies,
    register_strategy,
    unregister_strategy,
)
from ve_emat.utils.errors import ConfigurationError, Err

pytestmark = [pytest.mark.unit]


def _scale(spec, value, output_dir: Path, settings):
    return []


def test_builtin_strategies_are_registered():
    strategies = list_strategies()
    assert strategies["categorical"] is copy_categorical_inputs
    assert strategies["mixture"] is mix_scenario_tables


def test_register_and_lookup_custom_strategy():
    try:
        register_strategy("scale", _scale)
        assert get_strategy("scale") is _scale
        assert get_strategy(" scale ") is _scale
    finally:
        unregister_strategy("scale")
    assert get_strategy("scale") is None


def test_duplicate_registration_requires_replace():
    with pytest.raises(ConfigurationError) as exc:
        register_strategy("categorical", _scale)
    assert exc.value.code is Err.INVALID_CONFIG
    assert get_strategy("categorical") is copy_categorical_inputs


def test_replace_overrides_existing_kind():
    try:
        register_strategy("categorical", _scale, replace=True)
        assert get_strategy("categorical") is _scale
    finally:
        register_strategy("categorical", copy_categorical_inputs, replace=True)


@pytest.mark.parametrize("kind", ["", "   ", None])
def test_empty_kind_rejected(kind):
    with pytest.raises(ConfigurationError):
        register_strategy(kind, _scale)


def test_non_callable_rejected():
    with pytest.raises(ConfigurationError):
        register_strategy("bogus", "not-a-function")


def test_list_strategies_returns_copy():
    snapshot = list_strategies()
    snapshot["bogus"] = _scale
    assert get_strategy("bogus") is None

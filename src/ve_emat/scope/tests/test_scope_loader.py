from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any

import pytest

from ve_emat.inputs.models import CATEGORICAL, MIXTURE
from ve_emat.scope import CONSTANT, LEVER, UNCERTAINTY, load_scope, parse_scope_mapping
from ve_emat.utils.errors import ConfigurationError, Err

pytestmark = [pytest.mark.unit]


BASE_SCOPE: dict[str, Any] = {
    "scope": {"name": "test"},
    "inputs": {
        "CARSVCAVAILSCEN": {
            "ptype": "exogenous uncertainty",
            "dtype": "cat",
            "default": "mid",
            "values": ["low", "mid", "high"],
        },
        "LUDENSITYMIX": {
            "ptype": "policy lever",
            "dtype": "real",
            "default": 0.0,
            "min": 0.0,
            "max": 1.0,
        },
    },
    "manipulations": {
        "scenario_inputs_dir": "Scenario-Inputs",
        "parameters": {
            "CARSVCAVAILSCEN": {"kind": "categorical", "group": "Vehicles"},
            "LUDENSITYMIX": {"kind": "mixture", "group": "Land-Use", "exclude_columns": ["Geo"]},
        },
    },
}


def _parse(tmp_path: Path, payload: dict[str, Any]):
    return parse_scope_mapping(deepcopy(payload), source=tmp_path / "scope.json", base_dir=tmp_path)


def _mutated(**changes: Any) -> dict[str, Any]:
    payload = deepcopy(BASE_SCOPE)
    for dotted, value in changes.items():
        node = payload
        *parents, leaf = dotted.split("__")
        for key in parents:
            node = node[key]
        if value is None:
            node.pop(leaf, None)
        else:
            node[leaf] = value
    return payload


def test_load_scope_yaml_fixture(model_root: Path):
    scope = load_scope(model_root / "scope.yml")

    assert scope.name == "VE-RSPM test model"
    assert list(scope.parameters) == ["CARSVCAVAILSCEN", "LUDENSITYMIX", "BASEYEAR"]
    carsvc = scope.parameters["CARSVCAVAILSCEN"]
    assert carsvc.ptype == UNCERTAINTY
    assert carsvc.dtype == "categorical"
    assert carsvc.values == ("low", "mid", "high")
    assert carsvc.label == "Car Service Availability"
    assert scope.parameters["LUDENSITYMIX"].ptype == LEVER
    assert scope.parameters["BASEYEAR"].ptype == CONSTANT

    specs = scope.parameter_specs
    assert list(specs) == ["CARSVCAVAILSCEN", "LUDENSITYMIX"]
    assert specs["CARSVCAVAILSCEN"].kind == CATEGORICAL
    assert specs["CARSVCAVAILSCEN"].source_dir == (
        model_root / "Scenario-Inputs" / "Vehicles" / "CARSVCAVAILSCEN"
    ).resolve()
    assert specs["LUDENSITYMIX"].kind == MIXTURE


def test_load_scope_json_round_trip(tmp_path: Path):
    path = tmp_path / "scope.json"
    path.write_text(json.dumps(BASE_SCOPE), encoding="utf-8")

    scope = load_scope(path)

    assert scope.parameters["LUDENSITYMIX"].dtype == "float"
    assert scope.parameter_specs["LUDENSITYMIX"].options == {"exclude_columns": ("Geo",)}
    assert scope.defaults() == {"CARSVCAVAILSCEN": "mid", "LUDENSITYMIX": 0.0}


def test_explicit_path_overrides_group(tmp_path: Path):
    payload = _mutated(manipulations__parameters__CARSVCAVAILSCEN={"kind": "categorical", "path": "shared/carsvc"})

    scope = _parse(tmp_path, payload)

    assert scope.parameter_specs["CARSVCAVAILSCEN"].source_dir == (
        tmp_path / "Scenario-Inputs"
    ).resolve() / "shared" / "carsvc"


def test_experiment_overlays_defaults_and_coerces(tmp_path: Path):
    scope = _parse(tmp_path, BASE_SCOPE)

    assert scope.experiment({"LUDENSITYMIX": "0.25"}) == {
        "CARSVCAVAILSCEN": "mid",
        "LUDENSITYMIX": 0.25,
    }


def test_coerce_rejects_non_numeric(tmp_path: Path):
    scope = _parse(tmp_path, BASE_SCOPE)

    with pytest.raises(ConfigurationError):
        scope.coerce({"LUDENSITYMIX": "lots"})


@pytest.mark.parametrize("value", ["0.8", "-0.1", "nan"])
def test_coerce_rejects_values_outside_declared_range(tmp_path: Path, value: str):
    scope = _parse(tmp_path, _mutated(inputs__LUDENSITYMIX__max=0.5))

    with pytest.raises(ConfigurationError) as exc:
        scope.coerce({"LUDENSITYMIX": value})
    assert exc.value.ctx["reason"] == "parameter_value_out_of_range"
    assert exc.value.ctx["parameter"] == "LUDENSITYMIX"
    assert exc.value.ctx["max"] == 0.5


def test_coerce_accepts_range_bounds(tmp_path: Path):
    scope = _parse(tmp_path, _mutated(inputs__LUDENSITYMIX__max=0.5))

    assert scope.coerce({"LUDENSITYMIX": "0.5"}) == {"LUDENSITYMIX": 0.5}
    assert scope.coerce({"LUDENSITYMIX": 0}) == {"LUDENSITYMIX": 0.0}


@pytest.mark.parametrize(
    "changes, error",
    [
        ({"inputs": None}, "inputs mapping required"),
        ({"inputs__CARSVCAVAILSCEN__ptype": "guess"}, "unknown ptype"),
        ({"inputs__CARSVCAVAILSCEN__dtype": "complex"}, "unknown dtype"),
        ({"inputs__CARSVCAVAILSCEN__values": []}, "categorical input requires values list"),
        ({"inputs__CARSVCAVAILSCEN__default": "extreme"}, "default not in values"),
        ({"inputs__LUDENSITYMIX__min": 2.0}, "min greater than max"),
        ({"inputs__LUDENSITYMIX__default": 1.5}, "default outside range"),
        ({"manipulations__parameters__LUDENSITYMIX": None}, "input has no manipulation"),
        ({"manipulations__parameters__EXTRA": {"kind": "categorical"}}, "manipulation for unknown input"),
        ({"manipulations__parameters__LUDENSITYMIX": {"group": "Land-Use"}}, "manipulation kind required"),
        ({"manipulations__parameters__LUDENSITYMIX": {"kind": "template"}}, "unsupported manipulation kind"),
        ({"manipulations__parameters__CARSVCAVAILSCEN": {"kind": "mixture"}}, "categorical input cannot use mixture"),
        ({"manipulations__parameters__LUDENSITYMIX": {"kind": "categorical"}}, "continuous input cannot use categorical drop-in"),
        ({"inputs__LUDENSITYMIX__max": 2.0}, "mixture range must lie within [0, 1]"),
        (
            {"manipulations__parameters__LUDENSITYMIX": {"kind": "mixture", "exclude_columns": "Geo"}},
            "exclude_columns must be list of strings",
        ),
    ],
)
def test_invalid_scopes_are_rejected(tmp_path: Path, changes, error):
    with pytest.raises(ConfigurationError) as exc:
        _parse(tmp_path, _mutated(**changes))

    assert exc.value.code is Err.INVALID_CONFIG
    assert exc.value.ctx["error"] == error


def test_constant_inputs_need_no_manipulation(tmp_path: Path):
    payload = _mutated(inputs__BASEYEAR={"ptype": "constant", "dtype": "int", "default": 2010})

    scope = _parse(tmp_path, payload)

    assert "BASEYEAR" not in scope.parameter_specs
    assert "BASEYEAR" not in scope.defaults()


def test_top_level_must_be_mapping(tmp_path: Path):
    path = tmp_path / "scope.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc:
        load_scope(path)
    assert exc.value.ctx["error"] == "top-level must be mapping"


def test_unsupported_extension_and_missing_file(tmp_path: Path):
    path = tmp_path / "scope.toml"
    path.write_text("x = 1\n", encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc:
        load_scope(path)
    assert exc.value.ctx["error"] == "unsupported scope format"

    with pytest.raises(ConfigurationError) as exc:
        load_scope(tmp_path / "absent.yml")
    assert exc.value.ctx["error"] == "scope file not found"


def test_malformed_yaml_is_configuration_error(tmp_path: Path):
    path = tmp_path / "scope.yml"
    path.write_text("inputs: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc:
        load_scope(path)
    assert exc.value.ctx["error"] == "malformed YAML"

"""
Shared fixtures: a miniature files-based model root.

`src` is put on sys.path by the pytest `pythonpath` setting in pyproject.toml.
"""
from __future__ import annotations

import os
from pathlib import Path
from textwrap import dedent

import pytest

SCOPE_YAML = dedent(
    """
    scope:
      name: VE-RSPM test model
      desc: Two-parameter scope used by the test-suite
    inputs:
      CARSVCAVAILSCEN:
        shortname: Car Service Availability
        ptype: exogenous uncertainty
        dtype: cat
        desc: Availability of car services by marea
        default: mid
        values: [low, mid, high]
      LUDENSITYMIX:
        shortname: Land Use Density Mix
        ptype: policy lever
        dtype: float
        desc: Share of the compact-growth land use scenario
        default: 0.0
        min: 0.0
        max: 1.0
      BASEYEAR:
        ptype: constant
        dtype: int
        default: 2010
    manipulations:
      scenario_inputs_dir: Scenario-Inputs
      parameters:
        CARSVCAVAILSCEN:
          kind: categorical
          group: Vehicles
        LUDENSITYMIX:
          kind: mixture
          group: Land-Use
    """
).lstrip()


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(scope="session", autouse=True)
def _dagster_home_env(tmp_path_factory):
    tmp_home = tmp_path_factory.mktemp("dagster_home")
    os.environ["DAGSTER_HOME"] = str(tmp_home)
    return str(tmp_home)


@pytest.fixture
def model_root(tmp_path: Path) -> Path:
    root = tmp_path / "model"
    carsvc = root / "Scenario-Inputs" / "Vehicles" / "CARSVCAVAILSCEN"
    for level, share in (("low", "0.1"), ("mid", "0.5"), ("high", "0.9")):
        write_text(
            carsvc / level / "marea_carsvc_availability.csv",
            f"Geo,Year,CarSvcLevel\nRVMPO,2010,{share}\nRVMPO,2038,{share}\n",
        )

    mix = root / "Scenario-Inputs" / "Land-Use" / "LUDENSITYMIX"
    write_text(mix / "1" / "marea_mix_targets.csv", "Geo,Year,density\nRVMPO,2010,10\nRVMPO,2038,10.0\n")
    write_text(mix / "2" / "marea_mix_targets.csv", "Geo,Year,density\nRVMPO,2010,50\nRVMPO,2038,50.0\n")

    write_text(root / "base-inputs" / "marea_carsvc_availability.csv", "Geo,Year,CarSvcLevel\nRVMPO,2010,0.5\n")
    write_text(root / "base-inputs" / "azone_hh_pop_by_age.csv", "Geo,Year,Age0to14\nRVMPO,2010,38280\n")
    write_text(root / "scope.yml", SCOPE_YAML)
    return root

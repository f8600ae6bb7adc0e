"""Command-line entry point for preparing (and optionally running) one experiment."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable

from ve_emat.data_layer.paths import ModelPaths
from ve_emat.experiment import setup_experiment
from ve_emat.inputs.models import DEFAULT_EXCLUDE_COLUMNS, ResolverSettings
from ve_emat.runner.engine import EngineCommand, run_engine
from ve_emat.scope import load_scope
from ve_emat.utils.errors import ConfigurationError, VEError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Materialize scenario inputs for one experiment")
    parser.add_argument("scope", help="Path to scope file (yaml or json)")
    parser.add_argument("--model-root", required=True, help="Model root holding Scenario-Inputs/ and inputs/")
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=None,
        metavar="NAME=VALUE",
        help="Parameter value (may be repeated); omitted inputs use scope defaults",
    )
    parser.add_argument(
        "--exclude-column",
        action="append",
        default=None,
        help="Column never mixed (may be repeated; default Year and Geo)",
    )
    parser.add_argument("--integers-as-floats", action="store_true", help="Mix integer columns without rounding")
    parser.add_argument("--no-clear", action="store_true", help="Overlay onto existing inputs/ instead of resetting it")
    parser.add_argument("--run", action="store_true", help="Run the engine after a successful setup")
    parser.add_argument("--engine", default="Rscript", help="Engine executable (default Rscript)")
    parser.add_argument("--script", default="run_model.R", help="Engine script relative to the model root")
    parser.add_argument(
        "--extra-path",
        action="append",
        default=None,
        help="Directory prepended to PATH for the engine process only (may be repeated)",
    )
    parser.add_argument("--timeout", type=float, help="Engine timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")
    return parser


def _parse_assignments(values: list[str] | None) -> dict[str, str]:
    assignments: dict[str, str] = {}
    for raw in values or []:
        if "=" not in raw:
            raise ConfigurationError(reason="assignment_must_be_name_equals_value", ctx={"value": raw})
        name, value = raw.split("=", 1)
        name = name.strip()
        if not name:
            raise ConfigurationError(reason="assignment_name_missing", ctx={"value": raw})
        assignments[name] = value.strip()
    return assignments


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    scope = load_scope(args.scope)
    paths = ModelPaths.from_str(args.model_root)
    settings = ResolverSettings(
        exclude_columns=tuple(args.exclude_column or DEFAULT_EXCLUDE_COLUMNS),
        integers_as_floats=args.integers_as_floats,
    )

    written = setup_experiment(
        scope,
        _parse_assignments(args.assignments),
        paths,
        settings=settings,
        clear=not args.no_clear,
    )
    for name, files in written.items():
        for path in files:
            print(f"{name}\t{path}")

    if args.run:
        command = EngineCommand(
            executable=args.engine,
            script=Path(args.script),
            cwd=paths.model_root,
            extra_path=tuple(args.extra_path or ()),
        )
        result = run_engine(command, timeout=args.timeout)
        print(f"engine finished in {result.duration_s:.1f}s")

    return 0


def entrypoint() -> None:  # pragma: no cover - console entry
    try:
        raise SystemExit(main())
    except VEError as exc:  # pragma: no cover - console behavior
        raise SystemExit(f"error: {exc}")

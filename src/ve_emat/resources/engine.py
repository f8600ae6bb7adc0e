from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from dagster import ConfigurableResource
from pydantic import Field

from ve_emat.runner.engine import EngineCommand, EngineResult, run_engine


class EngineResource(ConfigurableResource):
    """How to launch the simulation engine for a prepared model root.

    ``extra_path`` entries are prepended to PATH for the child process only.
    """

    executable: str = "Rscript"
    script: str = "run_model.R"
    args: List[str] = Field(default_factory=list)
    extra_path: List[str] = Field(default_factory=list)
    timeout_s: Optional[float] = None

    def command(self, cwd: Path) -> EngineCommand:
        return EngineCommand(
            executable=self.executable,
            script=Path(self.script),
            cwd=Path(cwd),
            args=tuple(self.args),
            extra_path=tuple(self.extra_path),
        )

    def run(self, cwd: Path) -> EngineResult:
        return run_engine(self.command(cwd), timeout=self.timeout_s)

"""Launch the external simulation engine against a prepared model root.

The engine typically needs an interpreter (e.g. ``Rscript``) found through
``PATH``. Extra search paths are passed to the child process only; the
parent's ``os.environ`` is never modified.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..utils.errors import EngineError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineCommand:
    executable: str
    script: Path
    cwd: Path
    args: Sequence[str] = ()
    extra_path: Sequence[str] = ()
    env: Optional[Mapping[str, str]] = None

    def argv(self) -> list[str]:
        return [self.executable, str(self.script), *[str(a) for a in self.args]]


@dataclass(frozen=True)
class EngineResult:
    returncode: int
    stdout: str
    stderr: str
    duration_s: float
    argv: Sequence[str] = field(default_factory=tuple)


def build_env(command: EngineCommand, base: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Child-process environment with ``extra_path`` ahead of the inherited PATH."""
    env = dict(os.environ if base is None else base)
    if command.env:
        env.update({str(k): str(v) for k, v in command.env.items()})
    if command.extra_path:
        current = env.get("PATH", "")
        parts = [str(p) for p in command.extra_path]
        if current:
            parts.append(current)
        env["PATH"] = os.pathsep.join(parts)
    return env


def run_engine(command: EngineCommand, *, timeout: Optional[float] = None) -> EngineResult:
    script = Path(command.script)
    if not script.is_absolute():
        script = Path(command.cwd) / script
    if not script.is_file():
        raise EngineError(reason="engine_script_missing", ctx={"script": str(script)})

    argv = command.argv()
    env = build_env(command)
    logger.info("Running engine: %s (cwd=%s)", shlex.join(argv), command.cwd)

    started = time.perf_counter()
    try:
        proc = subprocess.run(
            argv,
            cwd=str(command.cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise EngineError(
            reason="engine_executable_missing",
            ctx={"executable": command.executable},
            cause=exc,
        )
    except subprocess.TimeoutExpired as exc:
        raise EngineError(
            reason="engine_timeout",
            ctx={"argv": argv, "timeout_s": timeout},
            cause=exc,
        )
    duration = time.perf_counter() - started

    result = EngineResult(
        returncode=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
        duration_s=duration,
        argv=tuple(argv),
    )
    if proc.returncode != 0:
        tail = "\n".join(result.stderr.splitlines()[-20:])
        raise EngineError(
            reason="engine_nonzero_exit",
            ctx={"argv": argv, "returncode": proc.returncode, "stderr_tail": tail},
        )
    logger.info("Engine finished in %.1fs", duration)
    return result

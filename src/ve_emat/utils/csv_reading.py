from __future__ import annotations

"""CSV reading helpers with structured error context.

Centralizes pandas CSV parsing with `VEError` codes that capture:
- Original pandas error message
- Problematic line number when available
- Nearby CSV lines so callers can format detailed diagnostics
"""

from pathlib import Path
from typing import List, Optional

import pandas as pd
import re

from .errors import Err, InputNotFoundError, VEError


def _extract_line_number(error_msg: str) -> Optional[int]:
    """Best-effort extraction of a line number from pandas ParserError message."""
    for pattern in (r"line\s+(\d+)", r"row\s+(\d+)"):
        m = re.search(pattern, error_msg, flags=re.IGNORECASE)
        if m:
            return int(m.group(1))
    return None


def read_csv_with_context(path: Path, context_lines: int = 2, *, nullable: bool = False) -> pd.DataFrame:
    """Read a model input table with enhanced error information on failures.

    Args:
        path: File path to read.
        context_lines: How many lines of context before/after the error line to include.
        nullable: Use pandas' nullable dtypes, so integer columns with gaps stay ``Int64``.

    Raises:
        InputNotFoundError: When the file does not exist.
        VEError: On pandas ParserError, an empty file or bytes that are not UTF-8,
            with structured context.
    """
    path = Path(path)
    if not path.is_file():
        raise InputNotFoundError(reason="csv_missing", ctx={"path": str(path)})
    try:
        if nullable:
            return pd.read_csv(path, dtype_backend="numpy_nullable")
        return pd.read_csv(path)
    except UnicodeDecodeError as exc:
        raise VEError(
            Err.PARSER_FAILURE,
            ctx={"reason": "csv_not_utf8", "path": str(path), "byte_offset": exc.start},
            cause=exc,
        )
    except pd.errors.EmptyDataError as exc:
        raise VEError(
            Err.PARSER_FAILURE,
            ctx={"reason": "csv_empty", "path": str(path)},
            cause=exc,
        )
    except pd.errors.ParserError as exc:
        try:
            lines: List[str] = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError):
            lines = []

        error_msg = str(exc)
        line_num = _extract_line_number(error_msg)

        ctx: dict[str, object] = {
            "reason": "csv_parse_error",
            "path": str(path),
            "pandas_error": error_msg,
        }
        if line_num:
            ctx["line_number"] = line_num

        if line_num and 1 <= line_num <= len(lines):
            start = max(1, line_num - context_lines)
            end = min(len(lines), line_num + context_lines)
            snippet = []
            for i in range(start, end + 1):
                snippet.append(
                    {
                        "line": i,
                        "text": lines[i - 1],
                        "is_error": i == line_num,
                    }
                )
            ctx["snippet"] = snippet

        raise VEError(Err.PARSER_FAILURE, ctx=ctx, cause=exc)

"""
Plain-text rendering of matrices for logs.

Only reads rows, cols and to_array() from the matrix.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from matrixmath.matrix.matrix import Matrix


@dataclass(frozen=True)
class LogFormat:
    """
    Layout options for format_matrix().

    Attributes:
        indentation: Number of spaces before every line
        separator: Text between values on a row
        start: Line opening the block
        end: Line closing the block
        title: Text placed before the start marker
    """
    indentation: int = 0
    separator: str = '\t'
    start: str = '['
    end: str = ']'
    title: str = ''


DEFAULT_LOG_FORMAT = LogFormat()


def _format_value(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_matrix(matrix: Matrix, fmt: LogFormat | None = None, **overrides: Any) -> str:
    """
    Render a matrix as one line per row between start and end markers.

    Example with the defaults for [[1, 2], [3, 4.5]]:

        [
          1	2
          3	4.5
        ]

    Args:
        matrix: Matrix to render
        fmt: Base format (default LogFormat())
        **overrides: LogFormat fields to replace

    Returns:
        The rendered block, without a trailing newline
    """
    fmt = fmt if fmt is not None else DEFAULT_LOG_FORMAT
    if overrides:
        fmt = dataclasses.replace(fmt, **overrides)

    indent = ' ' * fmt.indentation
    values = matrix.to_array().tolist()
    cols = matrix.cols

    lines = [f"{indent}{fmt.title}{fmt.start}"]
    for row in range(matrix.rows):
        cells = values[row * cols:(row + 1) * cols]
        lines.append(indent + '  ' + fmt.separator.join(_format_value(v) for v in cells))
    lines.append(f"{indent}{fmt.end}")
    return '\n'.join(lines)

"""
Plain-text rendering of a LineView

Output layout:
    <title>
    <one row per line>

Subtitle lines are prefixed with '-- ', warnings with '[warning] '; other
lines are written verbatim. With `numbered=True` each row starts with its
index, which is what `--execute` expects.
"""

from typing import List

from ..models.line import Line
from .interpreter import LineView


TITLE_MARK = "-- "
WARNING_MARK = "[warning] "


def line_render(line: Line) -> str:
    if line.is_title:
        return f"{TITLE_MARK}{line.text}"
    if line.is_warning:
        return f"{WARNING_MARK}{line.text}"
    return line.text


def view_render(view: LineView, numbered: bool = False) -> str:
    """
    Render a whole view

    Args:
        view: Interpreted document
        numbered: Prefix each row with its line index

    Returns:
        Rendered text ending with a newline
    """
    rows: List[str] = [view.title]
    width = len(str(max(len(view) - 1, 0)))
    for index, line in enumerate(view):
        row = line_render(line)
        if numbered:
            marker = "*" if line.has_command else " "
            row = f"{index:>{width}}{marker} {row}"
        rows.append(row.rstrip() if numbered else row)
    return "\n".join(rows) + "\n"

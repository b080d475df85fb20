"""Viewport windowing over the linked line list.

Picks the contiguous run of linked rows that fits a budget of visual lines
around a focus row, accounting for rows that wrap at the viewport width.
"""

from __future__ import annotations

from collections.abc import Callable

from .lines import LineProjection


def visual_lines(text_width: int, width: int) -> int:
    """Return how many terminal rows a line of ``text_width`` columns occupies.

    A row exactly ``width`` columns wide costs 1, not 2.
    """
    if width <= 0:
        return 1
    return 1 + max(0, text_width - 1) // width


def bounds_around_line(
    projection: LineProjection,
    line: int,
    n: int,
    width: int,
    line_width: Callable[[int], int],
) -> tuple[int, int]:
    """Return ``(start, end)`` bounding the rows to draw around ``line``.

    Rows to draw are ``projection.iter_linked(start, end)``. The budget ``n``
    is split into ``n // 2`` visual lines above the focus row and the rest
    below, the focus row included. Budget left unused at the top (list start
    reached) moves to the bottom, and budget left unused at the bottom (list
    end reached) moves back to the top. A focus row wider than its half of
    the budget pushes rows off the top, and the focus row is always kept.
    ``line_width`` gives a row's display width in columns.
    """

    def cost(index: int) -> int:
        return visual_lines(line_width(index), width)

    def roll_back(start: int, budget: int) -> tuple[int, int]:
        used = 0
        while True:
            prev = projection[start].prev
            if prev is None:
                break
            step = cost(prev)
            if used + step > budget:
                break
            used += step
            start = prev
        return start, used

    if n <= 0:
        return line, projection[line].next

    space = n // 2
    start, above = roll_back(line, space)

    end_max = n - above
    used = cost(line)
    end = projection[line].next
    while projection.is_real(end):
        step = cost(end)
        if used + step > end_max:
            break
        used += step
        end = projection[end].next

    while above + used > n and start != line:
        above -= cost(start)
        start = projection[start].next

    if not projection.is_real(end):
        end = len(projection)
        end_diff = n - above - used
        if end_diff > 0:
            start, _reclaimed = roll_back(start, end_diff)
    return start, end


def window_cost(
    projection: LineProjection,
    start: int,
    end: int,
    width: int,
    line_width: Callable[[int], int],
) -> int:
    """Return the visual-line cost of the rows ``bounds_around_line`` selected."""
    return sum(visual_lines(line_width(index), width) for index in projection.iter_linked(start, end))

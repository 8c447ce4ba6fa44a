# padconf/quickfix.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Deleting entries from the quickfix list."""

import logging
from typing import Any, List, Optional, Sequence

from .editor import EditorHost


def remove_block(items: Sequence[Any], start: int, count: int) -> List[Any]:
    """
    Returns a copy of `items` without `count` entries starting at line `start`.

    `start` is 1-based. A block running past the end removes what is there.

    Example:
        >>> remove_block(["a", "b", "c", "d", "e"], 2, 3)
        ['a', 'e']
    """
    if start < 1:
        raise ValueError(f"quickfix lines are 1-based, got {start}")
    begin = start - 1
    return list(items[:begin]) + list(items[begin + max(count, 0):])


def delete_quickfix_items(host: EditorHost, count: Optional[int] = None,
                          visual_start: Optional[int] = None) -> int:
    """
    Deletes quickfix entries at the cursor and puts the cursor back on that line.

    Single mode (`visual_start` is None) removes `count` entries from the
    cursor line, one when no count is given. Range mode removes every entry
    between `visual_start` and the cursor line, inclusive, whichever end the
    selection started from.

    Returns:
        int: The line the cursor was moved to.
    """
    cursor_line = host.cursor()[0]

    if visual_start is None:
        start = cursor_line
        count = count if count and count > 0 else 1
    else:
        start = min(visual_start, cursor_line)
        count = abs(cursor_line - visual_start) + 1

    items = host.get_quickfix()
    remaining = remove_block(items, start, count)
    logging.debug(f"delete_quickfix_items: removed {len(items) - len(remaining)} item(s) at line {start}")

    host.set_quickfix(remaining)
    host.set_cursor(start, 1)
    return start

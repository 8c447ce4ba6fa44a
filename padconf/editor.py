# padconf/editor.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""The narrow slice of the editor runtime that padconf commands talk to."""

import abc
import logging
import os
from typing import Any, List, Optional, Tuple


class EditorHost(abc.ABC):
    """
    Operations the editor commands need from the running editor.

    Cursor lines are 1-based and columns 0-based, matching the editor's
    window-cursor convention.
    """

    @abc.abstractmethod
    def current_path(self) -> str:
        """Full path of the active buffer ('' for an unnamed buffer)."""

    def relative_path(self) -> str:
        path = self.current_path()
        if not path:
            return ""
        try:
            return os.path.relpath(path)
        except ValueError:
            # Different drive on Windows.
            return path

    @abc.abstractmethod
    def edit(self, path: str) -> None:
        """Switches the active buffer to `path`."""

    @abc.abstractmethod
    def notify(self, message: str) -> None:
        """Shows a user-visible informational message."""

    @abc.abstractmethod
    def cursor(self) -> Tuple[int, int]:
        ...

    @abc.abstractmethod
    def set_cursor(self, line: int, col: int) -> None:
        ...

    @abc.abstractmethod
    def current_line(self) -> str:
        ...

    @abc.abstractmethod
    def set_current_line(self, text: str) -> None:
        ...

    @abc.abstractmethod
    def get_quickfix(self) -> List[Any]:
        ...

    @abc.abstractmethod
    def set_quickfix(self, items: List[Any]) -> None:
        """Replaces the quickfix list wholesale."""

    @abc.abstractmethod
    def grep_string(self, search: str) -> None:
        """Runs the fuzzy finder's grep for a literal string."""


class HeadlessEditor(EditorHost):
    """
    In-memory host used by the command-line interface and the tests.

    Nothing is rendered; every effect is recorded on the instance
    (`opened`, `messages`, `searches`) so callers can inspect it.
    """

    def __init__(self, path: str = "", lines: Optional[List[str]] = None,
                 quickfix: Optional[List[Any]] = None):
        self.path = path
        self.lines: List[str] = list(lines) if lines else [""]
        self.quickfix: List[Any] = list(quickfix) if quickfix else []
        self.cursor_line = 1
        self.cursor_col = 0
        self.opened: List[str] = []
        self.messages: List[str] = []
        self.searches: List[str] = []

    def current_path(self) -> str:
        return self.path

    def edit(self, path: str) -> None:
        logging.debug(f"HeadlessEditor: edit {path}")
        self.opened.append(path)
        self.path = path

    def notify(self, message: str) -> None:
        logging.info(message)
        self.messages.append(message)

    @property
    def last_message(self) -> Optional[str]:
        return self.messages[-1] if self.messages else None

    def cursor(self) -> Tuple[int, int]:
        return self.cursor_line, self.cursor_col

    def set_cursor(self, line: int, col: int) -> None:
        # The cursor sits in the quickfix window while it has entries.
        last = len(self.quickfix) if self.quickfix else len(self.lines)
        self.cursor_line = min(max(1, line), max(1, last))
        self.cursor_col = max(0, col)

    def current_line(self) -> str:
        return self.lines[self.cursor_line - 1]

    def set_current_line(self, text: str) -> None:
        self.lines[self.cursor_line - 1] = text

    def get_quickfix(self) -> List[Any]:
        return list(self.quickfix)

    def set_quickfix(self, items: List[Any]) -> None:
        self.quickfix = list(items)

    def grep_string(self, search: str) -> None:
        self.searches.append(search)

# padconf/commands.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Editor commands bound in the key map, written against ``EditorHost``."""

import logging
import random
import re
from typing import Any, Callable, Dict, Optional

import pyperclip

from .companion import MARKUP_RULES, TEST_RULES, CompanionResult, rules_from_config, toggle_companion
from .editor import EditorHost
from .quickfix import delete_quickfix_items
from .tmux import TmuxPane

DEFAULT_IDENTIFIER_TEMPLATE = "xxxxxxxx"
DEFAULT_SEARCH_SUFFIX = ".handler"

QUOTES = ("'", '"')


def generate_identifier(template: str = DEFAULT_IDENTIFIER_TEMPLATE, rng: Optional[random.Random] = None) -> str:
    """
    Fills a template with random hex digits.

    ``x`` becomes any digit 0-f, ``y`` one of 8-b (the UUID variant nibble);
    other characters are copied through.

    Example:
        >>> len(generate_identifier())
        8
        >>> generate_identifier("id-xx")[:3]
        'id-'
    """
    rng = rng or random

    def nibble(match: "re.Match[str]") -> str:
        value = rng.randint(0, 0xF) if match.group(0) == "x" else rng.randint(8, 0xB)
        return format(value, "x")

    return re.sub(r"[xy]", nibble, template)


def insert_identifier(host: EditorHost, template: str = DEFAULT_IDENTIFIER_TEMPLATE,
                      rng: Optional[random.Random] = None) -> str:
    """
    Inserts a generated identifier at the cursor of the current line.

    When the character after the cursor is a quote the identifier goes one
    column further, so with the cursor on the first quote of ``''`` it lands
    between the quotes.
    """
    identifier = generate_identifier(template, rng)
    pos = host.cursor()[1]
    line = host.current_line()

    insert_at = pos + 1 if line[pos + 1:pos + 2] in QUOTES else pos
    host.set_current_line(line[:insert_at] + identifier + line[insert_at:])
    return identifier


def copy_path(host: EditorHost, use_system_clipboard: bool = True) -> bool:
    """Copies the active buffer's relative path to the system clipboard. Returns True on success."""
    path = host.relative_path()
    if not path:
        host.notify("Buffer has no file name")
        return False
    if not use_system_clipboard:
        host.notify("System clipboard is disabled in the configuration")
        return False

    try:
        pyperclip.copy(path)
    except pyperclip.PyperclipException as e:
        logging.error(f"Failed to copy to system clipboard: {e}")
        host.notify(f"Clipboard unavailable: {e}")
        return False

    host.notify(f"Copied {path}")
    return True


def search_string_for(path: str, suffix: str = DEFAULT_SEARCH_SUFFIX) -> Optional[str]:
    """
    Derives the infrastructure search string for a TypeScript source path.

    Example:
        >>> search_string_for("/repo/services/api/src/orders/create.ts")
        'src/orders/create.handler'
    """
    match = re.match(r".*(src.*)\.ts", path)
    if not match:
        return None
    return match.group(1) + suffix


def search_infrastructure(host: EditorHost, suffix: str = DEFAULT_SEARCH_SUFFIX) -> Optional[str]:
    """Greps for the handler reference of the current file, e.g. in infrastructure code."""
    search = search_string_for(host.current_path(), suffix)
    if search is None:
        host.notify("no search string found")
        return None
    host.grep_string(search)
    return search


class EditorCommands:
    """
    The commands exposed to the key map, bound to one editor host.

    Each method takes no arguments beyond optional counts, so `actions()`
    can hand them straight to the key binder.
    """

    def __init__(self, host: EditorHost, config: Optional[Dict[str, Any]] = None,
                 tmux: Optional[TmuxPane] = None, rng: Optional[random.Random] = None):
        self.host = host
        self.config = config or {}
        self.rng = rng

        companion_config = self.config.get("companion", {})
        self.test_rules = rules_from_config(companion_config.get("test", [])) + list(TEST_RULES)
        self.markup_rules = rules_from_config(companion_config.get("markup", [])) + list(MARKUP_RULES)

        tmux_config = self.config.get("tmux", {})
        self.tmux = tmux or TmuxPane(marked_target=tmux_config.get("marked_target", "~"))

        editor_config = self.config.get("editor", {})
        self.identifier_template = editor_config.get("identifier_template", DEFAULT_IDENTIFIER_TEMPLATE)
        self.use_system_clipboard = editor_config.get("use_system_clipboard", True)
        self.search_suffix = self.config.get("search", {}).get("suffix", DEFAULT_SEARCH_SUFFIX)

    def toggle_test(self) -> CompanionResult:
        return toggle_companion(self.host, self.test_rules)

    def toggle_markup(self) -> CompanionResult:
        return toggle_companion(self.host, self.markup_rules)

    def delete_quickfix_items(self, count: Optional[int] = None, visual_start: Optional[int] = None) -> int:
        return delete_quickfix_items(self.host, count=count, visual_start=visual_start)

    def insert_identifier(self) -> str:
        return insert_identifier(self.host, self.identifier_template, self.rng)

    def copy_path(self) -> bool:
        return copy_path(self.host, self.use_system_clipboard)

    def search_infrastructure(self) -> Optional[str]:
        return search_infrastructure(self.host, self.search_suffix)

    def tmux_open(self) -> bool:
        return self.tmux.open()

    def tmux_repeat(self) -> bool:
        return self.tmux.repeat()

    def actions(self) -> Dict[str, Callable[..., Any]]:
        return {
            "toggle_test": self.toggle_test,
            "toggle_markup": self.toggle_markup,
            "delete_quickfix_items": self.delete_quickfix_items,
            "insert_identifier": self.insert_identifier,
            "copy_path": self.copy_path,
            "search_infrastructure": self.search_infrastructure,
            "tmux_open": self.tmux_open,
            "tmux_repeat": self.tmux_repeat,
        }

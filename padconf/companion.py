# padconf/companion.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Switching between a file and its companion (test <-> implementation, markup <-> logic)."""

import enum
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from .editor import EditorHost


@dataclass(frozen=True)
class CompanionRule:
    """Rewrites a path matching `pattern` into its companion, described by `label`."""

    pattern: "re.Pattern[str]"
    replacement: str
    label: str

    @classmethod
    def compile(cls, pattern: str, replacement: str, label: str) -> "CompanionRule":
        return cls(re.compile(pattern), replacement, label)

    def apply(self, path: str) -> Optional[str]:
        if not self.pattern.search(path):
            return None
        return self.pattern.sub(self.replacement, path, count=1)


# Within a family the test pattern precedes the implementation pattern,
# since "x.spec.ts" also ends in ".ts".
TEST_RULES: Tuple[CompanionRule, ...] = (
    CompanionRule.compile(r"\.spec\.ts$", ".ts", "implementation"),
    CompanionRule.compile(r"\.ts$", ".spec.ts", "test"),
    CompanionRule.compile(r"^(.*)/tests/(.*)Test\.elm$", r"\1/src/\2.elm", "implementation"),
    CompanionRule.compile(r"^(.*)/src/(.*)\.elm$", r"\1/tests/\2Test.elm", "test"),
)

MARKUP_RULES: Tuple[CompanionRule, ...] = (
    CompanionRule.compile(r"\.component\.html$", ".component.ts", "implementation"),
    CompanionRule.compile(r"\.component\.ts$", ".component.html", "html"),
)


class CompanionStatus(enum.Enum):
    SWITCHED = "switched"
    MISSING = "missing"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CompanionResult:
    status: CompanionStatus
    path: Optional[str]
    message: Optional[str] = None


def rules_from_config(declarations: Iterable[Mapping[str, Any]]) -> List[CompanionRule]:
    """
    Compiles ``[[companion.test]]`` / ``[[companion.markup]]`` tables.

    Each table needs ``pattern``, ``replacement`` and ``label``. Invalid
    entries are logged and skipped; the built-in rules still apply.
    """
    rules: List[CompanionRule] = []
    for declaration in declarations:
        try:
            rules.append(CompanionRule.compile(
                declaration["pattern"], declaration["replacement"], declaration["label"]
            ))
        except (KeyError, TypeError) as e:
            logging.error(f"Ignoring companion rule {declaration!r}: missing or invalid field {e}")
        except re.error as e:
            logging.error(f"Ignoring companion rule {declaration!r}: bad pattern: {e}")
    return rules


def find_companion(path: str, rules: Sequence[CompanionRule]) -> Optional[Tuple[str, str]]:
    """Returns ``(companion_path, label)`` for the first matching rule, or None."""
    for rule in rules:
        target = rule.apply(path)
        if target is not None:
            return target, rule.label
    return None


def toggle_companion(
        host: EditorHost,
        rules: Sequence[CompanionRule],
        exists: Optional[Callable[[str], bool]] = None,
) -> CompanionResult:
    """
    Opens the companion of the active buffer if it exists on disk.

    Nothing is created: an unknown path or a missing companion is only
    reported through ``host.notify``.
    """
    path = host.current_path().strip()
    found = find_companion(path, rules)
    if found is None:
        host.notify("Unknown file type")
        return CompanionResult(CompanionStatus.UNKNOWN, None, "Unknown file type")

    target, label = found
    exists = exists or os.path.exists
    if not exists(target):
        message = f"No {label} file found ({target})"
        host.notify(message)
        return CompanionResult(CompanionStatus.MISSING, target, message)

    logging.debug(f"toggle_companion: {path} -> {target}")
    host.edit(target)
    return CompanionResult(CompanionStatus.SWITCHED, target)

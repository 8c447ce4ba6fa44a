# padconf/registry.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Language registry: one declaration per file type, built from a table or fluently.

A file type may declare any of four facets:

* ``parser``     - syntax parser name (defaults to the file type itself)
* ``tools``      - tool packages to install, name -> opaque options
* ``servers``    - language servers, name -> options
* ``formatters`` - ordered formatter chain, either a list of names or a
                   mapping of name -> ``{"install": bool, "props": {...}}``
                   (or name -> alias string)

Two authoring styles produce the same registry::

    builder = RegistryBuilder.from_table({"rust": {"formatters": ["rustfmt"]}})

    builder = RegistryBuilder()
    builder.register("rust").with_formatters(["rustfmt"])

The registry itself is never aggregated implicitly; call ``build()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# Global/fallback tools live under this key; it is never a syntax parser.
RESERVED_FILETYPE = "other"

TABLE_KEYS = ("parser", "tools", "servers", "formatters")


class ConfigurationError(TypeError):
    """A language declaration has the wrong shape; aggregation cannot continue."""

    def __init__(self, filetype: str, message: str):
        super().__init__(f"{filetype}: {message}")
        self.filetype = filetype


@dataclass(frozen=True)
class FormatterOptions:
    """Per-formatter metadata in a keyed chain."""

    install: bool = False
    props: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class OrderedFormatters:
    """List-style chain: ``["prettierd", "eslint_d"]``."""

    names: Tuple[Any, ...]


@dataclass(frozen=True)
class KeyedFormatters:
    """Map-style chain, kept as ordered ``(key, value)`` pairs.

    Values are ``FormatterOptions`` or alias strings. Integer keys mark
    list-style positions inside a mixed declaration.
    """

    items: Tuple[Tuple[Any, Any], ...]


FormatterSpec = Union[OrderedFormatters, KeyedFormatters]


def _formatter_value(key: Any, value: Any) -> Any:
    # Integer keys are list positions; their values stay as declared.
    if isinstance(value, Mapping) and (isinstance(key, bool) or not isinstance(key, int)):
        return FormatterOptions(install=bool(value.get("install")), props=value.get("props"))
    return value


def formatter_spec(filetype: str, raw: Any) -> FormatterSpec:
    """
    Resolves a raw formatter declaration into its tagged variant.

    Only the outer shape is checked here; element types are validated when
    the registry is aggregated.

    Raises:
        ConfigurationError: `raw` is neither a sequence nor a mapping.
    """
    if isinstance(raw, (OrderedFormatters, KeyedFormatters)):
        return raw
    if isinstance(raw, Mapping):
        return KeyedFormatters(tuple((key, _formatter_value(key, value)) for key, value in raw.items()))
    if isinstance(raw, (list, tuple)):
        return OrderedFormatters(tuple(raw))
    raise ConfigurationError(
        filetype, f"formatters must be a list or a mapping, got: {type(raw).__name__}"
    )


@dataclass
class LanguageEntry:
    """Declarations for one file type. Every ``with_*`` call returns the entry itself."""

    filetype: str
    syntax_parser: Optional[str] = None
    tool_packages: Optional[Mapping[str, Any]] = None
    server_config: Optional[Mapping[str, Any]] = None
    formatters: Optional[FormatterSpec] = field(default=None)

    def with_tool_packages(self, mapping: Mapping[str, Any]) -> "LanguageEntry":
        self.tool_packages = mapping
        return self

    def with_server_config(self, mapping: Mapping[str, Any]) -> "LanguageEntry":
        self.server_config = mapping
        return self

    def with_formatters(self, spec: Any) -> "LanguageEntry":
        self.formatters = formatter_spec(self.filetype, spec)
        return self

    def with_syntax_parser(self, name: str) -> "LanguageEntry":
        self.syntax_parser = name
        return self

    @property
    def parser_name(self) -> Any:
        return self.syntax_parser if self.syntax_parser is not None else self.filetype


class RegistryBuilder:
    """
    Accumulates ``LanguageEntry`` objects keyed by file type.

    Registration order is kept and is the order the aggregator walks.
    Registering a file type twice replaces the first entry (last write wins).
    """

    def __init__(self):
        self._entries: Dict[str, LanguageEntry] = {}

    def register(self, filetype: str) -> LanguageEntry:
        if filetype in self._entries:
            logger.debug(f"register: replacing existing declaration for '{filetype}'")
            # Re-insert so the replacement is walked in its new position.
            del self._entries[filetype]
        entry = LanguageEntry(filetype)
        self._entries[filetype] = entry
        return entry

    def declare(self, filetype: str, declaration: Optional[Mapping[str, Any]] = None) -> LanguageEntry:
        """Registers `filetype` from a table row (``parser``/``tools``/``servers``/``formatters``)."""
        if declaration is None:
            declaration = {}
        if not isinstance(declaration, Mapping):
            raise ConfigurationError(
                filetype, f"declaration must be a mapping, got: {type(declaration).__name__}"
            )
        unknown = set(declaration) - set(TABLE_KEYS)
        if unknown:
            logger.warning(f"{filetype}: ignoring unknown declaration keys {sorted(unknown)}")

        entry = self.register(filetype)
        if "parser" in declaration:
            entry.with_syntax_parser(declaration["parser"])
        if "tools" in declaration:
            entry.with_tool_packages(declaration["tools"])
        if "servers" in declaration:
            entry.with_server_config(declaration["servers"])
        if "formatters" in declaration:
            entry.with_formatters(declaration["formatters"])
        return entry

    def update(self, table: Mapping[str, Any]) -> "RegistryBuilder":
        for filetype, declaration in table.items():
            self.declare(filetype, declaration)
        return self

    @classmethod
    def from_table(cls, table: Mapping[str, Any]) -> "RegistryBuilder":
        return cls().update(table)

    def entries(self) -> Mapping[str, LanguageEntry]:
        return MappingProxyType(self._entries)

    def __contains__(self, filetype: object) -> bool:
        return filetype in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def build(self):
        """Aggregates every entry into an immutable ``LanguageAggregate``."""
        from .aggregator import aggregate

        return aggregate(self._entries)

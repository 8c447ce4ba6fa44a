# padconf/aggregator.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Flattens the language registry into the collections plugin setup consumes.

Outputs, recomputed from scratch on every call:

* ``parser_installs``        - syntax parsers to ensure installed
* ``tool_packages``          - tool package name -> options
* ``server_configs``         - language server name -> options
* ``formatters_by_filetype`` - file type -> ordered formatter names
* ``formatter_options``      - formatter name -> ``props`` configuration
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from .registry import (
    RESERVED_FILETYPE,
    ConfigurationError,
    FormatterOptions,
    FormatterSpec,
    KeyedFormatters,
    LanguageEntry,
    OrderedFormatters,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LanguageAggregate:
    parser_installs: Tuple[str, ...]
    tool_packages: Mapping[str, Any]
    server_configs: Mapping[str, Any]
    formatters_by_filetype: Mapping[str, Tuple[str, ...]]
    formatter_options: Mapping[str, Any]

    @property
    def ensure_installed(self) -> Tuple[str, ...]:
        """Tool package names for the installer, sorted for stable output."""
        return tuple(sorted(self.tool_packages))

    def formatters_for(self, filetype: str) -> Tuple[str, ...]:
        return self.formatters_by_filetype.get(filetype, ())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parser_installs": list(self.parser_installs),
            "tool_packages": dict(self.tool_packages),
            "ensure_installed": list(self.ensure_installed),
            "server_configs": dict(self.server_configs),
            "formatters_by_filetype": {ft: list(names) for ft, names in self.formatters_by_filetype.items()},
            "formatter_options": dict(self.formatter_options),
        }


def _require_string(filetype: str, value: Any, what: str = "formatter") -> str:
    if not isinstance(value, str):
        raise ConfigurationError(filetype, f"{what} must be a string, got: {type(value).__name__}")
    return value


def _require_mapping(filetype: str, value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(filetype, f"{what} must be a mapping, got: {type(value).__name__}")
    return value


def _union_into(target: Dict[str, Any], source: Mapping[str, Any], filetype: str, what: str) -> None:
    for name, opts in source.items():
        if name in target and target[name] != opts:
            logger.debug(f"{filetype}: {what} '{name}' overrides options declared earlier")
        target[name] = copy.deepcopy(opts)


def _resolve_chain(
        filetype: str,
        spec: FormatterSpec,
        tool_packages: Dict[str, Any],
        formatter_options: Dict[str, Any],
) -> Tuple[str, ...]:
    """Normalises one formatter chain to an ordered list of names, in declaration order."""
    names: List[str] = []

    if isinstance(spec, OrderedFormatters):
        for value in spec.names:
            names.append(_require_string(filetype, value))
    elif isinstance(spec, KeyedFormatters):
        for key, value in spec.items:
            if isinstance(key, int) and not isinstance(key, bool):
                names.append(_require_string(filetype, value))
            elif isinstance(value, FormatterOptions):
                name = _require_string(filetype, key, "formatter name")
                if value.install:
                    tool_packages.setdefault(name, {})
                if value.props is not None:
                    formatter_options[name] = copy.deepcopy(value.props)
                names.append(name)
            else:
                names.append(_require_string(filetype, value))
    else:
        raise ConfigurationError(filetype, f"unsupported formatter spec: {type(spec).__name__}")

    # Last occurrence decides the position.
    unique = list(reversed(dict.fromkeys(reversed(names))))
    if len(unique) != len(names):
        repeated = sorted({name for name in names if names.count(name) > 1})
        logger.warning(f"{filetype}: formatter(s) {repeated} declared more than once, keeping the last")
    return tuple(unique)


def aggregate(entries: Mapping[str, LanguageEntry]) -> LanguageAggregate:
    """
    Walks every entry once and produces a ``LanguageAggregate``.

    Collisions on tool package or server names across file types resolve to
    the entry walked last. A formatter declared with ``install`` only adds a
    tool package when none of that name exists yet.

    Raises:
        ConfigurationError: Any malformed declaration; nothing partial is returned.
    """
    parsers: Dict[str, None] = {}
    tool_packages: Dict[str, Any] = {}
    server_configs: Dict[str, Any] = {}
    formatters_by_filetype: Dict[str, Tuple[str, ...]] = {}
    formatter_options: Dict[str, Any] = {}

    for filetype, entry in entries.items():
        if filetype != RESERVED_FILETYPE:
            parsers[_require_string(filetype, entry.parser_name, "syntax parser")] = None

        if entry.tool_packages is not None:
            _union_into(
                tool_packages,
                _require_mapping(filetype, entry.tool_packages, "tool packages"),
                filetype,
                "tool package",
            )

        if entry.server_config is not None:
            _union_into(
                server_configs,
                _require_mapping(filetype, entry.server_config, "server config"),
                filetype,
                "server",
            )

        if entry.formatters is not None:
            formatters_by_filetype[filetype] = _resolve_chain(
                filetype, entry.formatters, tool_packages, formatter_options
            )

    result = LanguageAggregate(
        parser_installs=tuple(parsers),
        tool_packages=MappingProxyType(tool_packages),
        server_configs=MappingProxyType(server_configs),
        formatters_by_filetype=MappingProxyType(formatters_by_filetype),
        formatter_options=MappingProxyType(formatter_options),
    )
    logger.debug(f"Parser installs: {list(result.parser_installs)}")
    logger.debug(f"Tool packages: {dict(result.tool_packages)}")
    logger.debug(f"Language servers: {dict(result.server_configs)}")
    logger.debug(f"Formatters by filetype: {dict(result.formatters_by_filetype)}")
    return result

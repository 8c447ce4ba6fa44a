# padconf/__init__.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

__version__ = "0.1.0"

from .aggregator import LanguageAggregate, aggregate
from .commands import EditorCommands
from .config import load_config, setup_logging
from .editor import EditorHost, HeadlessEditor
from .languages import DEFAULT_LANGUAGES, build_registry, load_languages
from .registry import ConfigurationError, LanguageEntry, RegistryBuilder
from .utils import deep_merge

__all__ = [
    'LanguageAggregate',
    'aggregate',
    'EditorCommands',
    'load_config',
    'setup_logging',
    'EditorHost',
    'HeadlessEditor',
    'DEFAULT_LANGUAGES',
    'build_registry',
    'load_languages',
    'ConfigurationError',
    'LanguageEntry',
    'RegistryBuilder',
    'deep_merge',
]

# padconf/config.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Configuration loading (TOML over hard-coded defaults) and logging setup."""

import copy
import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Dict, Optional

import toml

from .utils import deep_merge

CONFIG_ENV_VAR = "PADCONF_CONFIG"
DEFAULT_CONFIG_PATH = "config.toml"

# Hard-coded minimal defaults; every section is guaranteed to exist after load_config().
MINIMAL_DEFAULT: Dict[str, Any] = {
    "logging": {
        "log_file": "padconf.log",
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": True,
        "separate_error_log": False,
    },
    "editor": {
        "use_system_clipboard": True,
        "identifier_template": "xxxxxxxx",
    },
    "filetypes": {
        "extension": {},
    },
    # Declarations layered over the built-in language table, same shape as DEFAULT_LANGUAGES.
    "languages": {},
    "companion": {
        "test": [],
        "markup": [],
    },
    "tmux": {
        "marked_target": "~",
    },
    "search": {
        "suffix": ".handler",
    },
    "keybindings": {},
    "installer": {
        "package_manager": "",
    },
}


def resolve_config_path(path: Optional[str] = None) -> str:
    """Returns the explicit path, else $PADCONF_CONFIG, else ./config.toml."""
    if path:
        return path
    return os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads and merges the padconf configuration from a TOML file, applying safe defaults.

    Three tiers, as for any editor configuration:
    1. Hard-coded minimal defaults so the tooling starts in any environment.
    2. The user TOML file (see `resolve_config_path`), deep-merged over them.
    3. A sanity pass that puts back any default section or key the merge lost,
       e.g. when the user file sets a section to a non-table value.

    Errors (missing file, TOML syntax errors, I/O problems) are logged and the
    defaults are used instead, so this function never raises.

    Args:
        path (Optional[str]): Explicit configuration path.

    Returns:
        Dict[str, Any]: The merged configuration.

    Example:
        >>> config = load_config("/nonexistent.toml")
        >>> config["tmux"]["marked_target"]
        '~'
    """
    minimal_default = copy.deepcopy(MINIMAL_DEFAULT)
    config_path = resolve_config_path(path)
    user_config: Dict[str, Any] = {}

    if os.path.exists(config_path):
        try:
            with open(config_path, "r", encoding="utf-8") as fh:
                user_config = toml.loads(fh.read())
            logging.debug("Loaded user config from %s", config_path)
        except FileNotFoundError:
            logging.warning("Config file %s vanished, using defaults.", config_path)
        except toml.TomlDecodeError as exc:
            logging.error("TOML parse error in %s: %s, using defaults.", config_path, exc)
        except OSError as exc:
            logging.error("Could not read %s: %s, using defaults.", config_path, exc)
    else:
        logging.info("Config file %s not found, using defaults.", config_path)

    final_config: Dict[str, Any] = deep_merge(minimal_default, user_config)

    for section, default_val in minimal_default.items():
        if not isinstance(final_config.get(section), type(default_val)):
            logging.warning(
                f"Config section '{section}' has unexpected type "
                f"{type(final_config.get(section)).__name__}, using defaults."
            )
            final_config[section] = default_val
            continue
        if isinstance(default_val, dict):
            for sub_key, sub_val in default_val.items():
                final_config[section].setdefault(sub_key, sub_val)

    logging.debug("Final configuration loaded successfully.")
    return final_config


def setup_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """
    Configures the root logger from the ``[logging]`` configuration section.

    Up to three handlers are installed:

    1. **File handler**: rotating log file (``log_file``) at ``file_level``.
    2. **Console handler**: ``stderr`` at ``console_level``, unless
       ``log_to_console`` is false.
    3. **Error-file handler**: rotating ``error.log`` holding ERROR and above
       when ``separate_error_log`` is true.

    Existing root handlers are removed first so repeated calls (tests, CLI
    re-entry) do not duplicate records. I/O problems are reported on stderr
    and the remaining handlers are still installed; the function never raises.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_filename = logging_config.get("log_file", "padconf.log")
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    log_dir = os.path.dirname(log_filename)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
            log_filename = os.path.join(tempfile.gettempdir(), "padconf.log")
            print(f"Logging to temporary file: '{log_filename}'", file=sys.stderr)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)
    except OSError as e_fh:
        print(f"Error setting up file logger for '{log_filename}': {e_fh}.", file=sys.stderr)

    console_handler = None
    if logging_config.get("log_to_console", True):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s"))
        console_handler.setLevel(getattr(logging, console_level_str, logging.WARNING))

    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_log_filename = os.path.join(log_dir, "error.log") if log_dir else "error.log"
        try:
            error_file_handler = logging.handlers.RotatingFileHandler(
                error_log_filename, maxBytes=1 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except OSError as e_efh:
            print(f"Error setting up separate error log '{error_log_filename}': {e_efh}.", file=sys.stderr)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)

    levels = [h.level for h in (file_handler, console_handler) if h]
    root_logger.setLevel(min(levels) if levels else log_file_level)

    logging.info("Logging setup complete. Root logger level: %s.", logging.getLevelName(root_logger.level))
    if file_handler:
        logging.info(f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}.")

# padconf/cli.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Command-line access to the language registry and the path-based commands."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .commands import EditorCommands, generate_identifier
from .config import load_config, setup_logging
from .editor import HeadlessEditor
from .filetypes import detect_filetype
from .installer import ToolInstaller
from .keymap import QUICKFIX_KEYMAP, load_keybindings
from .languages import build_registry, load_languages
from .registry import ConfigurationError


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=repr))


def cmd_languages(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    _print_json(load_languages(config).to_dict())
    return 0


def cmd_companion(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    host = HeadlessEditor(args.path)
    commands = EditorCommands(host, config)
    result = commands.toggle_markup() if args.markup else commands.toggle_test()
    if host.opened:
        print(host.opened[-1])
        return 0
    print(result.message, file=sys.stderr)
    return 1


def cmd_filetype(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    filetype = detect_filetype(args.path, config.get("filetypes", {}).get("extension", {}))
    if filetype is None:
        print("Unknown file type", file=sys.stderr)
        return 1

    registry = build_registry(config)
    aggregate = registry.build()
    entry = registry.entries().get(filetype)
    _print_json({
        "filetype": filetype,
        "declared": entry is not None,
        "parser": entry.parser_name if entry else None,
        "formatters": list(aggregate.formatters_for(filetype)),
    })
    return 0


def cmd_keys(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    for action, chords in sorted(load_keybindings(config).items()):
        print(f"{', '.join(chords):<24} {action}")
    for action, bindings in QUICKFIX_KEYMAP.items():
        for mode, chord in bindings:
            print(f"{chord + ' (' + mode + ', quickfix)':<24} {action}")
    return 0


def cmd_install(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    packages = load_languages(config).ensure_installed
    try:
        installer = ToolInstaller(config.get("installer", {}).get("package_manager") or None)
    except RuntimeError as e:
        logging.error(str(e))
        print(str(e), file=sys.stderr)
        return 1

    missing = installer.missing(packages)
    if args.dry_run:
        for package in missing:
            print(f"{package} -> {installer.package_name(package)}")
        return 0

    results = installer.install(missing)
    for package, ok in results.items():
        print(f"{'ok' if ok else 'FAILED'} {package}")
    return 0 if all(results.values()) else 1


def cmd_guid(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    print(generate_identifier(args.template or config["editor"]["identifier_template"]))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="padconf", description="Editor language registry and helper commands.")
    parser.add_argument("--config", help="Path to config.toml (default: $PADCONF_CONFIG or ./config.toml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("languages", help="Print the aggregated language registry as JSON")
    p.set_defaults(func=cmd_languages)

    p = sub.add_parser("companion", help="Print the companion file of PATH")
    p.add_argument("path")
    p.add_argument("--markup", action="store_true", help="Toggle markup/logic instead of test/implementation")
    p.set_defaults(func=cmd_companion)

    p = sub.add_parser("filetype", help="Detect the file type of PATH and show its formatters")
    p.add_argument("path")
    p.set_defaults(func=cmd_filetype)

    p = sub.add_parser("keys", help="List the key chords of the editor commands")
    p.set_defaults(func=cmd_keys)

    p = sub.add_parser("install", help="Install missing tool packages")
    p.add_argument("--dry-run", action="store_true", help="Only list what would be installed")
    p.set_defaults(func=cmd_install)

    p = sub.add_parser("guid", help="Print a generated identifier")
    p.add_argument("--template", help="Template, x = hex digit, y = 8-b")
    p.set_defaults(func=cmd_guid)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.verbose:
        config["logging"].update({"log_to_console": True, "console_level": "DEBUG"})
    setup_logging(config)

    try:
        return args.func(args, config)
    except ConfigurationError as e:
        logging.critical(f"Language configuration is invalid: {e}")
        print(f"Language configuration is invalid: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Tool package installer for the language registry's ``ensure_installed`` list."""

import logging
import platform
import shutil
from typing import Callable, Dict, Iterable, List, Optional

from .utils import safe_run

# Tool package name -> executable it provides, where the two differ.
BINARY_NAMES: Dict[str, str] = {
    "angular-language-server": "ngserver",
    "astro-language-server": "astro-ls",
    "css-lsp": "vscode-css-language-server",
    "lua_ls": "lua-language-server",
    "rust_analyzer": "rust-analyzer",
    "ruby_lsp": "ruby-lsp",
    "sqlls": "sql-language-server",
    "eslint": "vscode-eslint-language-server",
    "elm-language-server": "elm-language-server",
}

# Tool package name -> system package name, per package manager.
PACKAGE_NAMES: Dict[str, Dict[str, str]] = {
    "brew": {
        "lua_ls": "lua-language-server",
        "rust_analyzer": "rust-analyzer",
        "css-lsp": "vscode-langservers-extracted",
        "eslint": "vscode-langservers-extracted",
    },
    "pacman": {
        "lua_ls": "lua-language-server",
        "rust_analyzer": "rust-analyzer",
    },
    "apt": {
        "rust_analyzer": "rust-analyzer",
    },
}

INSTALL_COMMANDS: Dict[str, List[str]] = {
    "apt": ["sudo", "apt", "install", "-y"],
    "pacman": ["sudo", "pacman", "-Sy", "--noconfirm"],
    "dnf": ["sudo", "dnf", "install", "-y"],
    "yum": ["sudo", "yum", "install", "-y"],
    "zypper": ["sudo", "zypper", "install", "-y"],
    "brew": ["brew", "install"],
    "pkg": ["sudo", "pkg", "install", "-y"],
    "nix": ["nix-env", "-iA"],
}


def binary_for(package: str) -> str:
    return BINARY_NAMES.get(package, package)


class ToolInstaller:
    """Installs tool packages with the system package manager."""

    def __init__(self, package_manager: Optional[str] = None, runner: Optional[Callable] = None,
                 which: Callable[[str], Optional[str]] = shutil.which):
        self.os = platform.system().lower()
        self.which = which
        self.runner = runner or safe_run
        self.pkg_mgr = package_manager or self.detect_package_manager()
        self.logger = logging.getLogger(__name__)

    def detect_package_manager(self) -> str:
        """Determines the available package manager."""
        if self.os == "linux":
            for cmd in ("apt", "pacman", "dnf", "yum", "zypper"):
                if self.which(cmd):
                    return cmd
        elif self.os == "darwin":
            if self.which("brew"):
                return "brew"
        elif self.os == "freebsd":
            if self.which("pkg"):
                return "pkg"

        if self.which("nix-env"):
            return "nix"

        raise RuntimeError(f"Unsupported platform or package manager for {self.os}")

    def package_name(self, package: str) -> str:
        name = PACKAGE_NAMES.get(self.pkg_mgr, {}).get(package, binary_for(package))
        return f"nixpkgs.{name}" if self.pkg_mgr == "nix" else name

    def check_if_installed(self, package: str) -> bool:
        return self.which(binary_for(package)) is not None

    def missing(self, packages: Iterable[str]) -> List[str]:
        return [package for package in packages if not self.check_if_installed(package)]

    def _get_install_command(self, package_name: str) -> List[str]:
        if self.pkg_mgr not in INSTALL_COMMANDS:
            raise RuntimeError(f"Unknown package manager: {self.pkg_mgr}")
        return INSTALL_COMMANDS[self.pkg_mgr] + [package_name]

    def install_single(self, package: str) -> bool:
        if self.check_if_installed(package):
            self.logger.info(f"{package} already installed")
            return True

        package_name = self.package_name(package)
        self.logger.info(f"Installing: {package} (package: {package_name})")

        result = self.runner(self._get_install_command(package_name))
        if result.returncode != 0:
            self.logger.error(f"Failed to install {package}: {result.stderr.strip()}")
            return False

        if self.check_if_installed(package):
            self.logger.info(f"{package} installed")
            return True
        self.logger.warning(f"{package} installed but {binary_for(package)} not found in PATH")
        return False

    def install(self, packages: Iterable[str]) -> Dict[str, bool]:
        packages = list(packages)
        results: Dict[str, bool] = {}

        self.logger.info(f"Installing {len(packages)} tool package(s) with {self.pkg_mgr}")
        for package in packages:
            results[package] = self.install_single(package)

        successful = sum(1 for ok in results.values() if ok)
        self.logger.info(f"Installation finished: {successful}/{len(packages)} succeeded")
        return results

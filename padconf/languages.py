# padconf/languages.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Built-in language declarations and the configuration-load entry point."""

from typing import Any, Dict, Optional

from .aggregator import LanguageAggregate
from .registry import RegistryBuilder

PRETTIERD = {"prettierd": {"install": True}}

DEFAULT_LANGUAGES: Dict[str, Dict[str, Any]] = {
    "angular": {
        "tools": {"angular-language-server": {}},
    },
    "astro": {
        "tools": {"astro-language-server": {}},
        "formatters": PRETTIERD,
    },
    "css": {
        "tools": {"css-lsp": {}},
        "formatters": PRETTIERD,
    },
    "diff": {},
    "html": {
        "formatters": PRETTIERD,
    },
    "luadoc": {},
    "markdown": {},
    "markdown_inline": {},
    "query": {},
    "vim": {},
    "vimdoc": {},
    "elm": {
        "tools": {"elm-language-server": {}},
        "formatters": ["elm_format"],
    },
    "gleam": {
        # Ships with the gleam toolchain, so a server but no tool package.
        "servers": {"gleam": {}},
        "formatters": ["gleam"],
    },
    "javascript": {
        "tools": {"js-debug-adapter": {}},
        "formatters": PRETTIERD,
    },
    "json": {
        "formatters": PRETTIERD,
    },
    "jsonc": {
        "formatters": PRETTIERD,
    },
    "typescript": {
        "tools": {
            "typescript-language-server": {},
            "eslint": {"on_save": "EslintFixAll"},
        },
        "formatters": PRETTIERD,
    },
    "lua": {
        "tools": {
            "lua_ls": {
                "settings": {
                    "Lua": {"completion": {"callSnippet": "Replace"}},
                },
            },
            "stylua": {},
        },
        "formatters": {"stylua": {"install": True}},
    },
    "ruby": {
        "tools": {"ruby_lsp": {}},
        "formatters": {},
    },
    "rust": {
        "tools": {
            "rust_analyzer": {
                "settings": {
                    "rust-analyzer": {"check": {"command": "clippy"}},
                },
            },
        },
        "formatters": ["rustfmt"],
    },
    "sh": {
        "parser": "bash",
        "tools": {
            "shellcheck": {},
            "bash-language-server": {},
        },
        "formatters": {"shfmt": {"install": True}},
    },
    "sql": {
        "tools": {
            "sqlfmt": {},
            "sqlls": {},
        },
    },
    "kdl": {
        "formatters": ["kdlfmt"],
    },
    # Tools and servers that belong to no syntax file type.
    "other": {
        "tools": {
            "harper-ls": {},
            "herb-language-server": {},
        },
    },
    # Picked by filetype detection for .ejs and friends; the herb server is configured here.
    "embedded_template": {
        "servers": {
            "herb_ls": {
                "cmd": ["herb-language-server", "--stdio"],
                "filetypes": ["ruby", "eruby", "herb"],
                "root_markers": ["Gemfile", ".git"],
            },
        },
    },
}


def build_registry(config: Optional[Dict[str, Any]] = None) -> RegistryBuilder:
    """Registers the built-in table, then the ``[languages]`` section of `config` on top."""
    builder = RegistryBuilder.from_table(DEFAULT_LANGUAGES)
    if config:
        builder.update(config.get("languages", {}))
    return builder


def load_languages(config: Optional[Dict[str, Any]] = None) -> LanguageAggregate:
    """
    Builds and aggregates the language registry for a configuration.

    Raises:
        ConfigurationError: A declaration is malformed. Not caught here; a
            broken language setup must stop the load.
    """
    return build_registry(config).build()

# padconf/filetypes.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Maps file paths to the editor file type names used as registry keys."""

import logging
import os
from typing import Dict, Mapping, Optional

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

# Extensions the lexer database does not know or gets wrong for the editor.
DEFAULT_EXTENSION_FILETYPES: Dict[str, str] = {
    "herb": "html",
}

# Pygments alias -> editor file type
LEXER_ALIASES: Dict[str, str] = {
    "bash": "sh",
    "ts": "typescript",
    "js": "javascript",
    "md": "markdown",
    "html+erb": "eruby",
    "erb": "eruby",
}


def extension_of(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[1].lstrip(".").lower()


def detect_filetype(path: str, overrides: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Returns the file type for `path`, or None when nothing matches.

    Extension overrides win over lexer detection. `overrides` is merged over
    ``DEFAULT_EXTENSION_FILETYPES``.

    Example:
        >>> detect_filetype("views/index.herb")
        'html'
        >>> detect_filetype("scripts/build.sh")
        'sh'
    """
    extensions = dict(DEFAULT_EXTENSION_FILETYPES)
    if overrides:
        extensions.update({ext.lstrip(".").lower(): ft for ext, ft in overrides.items()})

    ext = extension_of(path)
    if ext in extensions:
        return extensions[ext]

    try:
        lexer = get_lexer_for_filename(os.path.basename(path))
    except ClassNotFound:
        logging.debug(f"detect_filetype: no lexer for '{path}'")
        return None

    if not lexer.aliases:
        return None
    alias = lexer.aliases[0]
    return LEXER_ALIASES.get(alias, alias)

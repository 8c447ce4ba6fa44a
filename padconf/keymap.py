# padconf/keymap.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Key chords for the editor commands.

Leader chords are spelled out by their description: the bracketed letters
of ``"[t]oggle [t]est"`` give ``<leader>tt``. Each shorter prefix of a chord
should have a which-key group so the menu shows a label for it.
"""

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

LEADER = "<leader>"

WHICH_KEY_GROUPS: Dict[str, str] = {
    "b": "[b]uffer",
    "c": "[c]opy",
    "i": "[i]nsert",
    "l": "[l]sp",
    "q": "[q]uickfix",
    "s": "[s]earch",
    "t": "[t]mux / [t]oggle",
}

DEFAULT_KEYMAP: Dict[str, str] = {
    "tmux_open": "[t]mux [o]pen",
    "tmux_repeat": "[t]mux [r]epeat",
    "toggle_test": "[t]oggle [t]est",
    "toggle_markup": "[t]oggle [h]tml",
    "search_infrastructure": "[s]earch [i]nfrastructure",
    "insert_identifier": "[i]nsert [g]uid",
    "copy_path": "[c]opy [p]ath",
}

# Only active inside the quickfix window: (mode, chord) per action.
QUICKFIX_KEYMAP: Dict[str, List[Tuple[str, str]]] = {
    "delete_quickfix_items": [("n", "dd"), ("x", "d")],
}


def chord_from_description(description: str) -> str:
    """
    Example:
        >>> chord_from_description("[c]opy [p]ath")
        'cp'
    """
    return "".join(re.findall(r"\[(.)\]", description))


def missing_groups(keys: str, groups: Mapping[str, str] = WHICH_KEY_GROUPS) -> List[str]:
    """Proper prefixes of `keys` that have no which-key group."""
    return [keys[:i] for i in range(1, len(keys)) if keys[:i] not in groups]


def leader_chord(description: str, groups: Mapping[str, str] = WHICH_KEY_GROUPS) -> str:
    keys = chord_from_description(description)
    if not keys:
        raise ValueError(f"No bracketed keys in description '{description}'")
    for prefix in missing_groups(keys, groups):
        logging.error(f"No which-key group for '{prefix}' in '{description}'")
    return LEADER + keys


def _split_spec(spec: Union[str, List[str], None]) -> List[str]:
    if not spec:
        return []
    if isinstance(spec, list):
        return [s.strip() for s in spec if isinstance(s, str) and s.strip()]
    if isinstance(spec, str):
        return [s.strip() for s in spec.split("|") if s.strip()]
    raise ValueError(f"Invalid keybinding type: {type(spec).__name__}. Expected str or list.")


def load_keybindings(config: Optional[Dict[str, Any]] = None) -> Dict[str, List[str]]:
    """
    Resolves action -> chords from defaults and the ``[keybindings]`` section.

    A configured value may be a chord string, a ``"a|b"`` alternative string,
    or a list of chords; an empty value disables the action. Unparseable
    entries are logged and the default is kept.
    """
    user_keybindings = (config or {}).get("keybindings", {})
    bindings: Dict[str, List[str]] = {}

    for action, description in DEFAULT_KEYMAP.items():
        if action not in user_keybindings:
            bindings[action] = [leader_chord(description)]
            continue
        try:
            chords = _split_spec(user_keybindings[action])
        except ValueError as e:
            logging.error(f"Error parsing keybinding for action '{action}': {e}. Using the default.")
            bindings[action] = [leader_chord(description)]
            continue
        if chords:
            bindings[action] = chords
        else:
            logging.debug(f"Keybinding for action '{action}' is disabled or empty.")

    for action in user_keybindings:
        if action not in DEFAULT_KEYMAP:
            logging.warning(f"Keybinding for unknown action '{action}' ignored.")

    logging.debug(f"Loaded keybindings (action -> chords): {bindings}")
    return bindings


def build_action_map(bindings: Mapping[str, List[str]],
                     actions: Mapping[str, Callable[..., Any]]) -> Dict[str, Callable[..., Any]]:
    """Maps each chord to its command; a chord claimed twice keeps the later action."""
    action_map: Dict[str, Callable[..., Any]] = {}
    for action, chords in bindings.items():
        method = actions.get(action)
        if method is None:
            logging.warning(f"No command registered for action '{action}'.")
            continue
        for chord in chords:
            if chord in action_map:
                logging.warning(f"Chord '{chord}' rebound to '{action}'.")
            action_map[chord] = method
    return action_map

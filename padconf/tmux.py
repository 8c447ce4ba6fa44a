# padconf/tmux.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Running commands in the marked tmux pane."""

import logging
import subprocess
from typing import Callable, List, Optional

from .utils import safe_run, strip_whitespace

logger = logging.getLogger(__name__)

Runner = Callable[[List[str]], subprocess.CompletedProcess]


class TmuxPane:
    """
    The pane commands are sent to: tmux's marked pane, created on demand.

    Every call is a synchronous tmux invocation through `runner`
    (``safe_run`` by default); output is trimmed and used as a plain string.
    """

    def __init__(self, runner: Optional[Runner] = None, marked_target: str = "~"):
        self.runner = runner or safe_run
        self.marked_target = marked_target

    def _output(self, cmd: List[str]) -> str:
        result = self.runner(cmd)
        if result.returncode != 0:
            logger.debug(f"tmux: {' '.join(cmd)} exited with {result.returncode}: {result.stderr}")
            return ""
        return strip_whitespace(result.stdout)

    def marked_pane_id(self) -> str:
        """Returns the marked pane id, splitting a new pane and marking it when there is none."""
        pane_id = self._output(["tmux", "display", "-p", "-t", self.marked_target, "#D"])
        if pane_id:
            return pane_id

        logger.info("tmux: no marked pane, splitting a new one")
        pane_id = self._output(["tmux", "split-window", "-d", "-h", "-P", "-F", "#{pane_id}"])
        if pane_id:
            self.runner(["tmux", "select-pane", "-m", "-t", pane_id])
        else:
            logger.warning("tmux: could not create a pane")
        return pane_id

    def run(self, keys: str) -> bool:
        """Leaves copy mode in the pane, then sends `keys` followed by Enter."""
        pane_id = self.marked_pane_id()
        if not pane_id:
            return False
        # Fails harmlessly when the pane is not in copy mode.
        self.runner(["tmux", "send-keys", "-t", pane_id, "-X", "cancel"])
        result = self.runner(["tmux", "send-keys", "-t", pane_id, keys, "Enter"])
        return result.returncode == 0

    def open(self) -> bool:
        return self.run("")

    def repeat(self) -> bool:
        return self.run("Up")

# padconf/utils.py
# padconf is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Small helpers shared across padconf: dictionary merging and subprocess calls."""

import logging
import subprocess
from typing import Any, Dict, List, Optional


# --- Dictionary Deep Merge Utility ---
def deep_merge(base: Dict[Any, Any], override: Dict[Any, Any]) -> Dict[Any, Any]:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.

    Nested dictionaries present on both sides are merged; any other value from
    `override` replaces the one in `base`. Neither input is modified.

    Args:
        base (Dict[Any, Any]): The base dictionary.
        override (Dict[Any, Any]): Values that take precedence over `base`.

    Returns:
        Dict[Any, Any]: A new merged dictionary.

    Example:
        >>> deep_merge({'tmux': {'marked_target': '~'}}, {'tmux': {'split': '-v'}})
        {'tmux': {'marked_target': '~', 'split': '-v'}}
    """
    result = dict(base)
    for key, override_value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
        else:
            result[key] = override_value
    return result


# --- Safe Subprocess Execution Utility ---
def safe_run(
        cmd: List[str],
        cwd: Optional[str] = None,
        timeout: Optional[float] = None,
        **kwargs: Any
) -> subprocess.CompletedProcess:
    """
    Executes an external command synchronously and captures its output.

    Wraps `subprocess.run()` with text capture and UTF-8 decoding. Errors never
    propagate: a missing binary, a timeout or an OS error is turned into a
    `CompletedProcess` with a synthetic return code and the error in `stderr`.

    Args:
        cmd (List[str]): Command and arguments.
        cwd (Optional[str]): Working directory for the subprocess.
        timeout (Optional[float]): Timeout in seconds.
        **kwargs (Any): Forwarded to `subprocess.run`.

    Returns:
        subprocess.CompletedProcess: The result, `returncode` 127 when the
        command was not found, -9 on timeout and -1 on other OS errors.

    Example:
        >>> safe_run(["tmux", "display", "-p", "#D"]).stdout.strip()
        '%3'
    """
    if "check" in kwargs:
        logging.warning(
            "safe_run: 'check' passed in kwargs; caller is responsible for handling exceptions."
        )

    effective_kwargs = {
        "capture_output": True,
        "text": True,
        "check": False,
        "encoding": "utf-8",
        "errors": "replace",
        **kwargs,
    }

    if cwd is not None:
        effective_kwargs["cwd"] = cwd
    if timeout is not None:
        effective_kwargs["timeout"] = timeout

    try:
        return subprocess.run(cmd, **effective_kwargs)
    except FileNotFoundError as e:
        logging.error(f"safe_run: Command not found: {cmd[0]!r}")
        return subprocess.CompletedProcess(cmd, returncode=127, stdout="", stderr=str(e))
    except subprocess.TimeoutExpired as e:
        logging.warning(f"safe_run: Command timed out after {timeout}s: {' '.join(cmd)}")
        stdout = e.stdout if isinstance(e.stdout, str) else (e.stdout or b"").decode("utf-8", "replace")
        return subprocess.CompletedProcess(
            cmd,
            returncode=-9,
            stdout=stdout,
            stderr="Process timed out.",
        )
    except OSError as e:
        logging.error(f"safe_run: OS error while running {cmd}: {e}", exc_info=True)
        return subprocess.CompletedProcess(cmd, returncode=-1, stdout="", stderr=str(e))


def strip_whitespace(value: Optional[str]) -> str:
    """Removes every whitespace character, as shell output used as an id must be a single token."""
    if not value:
        return ""
    return "".join(value.split())

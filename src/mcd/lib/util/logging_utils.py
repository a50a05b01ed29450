"""Append-only debug log for command actions.

Actions write through ``ActionContext.debug``; the dispatcher itself never
logs. Lines go to ``state_root()/mcd.log`` as ``<iso time> [<pid>] <message>``.
"""

import os
from datetime import datetime
from pathlib import Path

from ..core.paths import state_root

LOG_NAME = "mcd.log"


def debug_log_path() -> Path:
    return state_root() / LOG_NAME


def log_debug(message: str) -> None:
    """Append *message* to the debug log.

    An unwritable state directory drops the line: the log must never change
    the outcome of the command that wrote it.
    """
    stamp = datetime.now().isoformat(timespec="seconds")
    try:
        path = debug_log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(f"{stamp} [{os.getpid()}] {message}\n")
    except OSError:
        pass

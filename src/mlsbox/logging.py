from __future__ import annotations
import threading
from contextlib import contextmanager
from typing import Optional

from colorama import Fore, Style, init as _colorama_init

_colorama_init(autoreset=True)


class TreeLogger:
    """Tree structured logger for store operations.

    Usage:
        log = TreeLogger(db_name='server')
        with log.branch('INIT'):
            log.log('CREATE_ALL', tables=3)
        log.log('PUBLISH', group='KeyPackages', client_id='alice')
"""

    _local = threading.local()

    def __init__(self, db_name: Optional[str] = None):
        self.db_name = db_name or "-"
        # width of the database column
        self.name_width = 12

    @property
    def _stack(self):
        # each thread has its own branch stack
        if not hasattr(TreeLogger._local, "stack"):
            TreeLogger._local.stack = []
        return TreeLogger._local.stack

    @property
    def _printed_groups(self):
        if not hasattr(TreeLogger._local, "printed_groups"):
            TreeLogger._local.printed_groups = set()
        return TreeLogger._local.printed_groups

    @contextmanager
    def branch(self, operation: str, last: bool = False):
        """Enter a nested branch; yields the logger for that scope.

        last=True marks this branch as the last child at its level.
        """
        self._stack.append((operation, bool(last)))
        try:
            yield self
        finally:
            self._stack.pop()

    def _color_for(self, op_name: str) -> str:
        op = op_name.upper()
        if op.startswith(("CONFLICT", "UNAVAILABLE", "INVALID")):
            return Fore.RED
        if op.startswith(("PUBLISH", "ENQUEUE", "CREATE")):
            return Fore.BLUE
        if op.startswith(("REMOVE", "ACK", "PURGE", "DELETE")):
            return Fore.YELLOW
        if op.startswith("INIT"):
            return Fore.GREEN
        return Fore.CYAN

    def log(self, message: str, **meta):
        """Log an operation name with metadata printed as key=val."""
        group = meta.pop("group", None)
        last = bool(meta.pop("last", False))
        name = meta.pop("db_name", None) or self.db_name
        color = self._color_for(message)

        if group:
            self._print_group_headers(group)

        meta_s = "".join(f" {Fore.YELLOW}{k}{Style.RESET_ALL}={v}" for k, v in meta.items())

        marker = "└───" if last else "├───"
        if group:
            depth = len(group.split("/"))
            entry_prefix = "│   " * (depth - 1) + marker
        elif self._stack:
            entry_prefix = "│   " * (len(self._stack) - 1) + f"{marker}{self._stack[-1][0]}"
        else:
            entry_prefix = ""

        name_str = name[: self.name_width].ljust(self.name_width)
        print(f"{entry_prefix} | {Fore.GREEN}{name_str}{Style.RESET_ALL} | {color}{message}{Style.RESET_ALL}{meta_s}")

    def _print_group_headers(self, group: str):
        printed = self._printed_groups
        parts = group.split("/")
        for i in range(len(parts)):
            path = "/".join(parts[: i + 1])
            if path in printed:
                continue
            marker = "└───" if i == len(parts) - 1 else "├───"
            print(f"{'    ' * i}{marker}{parts[i]}")
            printed.add(path)


# convenience global
default_logger: Optional[TreeLogger] = None


def init_logger(db_name: Optional[str] = None) -> TreeLogger:
    global default_logger
    default_logger = TreeLogger(db_name=db_name)
    return default_logger


def get_logger() -> TreeLogger:
    """Return the package logger, creating it on first use."""
    if default_logger is None:
        return init_logger(None)
    return default_logger

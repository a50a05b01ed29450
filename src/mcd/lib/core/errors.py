# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Error types shared by the dispatcher and command actions.

Every error carries the exit status it maps to and whether the dispatcher
should follow the message with a usage hint.
"""

from __future__ import annotations

from collections.abc import Sequence


class McdError(Exception):
    """Base class for failures reported to the user on stderr."""

    exit_code = 1
    show_usage = False

    def __init__(self, message: str, *, command_path: str = "mcd") -> None:
        super().__init__(message)
        self.message = message
        self.command_path = command_path

    def render(self) -> str:
        """Return the full text written to stderr for this error."""
        lines = [f"Error: {self.message}"]
        if self.show_usage:
            lines.append(f"Run '{self.command_path} --help' for usage.")
        return "\n".join(lines)


class UnknownCommandError(McdError):
    """A token did not match any child command at its level."""

    exit_code = 2
    show_usage = True

    def __init__(
        self, token: str, *, command_path: str = "mcd", suggestions: Sequence[str] = ()
    ) -> None:
        super().__init__(f'unknown command "{token}" for "{command_path}"', command_path=command_path)
        self.token = token
        self.suggestions = tuple(suggestions)

    def render(self) -> str:
        lines = [f"Error: {self.message}"]
        if self.suggestions:
            lines.append("")
            lines.append("Did you mean this?")
            lines.extend(f"\t{s}" for s in self.suggestions)
            lines.append("")
        lines.append(f"Run '{self.command_path} --help' for usage.")
        return "\n".join(lines)


class ArgumentParseError(McdError):
    """A flag or positional argument was malformed or missing."""

    exit_code = 2
    show_usage = True


class ActionError(McdError):
    """An action reported a failure; its message is shown verbatim."""


class ConfigError(McdError):
    """The global configuration file could not be understood."""


class DuplicateCommandError(McdError, ValueError):
    """A child name or alias is already taken within its parent."""

# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Built-in ``help`` and ``completion`` commands.

They are only attached once the root has commands of its own; a bare root
stays a pure grouping node with nothing registered under it.
"""

from __future__ import annotations

import argcomplete

from ...lib.core.command import ActionContext, CommandDescriptor, CommandRegistry, arg
from ..dispatcher import format_help

COMPLETION_SHELLS = ("bash", "zsh", "fish", "tcsh", "powershell")


def _cmd_help(ctx: ActionContext) -> None:
    """Print help for the command path in ``ctx.args.command``."""
    topic = list(ctx.args.command)
    target = ctx.registry.resolve(topic)
    if target is None:
        print(f'Unknown help topic "{" ".join(topic)}"')
        target = ctx.registry.root
    print(format_help(target), end="")


def _cmd_completion(ctx: ActionContext) -> None:
    root = ctx.registry.root.name
    print(argcomplete.shellcode([root], shell=ctx.args.shell), end="")
    ctx.debug(f"printed {ctx.args.shell} completion script")


HELP = CommandDescriptor(
    name="help",
    summary="Help about any command",
    description="Show help for any command in the tree, e.g. 'mcd help <command>'.",
    action=_cmd_help,
    arguments=(arg("command", nargs="*", help="Command path to describe"),),
)

COMPLETION = CommandDescriptor(
    name="completion",
    summary="Generate the autocompletion script for the specified shell",
    description=(
        "Print shell code that enables tab completion for mcd.\n\n"
        "Example (bash):\n"
        '  eval "$(mcd completion bash)"'
    ),
    action=_cmd_completion,
    arguments=(arg("shell", choices=COMPLETION_SHELLS, help="Target shell"),),
)

BUILTINS = (HELP, COMPLETION)


def attach_builtins(registry: CommandRegistry) -> None:
    """Add the built-in commands to the root unless it has no commands yet."""
    root = registry.root
    if not root.children:
        return
    for descriptor in BUILTINS:
        if root.lookup(descriptor.name) is None:
            root.add(descriptor)

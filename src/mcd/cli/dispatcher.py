# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Root dispatcher: argument vector in, exit status out.

The registry tree is walked left-to-right to select a command, the remaining
tokens are parsed with an ``argparse`` parser built for that command, and the
command's action is run. Every outcome is reduced to an integer exit status;
help and version output go to stdout, errors to stderr.
"""

from __future__ import annotations

import argparse
import difflib
import enum
import sys
from collections.abc import Sequence

from ..lib.core.command import ActionContext, CommandNode, CommandRegistry
from ..lib.core.errors import ActionError, ArgumentParseError, McdError, UnknownCommandError
from ..lib.core.version import format_version_string, get_version_info


class DispatchState(enum.Enum):
    PARSING = "parsing"
    EXECUTING = "executing"
    FINALIZED = "finalized"


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting on errors."""

    def __init__(self, *args, command_path: str = "mcd", **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.command_path = command_path

    def error(self, message: str):  # type: ignore[override]
        raise ArgumentParseError(message, command_path=self.command_path)


class _VersionAction(argparse.Action):
    """``--version`` that only looks up version information when used."""

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(
            option_strings=option_strings, dest=dest, default=default, nargs=0, help=help
        )

    def __call__(self, parser, namespace, values, option_string=None):
        version, branch = get_version_info()
        print(f"{parser.prog} {format_version_string(version, branch)}", file=sys.stdout)
        parser.exit()


def _commands_epilog(node: CommandNode) -> str | None:
    children = node.visible_children
    if not children:
        return None
    width = max(len(c.name) for c in children)
    lines = ["Available commands:"]
    for child in children:
        lines.append(f"  {child.name.ljust(width)}  {child.descriptor.summary}")
    lines.append("")
    lines.append(
        f'Use "{node.command_path} <command> --help" for more information about a command.'
    )
    return "\n".join(lines)


def _configure(parser: argparse.ArgumentParser, node: CommandNode) -> None:
    if node.is_root:
        parser.add_argument("--version", action=_VersionAction, help="show version and exit")
    for spec in node.descriptor.arguments:
        spec.apply(parser)


def build_parser(node: CommandNode) -> _ArgumentParser:
    """Build the parser for *node* alone; children appear only in its help text."""
    usage = None
    if node.children and node.descriptor.action is None:
        usage = "%(prog)s <command> [options]"
    parser = _ArgumentParser(
        prog=node.command_path,
        usage=usage,
        description=node.descriptor.help_text,
        epilog=_commands_epilog(node),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        command_path=node.command_path,
    )
    _configure(parser, node)
    return parser


def build_completion_parser(node: CommandNode) -> argparse.ArgumentParser:
    """Build a parser for *node* and its whole subtree, as argcomplete expects."""
    parser = argparse.ArgumentParser(
        prog=node.command_path,
        description=node.descriptor.help_text,
        allow_abbrev=False,
    )
    _add_subtree(parser, node)
    return parser


def _add_subtree(parser: argparse.ArgumentParser, node: CommandNode) -> None:
    _configure(parser, node)
    if not node.children:
        return
    sub = parser.add_subparsers(dest=f"_cmd_{len(node.path)}", metavar="<command>")
    for child in node.visible_children:
        child_parser = sub.add_parser(
            child.name,
            aliases=list(child.descriptor.aliases),
            help=child.descriptor.summary,
            description=child.descriptor.help_text,
            allow_abbrev=False,
        )
        _add_subtree(child_parser, child)


def format_help(node: CommandNode) -> str:
    return build_parser(node).format_help()


def suggest(node: CommandNode, token: str) -> list[str]:
    """Return child names and aliases close to *token*, for "did you mean" hints."""
    names = [t for c in node.visible_children for t in c.descriptor.tokens]
    close = difflib.get_close_matches(token, names, n=len(names) or 1, cutoff=0.6)
    prefixed = [n for n in names if n.lower().startswith(token.lower()) and n not in close]
    return close + prefixed


def _is_flag(token: str) -> bool:
    return token.startswith("-") and token != "-"


def _has_positionals(node: CommandNode) -> bool:
    return any(not spec.flags[0].startswith("-") for spec in node.descriptor.arguments)


def _flag_values(node: CommandNode) -> dict[str, int]:
    """Map each option string of *node* to the number of values it consumes."""
    counts: dict[str, int] = {}
    for spec in node.descriptor.arguments:
        if not spec.flags[0].startswith("-"):
            continue
        action = spec.options.get("action", "store")
        nargs = spec.options.get("nargs")
        if isinstance(action, str) and action not in ("store", "append", "extend"):
            count = 0
        elif isinstance(nargs, int):
            count = nargs
        else:
            count = 1 if nargs in (None, "+") else 0
        for flag in spec.flags:
            counts[flag] = count
    return counts


def _after_double_dash(node: CommandNode, after: list[str]) -> list[str]:
    """Resolve a ``--`` here instead of relying on argparse's handling of it."""
    if _has_positionals(node):
        return ["--", *after]
    if after:
        raise ArgumentParseError(
            f"unrecognized arguments: {' '.join(after)}", command_path=node.command_path
        )
    return []


class Dispatcher:
    """Single-use dispatch of one argument vector against a registry."""

    def __init__(self, registry: CommandRegistry) -> None:
        self.registry = registry
        self.state = DispatchState.PARSING
        self._started = False

    def _advance(self, state: DispatchState) -> None:
        order = list(DispatchState)
        if order.index(state) <= order.index(self.state):
            raise RuntimeError(f"cannot move from {self.state.value} to {state.value}")
        self.state = state

    def select(self, argv: Sequence[str]) -> tuple[CommandNode, list[str]]:
        """Walk the tree and return the selected node with the unconsumed tokens."""
        node = self.registry.root
        tokens = list(argv)
        flags: list[str] = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token == "--":
                return node, flags + _after_double_dash(node, tokens[i + 1 :])
            if _is_flag(token):
                # Flags do not end the walk; keep any value they take with them.
                count = 0 if "=" in token else _flag_values(node).get(token, 0)
                flags.extend(tokens[i : i + 1 + count])
                i += 1 + count
                continue
            child = node.lookup(token)
            if child is not None:
                node = child
                i += 1
                continue
            if node.descriptor.action is None:
                raise UnknownCommandError(
                    token, command_path=node.command_path, suggestions=suggest(node, token)
                )
            break
        return node, flags + tokens[i:]

    def run(self, argv: Sequence[str]) -> int:
        if self._started:
            raise RuntimeError("a Dispatcher can only run once")
        self._started = True
        self.registry.seal()
        try:
            return self._run(argv)
        except McdError as e:
            print(e.render(), file=sys.stderr)
            return e.exit_code
        except SystemExit as e:
            return _exit_status(e)
        finally:
            self.state = DispatchState.FINALIZED

    def _run(self, argv: Sequence[str]) -> int:
        node, rest = self.select(argv)
        parser = build_parser(node)
        args = parser.parse_args(rest)

        action = node.descriptor.action
        if action is None:
            parser.print_help(sys.stdout)
            return 0

        self._advance(DispatchState.EXECUTING)
        result = action(ActionContext(args, node, self.registry))
        if result is None or result is True:
            return 0
        if result is False:
            raise ActionError(f'"{node.command_path}" failed', command_path=node.command_path)
        if isinstance(result, int):
            return result
        raise TypeError(
            f"action for {node.command_path!r} returned {type(result).__name__}, "
            "expected int, bool or None"
        )


def _exit_status(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    print(f"Error: {code}", file=sys.stderr)
    return 1


def dispatch(registry: CommandRegistry, argv: Sequence[str]) -> int:
    return Dispatcher(registry).run(argv)

# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Command descriptors and the registry tree the dispatcher walks.

A ``CommandDescriptor`` is an immutable description of one command. The
``CommandRegistry`` arranges descriptors into a tree of ``CommandNode``
objects rooted at the ``mcd`` descriptor. Building descriptors and the tree
never touches the filesystem or environment; side effects belong in actions.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Any

from ..util.logging_utils import log_debug
from .config import load_global_config
from .errors import DuplicateCommandError

ROOT_NAME = "mcd"
ROOT_SUMMARY = "mcd allows you to create new projects and manage existing ones"


@dataclass(frozen=True)
class ArgumentSpec:
    """One ``add_argument`` call: positional *flags* plus keyword *options*."""

    flags: tuple[str, ...]
    options: Mapping[str, Any] = field(default_factory=dict)

    def apply(self, parser: argparse.ArgumentParser) -> argparse.Action:
        return parser.add_argument(*self.flags, **dict(self.options))


def arg(*flags: str, **options: Any) -> ArgumentSpec:
    """Shorthand for ``ArgumentSpec`` mirroring ``parser.add_argument``."""
    if not flags:
        raise ValueError("arg() needs at least one name or flag")
    return ArgumentSpec(flags=flags, options=MappingProxyType(dict(options)))


def _check_token(token: str, what: str) -> None:
    if not token or token != token.strip() or any(c.isspace() for c in token):
        raise ValueError(f"{what} must be a non-empty token without whitespace: {token!r}")
    if token.startswith("-"):
        raise ValueError(f"{what} must not start with '-': {token!r}")


@dataclass(frozen=True)
class CommandDescriptor:
    """Immutable description of one command node.

    A descriptor without an ``action`` is a pure grouping node: invoking it
    prints its help.
    """

    name: str
    summary: str
    description: str | None = None
    action: Action | None = None
    arguments: tuple[ArgumentSpec, ...] = ()
    aliases: tuple[str, ...] = ()
    hidden: bool = False

    def __post_init__(self) -> None:
        _check_token(self.name, "command name")
        for alias in self.aliases:
            _check_token(alias, "command alias")
        # Accept lists for convenience but store tuples.
        object.__setattr__(self, "arguments", tuple(self.arguments))
        object.__setattr__(self, "aliases", tuple(self.aliases))

    @property
    def tokens(self) -> tuple[str, ...]:
        """All tokens that select this command: its name followed by aliases."""
        return (self.name, *self.aliases)

    @property
    def help_text(self) -> str:
        return self.description or self.summary


ROOT_DESCRIPTOR = CommandDescriptor(name=ROOT_NAME, summary=ROOT_SUMMARY)


class CommandNode:
    """A descriptor placed in the tree, owning its ordered children."""

    def __init__(
        self,
        descriptor: CommandDescriptor,
        parent: CommandNode | None = None,
        registry: CommandRegistry | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.parent = parent
        self._registry = registry
        self._children: dict[str, CommandNode] = {}
        self._by_token: dict[str, CommandNode] = {}

    def __repr__(self) -> str:
        return f"CommandNode({self.command_path!r})"

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def children(self) -> tuple[CommandNode, ...]:
        return tuple(self._children.values())

    @property
    def visible_children(self) -> tuple[CommandNode, ...]:
        return tuple(c for c in self._children.values() if not c.descriptor.hidden)

    @property
    def path(self) -> tuple[str, ...]:
        names: list[str] = []
        node: CommandNode | None = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return tuple(reversed(names))

    @property
    def command_path(self) -> str:
        return " ".join(self.path)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def add(self, descriptor: CommandDescriptor) -> CommandNode:
        """Attach *descriptor* as a child and return its node."""
        if self._registry is not None and self._registry.sealed:
            raise RuntimeError(
                f"cannot add {descriptor.name!r} to {self.command_path!r}: registry is sealed"
            )
        for token in descriptor.tokens:
            if token in self._by_token:
                raise DuplicateCommandError(
                    f"{token!r} is already registered under {self.command_path!r}",
                    command_path=self.command_path,
                )
        if len(set(descriptor.tokens)) != len(descriptor.tokens):
            raise DuplicateCommandError(
                f"{descriptor.name!r} repeats a token in its aliases",
                command_path=self.command_path,
            )
        node = CommandNode(descriptor, parent=self, registry=self._registry)
        self._children[descriptor.name] = node
        for token in descriptor.tokens:
            self._by_token[token] = node
        return node

    def lookup(self, token: str) -> CommandNode | None:
        """Return the child selected by *token* (name or alias), if any."""
        return self._by_token.get(token)

    def walk(self) -> Iterator[CommandNode]:
        """Yield this node and all descendants depth-first in registration order."""
        yield self
        for child in self._children.values():
            yield from child.walk()


class CommandRegistry:
    """The tree of commands rooted at one descriptor.

    Populate it with ``registry.root.add(...)`` (or ``registry.add``), then
    ``seal()`` it; the dispatcher seals it before walking so the tree is
    read-only for the rest of the process.
    """

    def __init__(self, root: CommandDescriptor = ROOT_DESCRIPTOR) -> None:
        self._sealed = False
        self.root = CommandNode(root, registry=self)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        self._sealed = True

    def add(
        self, descriptor: CommandDescriptor, parent: CommandNode | None = None
    ) -> CommandNode:
        return (parent or self.root).add(descriptor)

    def resolve(self, path: tuple[str, ...] | list[str]) -> CommandNode | None:
        """Follow *path* (tokens below the root) and return the node it names."""
        node = self.root
        for token in path:
            child = node.lookup(token)
            if child is None:
                return None
            node = child
        return node


class ActionContext:
    """Everything an action receives: parsed arguments plus lazy helpers.

    Creating a context performs no I/O; the global config is only read the
    first time ``config`` is accessed.
    """

    def __init__(
        self, args: argparse.Namespace, node: CommandNode, registry: CommandRegistry
    ) -> None:
        self.args = args
        self.node = node
        self.registry = registry

    @property
    def command_path(self) -> str:
        return self.node.command_path

    @cached_property
    def config(self) -> dict[str, Any]:
        return load_global_config()

    def debug(self, message: str) -> None:
        log_debug(f"{self.command_path}: {message}")


Action = Callable[[ActionContext], int | bool | None]

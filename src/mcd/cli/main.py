#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import functools
import sys
from collections.abc import Sequence

import argcomplete

from ..lib.core.command import ROOT_DESCRIPTOR, CommandRegistry
from .commands import register_all
from .dispatcher import build_completion_parser, dispatch


@functools.cache
def root_registry() -> CommandRegistry:
    """The process-wide command tree, built and sealed on first use."""
    registry = register_all(CommandRegistry(ROOT_DESCRIPTOR))
    registry.seal()
    return registry


def run(argv: Sequence[str] | None = None, registry: CommandRegistry | None = None) -> int:
    """Dispatch *argv* (default: ``sys.argv[1:]``) and return the exit status."""
    if argv is None:
        argv = sys.argv[1:]
    if registry is None:
        registry = root_registry()
    return dispatch(registry, argv)


def main() -> None:
    registry = root_registry()
    # Only acts when the shell is asking for completions; exits in that case.
    argcomplete.autocomplete(build_completion_parser(registry.root))
    sys.exit(run(sys.argv[1:], registry))


if __name__ == "__main__":
    main()

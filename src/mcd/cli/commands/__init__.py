# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""CLI command modules.

Each module listed in ``COMMAND_MODULES`` exposes ``register(registry)``,
which attaches its ``CommandDescriptor`` objects under the root. Registration
must not do any I/O; that belongs in the actions.
"""

from __future__ import annotations

from types import ModuleType

from ...lib.core.command import CommandRegistry
from .builtin import attach_builtins

# No project commands are shipped yet.
COMMAND_MODULES: tuple[ModuleType, ...] = ()


def register_all(
    registry: CommandRegistry, modules: tuple[ModuleType, ...] = COMMAND_MODULES
) -> CommandRegistry:
    """Register every command module, then the built-ins, and return *registry*."""
    for module in modules:
        module.register(registry)
    attach_builtins(registry)
    return registry

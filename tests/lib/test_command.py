# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import dataclasses
import unittest
import unittest.mock

from mcd.lib.core.command import (
    ROOT_DESCRIPTOR,
    ROOT_SUMMARY,
    ActionContext,
    CommandDescriptor,
    CommandRegistry,
    arg,
)
from mcd.lib.core.errors import DuplicateCommandError


class DescriptorTests(unittest.TestCase):
    def test_root_descriptor(self) -> None:
        self.assertEqual(ROOT_DESCRIPTOR.name, "mcd")
        self.assertEqual(
            ROOT_DESCRIPTOR.summary,
            "mcd allows you to create new projects and manage existing ones",
        )
        self.assertEqual(ROOT_DESCRIPTOR.summary, ROOT_SUMMARY)
        self.assertIsNone(ROOT_DESCRIPTOR.action)

    def test_descriptor_is_immutable(self) -> None:
        with self.assertRaises(dataclasses.FrozenInstanceError):
            ROOT_DESCRIPTOR.name = "other"  # type: ignore[misc]

    def test_invalid_names_rejected(self) -> None:
        for name in ("", "two words", "-flag", " padded"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                CommandDescriptor(name, "summary")

    def test_invalid_alias_rejected(self) -> None:
        with self.assertRaises(ValueError):
            CommandDescriptor("new", "summary", aliases=("--n",))

    def test_sequences_stored_as_tuples(self) -> None:
        d = CommandDescriptor("new", "s", arguments=[arg("name")], aliases=["mk"])  # type: ignore[arg-type]
        self.assertIsInstance(d.arguments, tuple)
        self.assertEqual(d.aliases, ("mk",))
        self.assertEqual(d.tokens, ("new", "mk"))

    def test_help_text_falls_back_to_summary(self) -> None:
        self.assertEqual(CommandDescriptor("a", "short").help_text, "short")
        self.assertEqual(CommandDescriptor("a", "short", description="long").help_text, "long")


class ArgumentSpecTests(unittest.TestCase):
    def test_arg_requires_a_flag(self) -> None:
        with self.assertRaises(ValueError):
            arg()

    def test_apply_adds_argument(self) -> None:
        parser = argparse.ArgumentParser()
        arg("--template", "-t", default="basic").apply(parser)
        self.assertEqual(parser.parse_args([]).template, "basic")
        self.assertEqual(parser.parse_args(["-t", "web"]).template, "web")

    def test_options_are_read_only(self) -> None:
        spec = arg("name", help="x")
        with self.assertRaises(TypeError):
            spec.options["help"] = "y"  # type: ignore[index]


class RegistryTests(unittest.TestCase):
    def test_children_keep_registration_order(self) -> None:
        registry = CommandRegistry()
        for name in ("new", "list", "archive"):
            registry.add(CommandDescriptor(name, name))
        self.assertEqual([c.name for c in registry.root.children], ["new", "list", "archive"])

    def test_duplicate_name_rejected(self) -> None:
        registry = CommandRegistry()
        registry.add(CommandDescriptor("new", "one"))
        with self.assertRaises(DuplicateCommandError) as ctx:
            registry.add(CommandDescriptor("new", "two"))
        self.assertIsInstance(ctx.exception, ValueError)

    def test_alias_clashing_with_name_rejected(self) -> None:
        registry = CommandRegistry()
        registry.add(CommandDescriptor("new", "one"))
        with self.assertRaises(DuplicateCommandError):
            registry.add(CommandDescriptor("create", "two", aliases=("new",)))

    def test_alias_repeating_name_rejected(self) -> None:
        with self.assertRaises(DuplicateCommandError):
            CommandRegistry().add(CommandDescriptor("new", "one", aliases=("new",)))

    def test_same_name_under_different_parents(self) -> None:
        registry = CommandRegistry()
        a = registry.add(CommandDescriptor("a", "a"))
        b = registry.add(CommandDescriptor("b", "b"))
        a.add(CommandDescriptor("list", "list"))
        b.add(CommandDescriptor("list", "list"))
        self.assertEqual(registry.resolve(["b", "list"]).command_path, "mcd b list")

    def test_lookup_and_resolve(self) -> None:
        registry = CommandRegistry()
        project = registry.add(CommandDescriptor("project", "p", aliases=("p",)))
        create = project.add(CommandDescriptor("create", "c"))
        self.assertIs(registry.root.lookup("p"), project)
        self.assertIs(registry.resolve(("p", "create")), create)
        self.assertIs(registry.resolve(()), registry.root)
        self.assertIsNone(registry.resolve(["project", "missing"]))
        self.assertEqual(create.path, ("mcd", "project", "create"))
        self.assertFalse(create.is_root)
        self.assertEqual([n.name for n in registry.root.walk()], ["mcd", "project", "create"])

    def test_sealed_registry_rejects_additions_at_any_depth(self) -> None:
        registry = CommandRegistry()
        project = registry.add(CommandDescriptor("project", "p"))
        registry.seal()
        self.assertTrue(registry.sealed)
        with self.assertRaises(RuntimeError):
            registry.add(CommandDescriptor("new", "n"))
        with self.assertRaises(RuntimeError):
            project.add(CommandDescriptor("create", "c"))

    def test_hidden_children_not_visible(self) -> None:
        registry = CommandRegistry()
        registry.add(CommandDescriptor("debug", "d", hidden=True))
        registry.add(CommandDescriptor("new", "n"))
        self.assertEqual([c.name for c in registry.root.visible_children], ["new"])
        self.assertEqual(len(registry.root.children), 2)


class ActionContextTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = CommandRegistry()
        self.node = self.registry.add(CommandDescriptor("new", "n"))

    def test_config_is_loaded_lazily_once(self) -> None:
        with unittest.mock.patch(
            "mcd.lib.core.command.load_global_config", return_value={"projects": {}}
        ) as mock_load:
            ctx = ActionContext(argparse.Namespace(), self.node, self.registry)
            mock_load.assert_not_called()
            self.assertEqual(ctx.config, {"projects": {}})
            self.assertEqual(ctx.config, {"projects": {}})
        mock_load.assert_called_once_with()

    def test_debug_prefixes_command_path(self) -> None:
        with unittest.mock.patch("mcd.lib.core.command.log_debug") as mock_log:
            ctx = ActionContext(argparse.Namespace(), self.node, self.registry)
            ctx.debug("hello")
        mock_log.assert_called_once_with("mcd new: hello")

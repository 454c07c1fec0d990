"""
Help presenter tests (catalog listing, command help, documentation pages).

Scope
- Validate listing(): direct commands, sub-group counts, fallback to the root.
- Validate command help (usage, aliases, required markers, documentation).
- Validate catalog help (banner, commands, groups) and the stderr variant.

Conventions
- Test method names follow CamelCase per project convention.
- Consoles write to in-memory buffers without colour.
"""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from unittest import TestCase

from rich.console import Console

from switchyard import Command, Declaration, Registry
from switchyard.helper import Helper, listing


def sample(title, aliases=(), options=()):
    class Sample(Command):
        name = title
        description = f"{title} description"

        def aliases(self):
            return list(aliases)

        def options(self):
            return list(options) + super().options()

        async def action(self, invocation, context):
            pass

    return Sample()


class TestListing(TestCase):
    """Behavioral tests for listing()."""

    def setUp(self):
        self.registry = Registry()
        for name in ("version", "spo folder copy", "spo folder move", "spo site list", "todo list set"):
            self.registry.register(sample(name))
        self.registry.register(sample("spo web get", aliases=("spo site get",)))

    def testRootListsTopLevelCommandsAndGroups(self):
        group, commands, groups = listing(self.registry)
        self.assertEqual(group, "")
        self.assertEqual(list(commands), ["version"])
        self.assertEqual(groups, {"spo": 5, "todo": 1})

    def testGroupListsDirectCommandsAndSubGroups(self):
        group, commands, groups = listing(self.registry, ["spo", "site"])
        self.assertEqual(group, "spo site ")
        self.assertEqual(sorted(commands), ["spo site get", "spo site list"])
        self.assertEqual(groups, {})

    def testNestedGroupsCounted(self):
        _, commands, groups = listing(self.registry, ["spo"])
        self.assertEqual(commands, {})
        self.assertEqual(groups, {"spo folder": 2, "spo site": 2, "spo web": 1})

    def testUnknownGroupFallsBackToRoot(self):
        group, commands, _ = listing(self.registry, ["teams"])
        self.assertEqual(group, "")
        self.assertIn("version", commands)


class TestHelper(TestCase):
    """Behavioral tests for Helper.show."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        os.makedirs(os.path.join(self.directory.name, "spo", "folder"))
        with open(os.path.join(self.directory.name, "spo", "folder", "folder-copy.md"), "w", encoding="utf-8") as file:
            file.write("# spo folder copy\n\nCopies a folder to another location.\n")

        self.registry = Registry()
        self.copy = self.registry.register(sample(
            "spo folder copy",
            aliases=("spo folder cp",),
            options=(Declaration("-u, --webUrl <webUrl>", "Site URL"),),
        ))
        self.registry.register(sample("version"))
        self.stdout = Console(file=io.StringIO(), color_system=None, width=120)
        self.stderr = Console(file=io.StringIO(), color_system=None, width=120)
        self.helper = Helper(
            self.registry,
            self.directory.name,
            prog="tool",
            version="2.0.0",
            description="Tool description",
            stdout=self.stdout,
            stderr=self.stderr,
            colorful=False,
        )

    def tearDown(self):
        self.directory.cleanup()

    def testCommandHelp(self):
        self.helper.show(self.copy)
        output = self.stdout.file.getvalue()
        self.assertIn("usage: tool spo folder copy [options]", output)
        self.assertIn("spo folder copy description", output)
        self.assertIn("aliases: spo folder cp", output)
        self.assertIn("-u, --webUrl <webUrl>", output)
        self.assertIn("-o, --output", output)
        self.assertIn("Copies a folder to another location.", output)

    def testCommandHelpWithoutPage(self):
        self.helper.show(self.registry.find("version"))
        self.assertIn("usage: tool version [options]", self.stdout.file.getvalue())

    def testPageLookup(self):
        self.assertTrue(self.helper.page("spo folder copy").endswith("folder-copy.md"))
        self.assertIsNone(self.helper.page("version"))

    def testCatalogHelp(self):
        self.helper.show(None, [])
        output = self.stdout.file.getvalue()
        self.assertIn("tool v2.0.0", output)
        self.assertIn("Tool description", output)
        self.assertIn("Commands:", output)
        self.assertIn("version [options]", output)
        self.assertIn("Commands groups:", output)
        self.assertIn("spo *", output)
        self.assertIn("2 commands", output)

    def testGroupHelpListsGroupCommands(self):
        self.helper.show(None, ["spo", "folder"])
        output = self.stdout.file.getvalue()
        self.assertIn("spo folder copy [options]", output)
        self.assertIn("spo folder cp [options]", output)
        self.assertNotIn("Commands groups:", output)

    def testErrorHelpGoesToStderr(self):
        self.helper.show(self.copy, error=True)
        self.assertEqual(self.stdout.file.getvalue(), "")
        self.assertIn("usage:", self.stderr.file.getvalue())

    def testFancyHelpUsesPanelTitle(self):
        self.helper.fancy = True
        self.helper.show(self.copy)
        self.assertIn("[ SPO FOLDER COPY HELP ]", self.stdout.file.getvalue())


if __name__ == "__main__":
    unittest.main()

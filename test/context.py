# python
"""
Context module behavioral tests.

Scope
- Validate typed reads (zero value on unknown names or mismatched kinds).
- Validate explicit-provision tracking and read-only views.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from valkyrie import Command, Context, Flag, FlagKind, FlagValue


class TestContext(TestCase):
    """Behavioral tests for Context."""

    def setUp(self):
        self.command = Command(name="tool")
        self.port = Flag("port", "p", kind=FlagKind.INT, default=8080)
        self.context = Context(self.command)
        self.context._seed(self.port)

    def testSeededDefaultIsNotProvided(self):
        self.assertIn("port", self.context)
        self.assertEqual(self.context.get_int("port"), 8080)
        self.assertFalse(self.context.is_set("port"))

    def testAssignMarksProvided(self):
        self.context._assign(self.port, FlagValue(FlagKind.INT, 3000))
        self.assertEqual(self.context.get_int("port"), 3000)
        self.assertTrue(self.context.is_set("port"))
        self.assertEqual(self.context.provided, frozenset({"port"}))

    def testAssignRejectsOtherKinds(self):
        with self.assertRaises(TypeError):
            self.context._assign(self.port, FlagValue(FlagKind.STRING, "3000"))

    def testTypedReadsAreLenient(self):
        self.assertEqual(self.context.get_string("port"), "")
        self.assertIs(self.context.get_bool("missing"), False)
        self.assertEqual(self.context.get_float("missing"), 0.0)

    def testRawGet(self):
        self.assertEqual(self.context.get("port"), 8080)
        self.assertIsNone(self.context.get("missing"))
        self.assertEqual(self.context.get("missing", "fallback"), "fallback")

    def testArgsAreOrderedAndReadOnly(self):
        self.context._append("a.txt")
        self.context._append("b.txt")
        self.assertEqual(self.context.args, ("a.txt", "b.txt"))
        with self.assertRaises(TypeError):
            self.context.values["port"] = FlagValue(FlagKind.INT, 1)

    def testCommandIsExposed(self):
        self.assertIs(self.context.command, self.command)


if __name__ == "__main__":
    unittest.main()

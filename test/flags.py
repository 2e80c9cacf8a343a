# python
"""
Flags module behavioral tests.

Scope
- Validate FlagKind zero values, payload acceptance and literal parsing.
- Validate FlagValue tagging: enforced at construction, lenient accessors.
- Validate Flag metadata sanitization (names, shorts, reserved names, defaults).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from valkyrie import Flag, FlagKind, FlagValue


class TestFlagKind(TestCase):
    """Behavioral tests for FlagKind."""

    def testZeroValues(self):
        self.assertIs(FlagKind.BOOL.zero, False)
        self.assertEqual(FlagKind.STRING.zero, "")
        self.assertEqual(FlagKind.INT.zero, 0)
        self.assertEqual(FlagKind.FLOAT.zero, 0.0)

    def testBoolLiterals(self):
        self.assertIs(FlagKind.BOOL.parse("true"), True)
        self.assertIs(FlagKind.BOOL.parse("1"), True)
        self.assertIs(FlagKind.BOOL.parse("false"), False)
        self.assertIs(FlagKind.BOOL.parse("0"), False)

    def testBoolLiteralsAreCaseSensitive(self):
        for literal in ("True", "yes", "", "2"):
            with self.subTest(literal=literal), self.assertRaises(ValueError):
                FlagKind.BOOL.parse(literal)

    def testNumericParsing(self):
        self.assertEqual(FlagKind.INT.parse("3000"), 3000)
        self.assertEqual(FlagKind.INT.parse("-7"), -7)
        self.assertEqual(FlagKind.FLOAT.parse("2.5"), 2.5)
        with self.assertRaises(ValueError):
            FlagKind.INT.parse("3.5")
        with self.assertRaises(ValueError):
            FlagKind.FLOAT.parse("fast")

    def testStringIsVerbatim(self):
        self.assertEqual(FlagKind.STRING.parse(" a=b "), " a=b ")

    def testBoolIsNotNumeric(self):
        self.assertFalse(FlagKind.INT.accepts(True))
        self.assertFalse(FlagKind.FLOAT.accepts(False))
        self.assertTrue(FlagKind.FLOAT.accepts(3))


class TestFlagValue(TestCase):
    """Behavioral tests for FlagValue."""

    def testMismatchedPayloadRejected(self):
        with self.assertRaises(TypeError):
            FlagValue(FlagKind.INT, "3")

    def testDefaultsToZero(self):
        self.assertEqual(FlagValue(FlagKind.STRING).payload, "")

    def testFloatWidening(self):
        value = FlagValue(FlagKind.FLOAT, 3)
        self.assertIsInstance(value.payload, float)
        self.assertEqual(value.as_float, 3.0)

    def testAccessorsOnMismatchReturnZero(self):
        value = FlagValue(FlagKind.INT, 42)
        self.assertEqual(value.as_int, 42)
        self.assertIs(value.as_bool, False)
        self.assertEqual(value.as_string, "")
        self.assertEqual(value.as_float, 0.0)

    def testReadOnly(self):
        value = FlagValue(FlagKind.BOOL, True)
        with self.assertRaises(AttributeError):
            value.payload = False

    def testEquality(self):
        self.assertEqual(FlagValue(FlagKind.INT, 1), FlagValue(FlagKind.INT, 1))
        self.assertNotEqual(FlagValue(FlagKind.INT, 1), FlagValue(FlagKind.FLOAT, 1))


class TestFlag(TestCase):
    """Behavioral tests for Flag metadata."""

    def testDefaults(self):
        flag = Flag("config")
        self.assertIs(flag.kind, FlagKind.STRING)
        self.assertIsNone(flag.short)
        self.assertIsNone(flag.descr)
        self.assertEqual(flag.default, "")
        self.assertFalse(flag.required)

    def testDashedNameAccepted(self):
        self.assertEqual(Flag("dry-run", kind=FlagKind.BOOL).name, "dry-run")

    def testMalformedNamesRejected(self):
        for name in ("", "  ", "-port", "port-", "dry_run", "9lives", "a--b"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Flag(name)

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            Flag(1)

    def testShortMustBeOneCharacter(self):
        with self.assertRaises(ValueError):
            Flag("port", "pp")
        with self.assertRaises(ValueError):
            Flag("port", "-")

    def testReservedNamesRejected(self):
        with self.assertRaises(ValueError):
            Flag("help")
        with self.assertRaises(ValueError):
            Flag("version")
        with self.assertRaises(ValueError):
            Flag("host", "h")
        with self.assertRaises(ValueError):
            Flag("verbose", "V")

    def testDefaultMustMatchKind(self):
        with self.assertRaises(TypeError):
            Flag("port", kind=FlagKind.INT, default="8080")
        with self.assertRaises(TypeError):
            Flag("port", kind=FlagKind.INT, default=True)

    def testRequiredFlagCannotHaveDefault(self):
        with self.assertRaises(TypeError):
            Flag("config", required=True, default="app.toml")

    def testRequiredFlagDefaultsToZero(self):
        flag = Flag("count", kind=FlagKind.INT, required=True)
        self.assertEqual(flag.initial, FlagValue(FlagKind.INT, 0))

    def testDescrIsTrimmed(self):
        self.assertEqual(Flag("port", descr="  port to use \n").descr, "port to use")

    def testSwitches(self):
        self.assertEqual(Flag("port", "p").switches, ("-p", "--port"))
        self.assertEqual(Flag("port").switches, ("--port",))

    def testParse(self):
        flag = Flag("port", "p", kind=FlagKind.INT, default=8080)
        self.assertEqual(flag.parse("3000"), FlagValue(FlagKind.INT, 3000))
        with self.assertRaises(ValueError):
            flag.parse("http")

    def testImmutable(self):
        flag = Flag("port")
        with self.assertRaises(AttributeError):
            flag.name = "other"


if __name__ == "__main__":
    unittest.main()

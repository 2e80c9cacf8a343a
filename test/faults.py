"""
Faults module tests (rendering, triggering, host overrides).

Scope
- Validate the one-line rendering: program, code, title, message, hint.
- Validate trigger(): raise outside the shell, print on stderr inside it.
- Validate __codes__ / __prog__ overrides read from __main__.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from valkyrie import (
    Command,
    CommandException,
    FaultCode,
    MissingValueError,
    UnknownFlagError,
    trigger,
)


def render(renderable, width=200):
    console = Console(color_system=None, force_terminal=False, width=width)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


class TestFaultRendering(TestCase):
    """Rendering of faults through rich."""

    def setUp(self):
        self.tool = Command(name="mycli")
        self.fault = UnknownFlagError(
            "unknown flag '--prot' at first position",
            title="unknown flag",
            code=FaultCode.UNKNOWN_FLAG,
            hint="did you mean '--port'?",
            tool=self.tool,
        )

    def testOneLine(self):
        output = render(self.fault).strip()
        self.assertEqual(
            output,
            "[ mycli — 11112 | Unknown Flag ] unknown flag '--prot' at first position → did you mean '--port'?",
        )

    def testFancyPanel(self):
        output = render(self.fault.__replace__(fancy=True))
        self.assertIn("Unknown Flag", output)
        self.assertGreaterEqual(len(output.strip().splitlines()), 3)

    def testWithoutHint(self):
        fault = MissingValueError("flag '--port' at first position expects a value of type int", code=FaultCode.MISSING_VALUE, tool=self.tool)
        self.assertEqual(render(fault).strip(), "[ mycli — 11117 | Error ] flag '--port' at first position expects a value of type int")

    def testCodesOverride(self):
        with mock.patch("__main__.__codes__", {FaultCode.UNKNOWN_FLAG: "E-FLAG"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "E-FLAG")
            self.assertIn("E-FLAG", render(self.fault))
        self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "11112")

    def testProgOverride(self):
        with mock.patch("__main__.__prog__", "renamed", create=True):
            self.assertIn("[ renamed —", render(self.fault))


class TestTrigger(TestCase):
    """trigger() and __replace__()."""

    def testRaisesOutsideShell(self):
        fault = UnknownFlagError("oops", code=FaultCode.UNKNOWN_FLAG)
        with self.assertRaises(UnknownFlagError) as context:
            trigger(fault, title="unknown flag")
        self.assertEqual(context.exception.options["title"], "unknown flag")
        self.assertIsNot(context.exception, fault)

    def testPrintsInsideShell(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            trigger(UnknownFlagError("oops", code=FaultCode.UNKNOWN_FLAG, tool=Command(name="tool")), shell=True)
        self.assertIn("[ tool — 11112 | Error ] oops", stderr.getvalue())

    def testReplaceKeepsCause(self):
        try:
            try:
                raise RuntimeError("root cause")
            except RuntimeError as exception:
                raise CommandException("wrapped") from exception
        except CommandException as fault:
            replica = fault.__replace__(hint="more")
        self.assertIsInstance(replica.__cause__, RuntimeError)
        self.assertEqual(replica.hint, "more")
        self.assertEqual(replica.message, "wrapped")

    def testTriggerRequiresProtocol(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testOptionsAreReadOnly(self):
        fault = CommandException("message", code=FaultCode.HOOK_FAILED)
        with self.assertRaises(TypeError):
            fault.options["code"] = FaultCode.MISSING_HANDLER


if __name__ == "__main__":
    unittest.main()

"""
Faults module behavioral tests.

Scope
- Validate trigger(): raising outside shell mode, printing and exiting inside it.
- Validate warnings: warnings module outside shell mode, printed inside it.
- Validate option merging through copy.replace and rendering through rich.
- Validate FaultCode.normalize() and getdoc().

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import unittest
from contextlib import redirect_stderr
from unittest import TestCase

from rich.console import Console

from flagship import (
    ParserException,
    UnknownFlagError,
    NoArgumentsWarning,
    FaultCode,
    trigger,
    getdoc,
)


def fault(**options):
    return UnknownFlagError(
        "unknown flag '--nope' at second position",
        title="unknown flag",
        code=FaultCode.UNKNOWN_FLAG,
        hint="try 'prog --help' to see all available options",
        **options,
    )


def render(renderable):
    console = Console(file=io.StringIO(), color_system=None, width=100)
    console.print(renderable)
    return console.file.getvalue()


class TestFaultCode(TestCase):

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "11101")
        self.assertEqual(FaultCode.NO_ARGUMENTS_GIVEN.normalize(), "12100")

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))

    def testGetdocWithoutMapping(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_FLAG))

    def testGetdocRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(11112)


class TestTrigger(TestCase):

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownFlagError) as context:
            trigger(fault(), index=2)
        self.assertEqual(context.exception.options["index"], 2)
        self.assertIsInstance(context.exception, ParserException)

    def testPrintsAndExitsInShell(self):
        with redirect_stderr(io.StringIO()) as stderr, self.assertRaises(SystemExit) as context:
            trigger(fault(), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("11112", stderr.getvalue())
        self.assertIn("Unknown Flag", stderr.getvalue())
        self.assertIn("unknown flag '--nope' at second position", stderr.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testWarningOutsideShell(self):
        warning = NoArgumentsWarning("no arguments given", title="no arguments", code=FaultCode.NO_ARGUMENTS_GIVEN)
        with self.assertWarns(NoArgumentsWarning):
            trigger(warning)

    def testWarningInShellDoesNotExit(self):
        warning = NoArgumentsWarning("no arguments given", title="no arguments", code=FaultCode.NO_ARGUMENTS_GIVEN)
        with redirect_stderr(io.StringIO()) as stderr:
            trigger(warning, shell=True)
        self.assertIn("no arguments given", stderr.getvalue())
        self.assertIn("12100", stderr.getvalue())


class TestParserException(TestCase):

    def testStringIsMessage(self):
        self.assertEqual(str(fault()), "unknown flag '--nope' at second position")
        self.assertIs(fault().code, FaultCode.UNKNOWN_FLAG)

    def testReplaceMergesOptions(self):
        original = fault(index=2)
        replaced = copy.replace(original, index=3, input="--nope")
        self.assertIsInstance(replaced, UnknownFlagError)
        self.assertEqual(replaced.message, original.message)
        self.assertEqual(replaced.options["index"], 3)
        self.assertEqual(replaced.options["input"], "--nope")
        self.assertEqual(original.options["index"], 2)

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            fault().options["index"] = 1

    def testPlainRendering(self):
        output = render(fault())
        self.assertTrue(output.startswith("[ flagship — 11112 | Unknown Flag ]"))
        self.assertIn(" → try 'prog --help'", output)

    def testFancyRendering(self):
        output = render(fault(fancy=True))
        self.assertIn("11112", output)
        self.assertIn("╭", output)

    def testColorfulRenderingKeepsText(self):
        self.assertIn("unknown flag '--nope'", render(fault(colorful=True)))


if __name__ == "__main__":
    unittest.main()

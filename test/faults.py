"""
Faults module tests (codes, fault options, rendering and trigger()).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest import TestCase

from commandeer import RootCommand
from commandeer.faults import (
    FaultCode,
    CommandException,
    UnknownCommandError,
    MissingOptionsError,
    HandlerError,
    ApplicationError,
    FrameworkError,
    trigger,
)


class TestFaultCodes(TestCase):
    def testCodesAreStable(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND, 11101)
        self.assertEqual(FaultCode.INCORRECT_USAGE, 11103)
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 11112)
        self.assertEqual(FaultCode.MISSING_OPTIONS, 11117)
        self.assertEqual(FaultCode.INVALID_VALUE, 11126)
        self.assertEqual(FaultCode.DELEGATED_ERROR, 11131)

    def testNormalizeDefaultsToNumericValue(self):
        self.assertEqual(FaultCode.MISSING_OPTIONS.normalize(), "11117")


class TestCommandException(TestCase):
    def testOptionsAreReadOnly(self):
        fault = UnknownCommandError("Unknown command bogus", code=FaultCode.UNKNOWN_COMMAND)
        self.assertEqual(fault.code, FaultCode.UNKNOWN_COMMAND)
        with self.assertRaises(TypeError):
            fault.options["code"] = 0

    def testReplaceMergesOptions(self):
        fault = MissingOptionsError("Specify all the required options", title="missing options")
        replaced = fault.__replace__(colorful=False)
        self.assertIsInstance(replaced, MissingOptionsError)
        self.assertEqual(replaced.message, fault.message)
        self.assertEqual(dict(replaced.options), {"title": "missing options", "colorful": False})
        self.assertNotIn("colorful", fault.options)

    def testRenderingWithoutTool(self):
        fault = CommandException("boom", colorful=False)
        self.assertEqual(fault.__rich__().plain, "<commandeer>: boom")

    def testRenderingUsesRootName(self):
        child = RootCommand("app").command("child")
        fault = CommandException("boom", tool=child, colorful=False)
        self.assertEqual(fault.__rich__().plain, "app: boom")


class TestTrigger(TestCase):
    def testTriggerWithoutToolPrintsErrorLine(self):
        with contextlib.redirect_stdout(io.StringIO()) as stream:
            code = trigger(CommandException("boom"), colorful=False)
        self.assertEqual(code, 1)
        self.assertEqual(stream.getvalue().strip(), "<commandeer>: boom")

    def testTriggerWithToolPrintsHelp(self):
        app = RootCommand("app", colorful=False)
        with contextlib.redirect_stdout(io.StringIO()) as stream:
            code = app.trigger(CommandException("boom"))
        self.assertEqual(code, 1)
        self.assertIn("app: boom", stream.getvalue())
        self.assertIn("Usage: app [option]", stream.getvalue())

    def testTriggerRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("boom"))


class TestHandlerErrors(TestCase):
    def testHierarchy(self):
        self.assertTrue(issubclass(ApplicationError, HandlerError))
        self.assertTrue(issubclass(FrameworkError, HandlerError))
        self.assertFalse(issubclass(ApplicationError, CommandException))
        self.assertEqual(ApplicationError("file not found").message, "file not found")


if __name__ == "__main__":
    unittest.main()

"""
Option and Parser behavioral tests.

Scope
- Parser: option markers, implicit "true" values, dropped tokens, last
  occurrence wins.
- Option: canonical keys, spelling order, closed converter set and the
  ConversionError raised for bad values.
- Construction-time validation of names, types and descriptions.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from commandeer import Option, option, HELP, ConversionError, FaultCode
from commandeer.parser import Parser


class TestParser(TestCase):
    def testMarkerTakesFollowingToken(self):
        parser = Parser(["--from", "python", "--to", "go"])
        self.assertEqual(dict(parser), {"--from": "python", "--to": "go"})

    def testMarkerWithoutValueIsTrue(self):
        parser = Parser(["--force", "--to", "go", "-v"])
        self.assertEqual(parser.getargument("--force"), "true")
        self.assertEqual(parser.getargument("-v"), "true")
        self.assertEqual(parser.getargument("--to"), "go")

    def testStrayTokensAreDropped(self):
        parser = Parser(["convert", "--to", "go", "extra"])
        self.assertEqual(dict(parser), {"--to": "go"})

    def testLastOccurrenceWins(self):
        parser = Parser(["--to", "go", "--to", "rust"])
        self.assertEqual(parser["--to"], "rust")
        self.assertEqual(len(parser), 1)

    def testUnknownSpellingIsNone(self):
        self.assertIsNone(Parser(["--to", "go"]).getargument("--from"))

    def testTokensAreKept(self):
        self.assertEqual(Parser(["a", "-b"]).tokens, ("a", "-b"))

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            Parser("--to go")
        with self.assertRaises(TypeError):
            Parser(["--to", 1])


class TestOption(TestCase):
    def testKeyIsCanonicalSpellingWithoutDashes(self):
        self.assertEqual(Option("--File", "-f").key, "file")
        self.assertEqual(Option("-o").key, "o")
        self.assertEqual(HELP.key, "help")

    def testAbsentOptionResolvesToNone(self):
        self.assertIsNone(Option("--to").getvalue(Parser(["--from", "python"])))

    def testFirstDeclaredSpellingWins(self):
        flag = Option("--file", "-f")
        self.assertEqual(flag.getvalue(Parser(["-f", "a.py", "--file", "b.py"])), "b.py")
        self.assertEqual(flag.getvalue(Parser(["-f", "a.py"])), "a.py")

    def testBooleanValues(self):
        flag = Option("--force", type=bool)
        self.assertIs(flag.getvalue(Parser(["--force"])), True)
        self.assertIs(flag.getvalue(Parser(["--force", "FALSE"])), False)
        self.assertIs(flag.getvalue(Parser(["--force", "True"])), True)

    def testNumericValues(self):
        self.assertEqual(Option("--count", type=int).getvalue(Parser(["--count", "12"])), 12)
        self.assertEqual(Option("--ratio", type=float).getvalue(Parser(["--ratio", "0.5"])), 0.5)

    def testConversionErrorCarriesContext(self):
        flag = Option("--force", "-F", type=bool)
        with self.assertRaises(ConversionError) as context:
            flag.getvalue(Parser(["-F", "maybe"]))
        fault = context.exception
        self.assertEqual(fault.message, "'maybe' is not a valid value for '-F'")
        self.assertEqual(fault.code, FaultCode.INVALID_VALUE)
        self.assertEqual(fault.options["input"], "-F")
        self.assertEqual(fault.options["value"], "maybe")

    def testImplicitTrueIsNotAnInteger(self):
        with self.assertRaises(ConversionError):
            Option("--count", type=int).getvalue(Parser(["--count"]))

    def testUnsupportedTypeRejected(self):
        with self.assertRaises(TypeError):
            Option("--items", type=list)

    def testInvalidNamesRejected(self):
        with self.assertRaises(TypeError):
            Option()
        with self.assertRaises(ValueError):
            Option("file")
        with self.assertRaises(ValueError):
            Option("--file", "--file")
        with self.assertRaises(TypeError):
            Option(1)

    def testDescriptionValidated(self):
        with self.assertRaises(ValueError):
            Option("--to", descr="   ")
        self.assertEqual(Option("--to", descr=" target ").descr, "target")
        self.assertIsNone(Option("--to").descr)

    def testRequiredIsCoercedToBool(self):
        self.assertIs(Option("--to", required=1).required, True)
        self.assertIs(Option("--to").required, False)

    def testFactoryMirrorsConstructor(self):
        flag = option("--to", "-t", descr="target")
        self.assertEqual(flag.names, ("--to", "-t"))
        self.assertIs(flag.type, str)

    def testRepresentation(self):
        self.assertEqual(
            repr(Option("--to")),
            "option(names=('--to',), type=<class 'str'>, descr=None, required=False)",
        )


if __name__ == "__main__":
    unittest.main()

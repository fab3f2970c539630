"""
Tests for the shared helpers in commandeer.utils.

Scope
- Unset: singleton identity, falsy semantics, representation, finality and
  PEP 604 unions in isinstance checks.
- coalesce: Unset replacement while preserving None and other falsy values.
- rename: decorator naming and its argument validation.
- mirror: read-only properties returning frozen snapshots.
"""
import copy
import unittest
from types import MappingProxyType
from unittest import TestCase

from commandeer.utils import *


class UnsetTest(TestCase):
    def testSingletonIdentity(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)

    def testRepresentation(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopySemantics(self):
        self.assertIs(copy.copy(Unset), Unset)

    def testCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType):
                pass

    def testUnionWithTypes(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("value", Unset | str))
        self.assertFalse(isinstance(1, str | Unset))


class HelpersTest(TestCase):
    def testCoalesceReplacesOnlyUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertEqual(coalesce("", "fallback"), "")

    def testRenameSetsNames(self):
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")
        self.assertEqual(function.__qualname__, "decorated")

    def testRenameValidatesArguments(self):
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename("name")(1)

    def testMirrorReturnsFrozenSnapshots(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")
            name = mirror("name")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._name = "holder"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.name, "holder")
        with self.assertRaises(AttributeError):
            holder.items = ()


if __name__ == "__main__":
    unittest.main()

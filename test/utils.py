"""
Tests for the internal helpers.

This module verifies:
- Unset: singleton identity, falsy semantics, representation, copy/pickle
  identity and finality.
- coalesce(): only Unset is replaced.
- rename(): function and decorator forms.
- palette(): host overrides through __main__.__styles__.
"""
import copy
import pickle
import sys
import unittest
from unittest import TestCase, mock

from replkit.utils import *


class UnsetTest(TestCase):

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())

    def testFalsyButDistinct(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, "")

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPicklePreservesIdentity(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalseyValuesArePreserved(self) -> None:
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce(0, "fallback"), 0)


class RenameTest(TestCase):

    def testFunctionForm(self) -> None:
        def f():
            pass

        self.assertIs(rename(f, "do_work"), f)
        self.assertEqual(f.__name__, "do_work")
        self.assertEqual(f.__qualname__, "do_work")

    def testDecoratorForm(self) -> None:
        @rename("do_work")
        def f():
            pass

        self.assertEqual(f.__name__, "do_work")

    def testRejectsNonStringName(self) -> None:
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)


class PaletteTest(TestCase):

    def testDefaultsAndMissingKeys(self) -> None:
        styles = palette({"prompt": "bold green"})
        self.assertEqual(styles["prompt"], "bold green")
        self.assertEqual(styles["unknown"], "")

    def testHostOverridesWin(self) -> None:
        with mock.patch.object(sys.modules["__main__"], "__styles__", {"prompt": "red"}, create=True):
            styles = palette({"prompt": "bold green"})
        self.assertEqual(styles["prompt"], "red")


if __name__ == "__main__":
    unittest.main()

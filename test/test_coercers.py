"""
Coercers module behavioral tests (primitives, combinators, adaptation).

Scope
- Validate primitive conversions (String, Number, Integer, Boolean, Choice).
- Validate combinators (Array, Validated) and converter wrapping.
- Validate coercer() adaptation of built-in types and callables.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import pathlib
import unittest
from unittest import TestCase

from schemacli import (
    Array,
    Boolean,
    Choice,
    Converter,
    ElementError,
    Integer,
    Number,
    String,
    Validated,
    coercer,
)


class TestPrimitives(TestCase):
    """Behavioral tests for primitive coercers."""

    def testStringPassesThrough(self):
        self.assertEqual(String()("abc"), "abc")
        self.assertEqual(String()(""), "")

    def testStringRejectsBareSwitch(self):
        with self.assertRaises(ValueError):
            String()(True)

    def testNumberKeepsIntegralLiteralsIntegral(self):
        self.assertEqual(Number()("5"), 5)
        self.assertIsInstance(Number()("5"), int)
        self.assertEqual(Number()("-3"), -3)

    def testNumberParsesDecimalsAndExponents(self):
        self.assertEqual(Number()("2.5"), 2.5)
        self.assertEqual(Number()("1e3"), 1000.0)

    def testNumberRejectsGarbageEmptyAndNaN(self):
        for raw in ("abc", "", "  ", "nan"):
            with self.subTest(raw=raw), self.assertRaises(ValueError):
                Number()(raw)

    def testNumberAcceptsOnlyAsciiDecimalNotation(self):
        for raw in ("1_000", "٣", "1_0.5", "inf", "0x10", "1e"):
            with self.subTest(raw=raw), self.assertRaises(ValueError):
                Number()(raw)
        self.assertEqual(Number()(".5"), 0.5)
        self.assertEqual(Number()("+7"), 7)

    def testNumberErrorNamesTheValue(self):
        with self.assertRaises(ValueError) as context:
            Number()("abc")
        self.assertEqual(str(context.exception), "expected a number, got 'abc'")

    def testIntegerRejectsDecimals(self):
        self.assertEqual(Integer()("12"), 12)
        with self.assertRaises(ValueError):
            Integer()("1.5")

    def testIntegerRejectsSeparatorsAndNonAsciiDigits(self):
        for raw in ("1_000", "٣", "١٢"):
            with self.subTest(raw=raw), self.assertRaises(ValueError):
                Integer()(raw)

    def testBooleanLiterals(self):
        for raw, expected in ((True, True), ("", True), ("true", True), ("1", True), ("YES", True),
                              ("false", False), ("0", False), ("Off", False)):
            with self.subTest(raw=raw):
                self.assertIs(Boolean()(raw), expected)

    def testBooleanRejectsOtherWords(self):
        with self.assertRaises(ValueError):
            Boolean()("maybe")

    def testBooleanIsAFlag(self):
        self.assertTrue(Boolean().flag)
        self.assertFalse(String().flag)


class TestChoice(TestCase):
    """Behavioral tests for enumerated values."""

    def testChoiceReturnsMatchingValue(self):
        self.assertEqual(Choice("json", "text")("json"), "json")

    def testChoiceMatchesStringFormOfNonStrings(self):
        self.assertEqual(Choice(1, 2)("2"), 2)

    def testChoiceRejectsUnknownValue(self):
        with self.assertRaises(ValueError) as context:
            Choice("json", "text")("xml")
        self.assertIn("invalid choice 'xml'", str(context.exception))

    def testChoiceRequiresUniqueValues(self):
        with self.assertRaises(TypeError):
            Choice()
        with self.assertRaises(ValueError):
            Choice("a", "a")

    def testChoiceDisplayAndSchema(self):
        choice = Choice("json", "text")
        self.assertEqual(choice.display, "json|text")
        self.assertEqual(choice.json_schema(), {"type": "string", "enum": ["json", "text"]})


class TestCombinators(TestCase):
    """Behavioral tests for Array, Validated and Converter."""

    def testArrayCoercesEveryElement(self):
        self.assertEqual(Array(int)(["1", "2"]), [1, 2])

    def testArrayWrapsSingleToken(self):
        self.assertEqual(Array(int)("3"), [3])

    def testArrayReportsFailingElement(self):
        with self.assertRaises(ElementError) as context:
            Array(int)(["1", "x"])
        self.assertEqual(context.exception.index, 1)
        self.assertEqual(context.exception.value, "x")

    def testArrayCannotNest(self):
        with self.assertRaises(TypeError):
            Array(Array())

    def testArrayDisplayAndSchema(self):
        self.assertEqual(Array(int).display, "int[]")
        self.assertTrue(Array().multiple)
        self.assertEqual(Array().json_schema(), {"type": "array", "items": {"type": "string"}})

    def testValidatedAppliesPredicate(self):
        positive = Validated(int, lambda value: value > 0)
        self.assertEqual(positive("3"), 3)
        with self.assertRaises(ValueError) as context:
            positive("0")
        self.assertEqual(str(context.exception), "value 0 is not allowed")

    def testValidatedDelegatesTraits(self):
        self.assertTrue(Validated(bool, lambda value: True).flag)
        self.assertTrue(Validated(Array(int), bool).multiple)
        self.assertEqual(Validated(int, bool).display, "int")

    def testConverterWrapsCallable(self):
        path = coercer(pathlib.Path)
        self.assertIsInstance(path, Converter)
        self.assertEqual(path("x"), pathlib.Path("x"))
        self.assertEqual(path.display, "path")

    def testConverterTurnsErrorsIntoValueError(self):
        def pair(raw):
            left, right = raw.split(":")
            return left, right

        with self.assertRaises(ValueError):
            coercer(pair)("abc")


class TestAdaptation(TestCase):
    """Behavioral tests for coercer()."""

    def testBuiltinsMapToPrimitives(self):
        self.assertIsInstance(coercer(str), String)
        self.assertIsInstance(coercer(int), Integer)
        self.assertIsInstance(coercer(float), Number)
        self.assertIsInstance(coercer(bool), Boolean)

    def testCoercerClassesAreInstantiated(self):
        self.assertEqual(coercer(String), String())

    def testInstancesPassThrough(self):
        choice = Choice("a")
        self.assertIs(coercer(choice), choice)

    def testNonCallableRejected(self):
        with self.assertRaises(TypeError):
            coercer(5)


if __name__ == "__main__":
    unittest.main()

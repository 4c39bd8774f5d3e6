"""
Tests for raw grammar normalization and grammar editing helpers.
"""

import re
import unittest

from syntax_styler.errors import GrammarError
from syntax_styler.grammar import (
    GrammarRule,
    SyntaxGrammar,
    extend_grammar,
    insert_before,
    normalize_grammar,
)


class TestGrammarRule(unittest.TestCase):
    """Test cases for GrammarRule."""

    def test_string_pattern_is_compiled(self):
        rule = GrammarRule(r"\d+", flags=re.I)
        self.assertIsInstance(rule.pattern, re.Pattern)
        self.assertEqual(rule.pattern.flags & re.I, re.I)

    def test_alias_forms(self):
        self.assertEqual(GrammarRule("a").alias, ())
        self.assertEqual(GrammarRule("a", alias="keyword").alias, ("keyword",))
        self.assertEqual(GrammarRule("a", alias=["x", "y"]).alias, ("x", "y"))

    def test_lookbehind_requires_group(self):
        with self.assertRaises(GrammarError):
            GrammarRule(r"#.*", lookbehind=True)

    def test_invalid_pattern(self):
        with self.assertRaises(GrammarError):
            GrammarRule(42)


class TestNormalizeGrammar(unittest.TestCase):
    """Test cases for normalize_grammar."""

    def test_rule_forms(self):
        grammar = normalize_grammar(
            {
                "plain": r"a",
                "compiled": re.compile(r"b"),
                "rule": {"pattern": r"(x)c", "lookbehind": True, "greedy": True, "alias": "alt"},
                "many": [r"d", {"pattern": r"e"}],
            }
        )
        self.assertEqual(grammar.keys(), ["plain", "compiled", "rule", "many"])
        rule = grammar["rule"][0]
        self.assertTrue(rule.lookbehind)
        self.assertTrue(rule.greedy)
        self.assertEqual(rule.alias, ("alt",))
        self.assertEqual(len(grammar["many"]), 2)

    def test_none_entries_are_skipped(self):
        grammar = normalize_grammar({"removed": None, "kept": r"x"})
        self.assertEqual(grammar.keys(), ["kept"])
        self.assertNotIn("removed", grammar)

    def test_rest_entries_follow_own_entries(self):
        base = {"a": r"x", "b": r"y"}
        grammar = normalize_grammar({"c": r"z", "a": r"w", "rest": base})
        self.assertEqual(grammar.keys(), ["c", "a", "b"])
        self.assertEqual(grammar["a"][0].pattern.pattern, "w")
        self.assertEqual(grammar["b"][0].pattern.pattern, "y")

    def test_cycles_are_preserved(self):
        raw = {"group": {"pattern": r"\(.*\)", "inside": None}}
        raw["group"]["inside"] = raw
        grammar = normalize_grammar(raw)
        self.assertIs(grammar["group"][0].inside, grammar)

    def test_rest_cycle_terminates(self):
        first = {"a": r"a"}
        second = {"b": r"b", "rest": first}
        first["rest"] = second
        grammar = normalize_grammar(first)
        self.assertEqual(grammar.keys(), ["a", "b"])

    def test_shared_memo_reuses_grammars(self):
        shared = {"word": r"\w+"}
        memo = {}
        first = normalize_grammar({"x": {"pattern": r"x", "inside": shared}}, memo)
        second = normalize_grammar({"y": {"pattern": r"y", "inside": shared}}, memo)
        self.assertIs(first["x"][0].inside, second["y"][0].inside)

    def test_shared_memo_with_temporary_dicts(self):
        memo = {}
        normalize_grammar({"x": r"x"}, memo)
        second = normalize_grammar({"y": r"y"}, memo)
        self.assertEqual(list(second.tokens), ["y"])

    def test_memo_entry_for_another_dict_is_ignored(self):
        raw = {"y": r"y"}
        stale = SyntaxGrammar()
        # Same id as `raw`, left behind by a dict that no longer exists
        memo = {id(raw): ({"x": r"x"}, stale)}
        grammar = normalize_grammar(raw, memo)
        self.assertIsNot(grammar, stale)
        self.assertEqual(list(grammar.tokens), ["y"])
        self.assertIs(memo[id(raw)][0], raw)

    def test_normalized_grammar_passes_through(self):
        grammar = SyntaxGrammar()
        self.assertIs(normalize_grammar(grammar), grammar)

    def test_invalid_grammars(self):
        with self.assertRaises(GrammarError):
            normalize_grammar(["not", "a", "dict"])
        with self.assertRaises(GrammarError):
            normalize_grammar({"bad": 5})
        with self.assertRaises(GrammarError):
            normalize_grammar({"bad": {"alias": "missing pattern"}})

    def test_missing_key_lookup(self):
        grammar = normalize_grammar({"a": r"a"})
        self.assertIsNone(grammar.get("b"))
        with self.assertRaises(KeyError):
            grammar["b"]


class TestExtendGrammar(unittest.TestCase):
    """Test cases for extend_grammar."""

    def test_override_keeps_position_and_appends_new(self):
        base = {"a": r"a", "b": r"b"}
        extended = extend_grammar(base, {"a": r"A", "c": r"c"})
        self.assertEqual(list(extended), ["a", "b", "c"])
        self.assertEqual(extended["a"], r"A")
        self.assertEqual(base, {"a": r"a", "b": r"b"})

    def test_clone_is_deep(self):
        base = {"string": {"pattern": r'"[^"]*"', "inside": {"escape": r"\\."}}}
        extended = extend_grammar(base, {})
        extended["string"]["inside"]["extra"] = r"x"
        self.assertNotIn("extra", base["string"]["inside"])

    def test_compiled_patterns_are_shared(self):
        pattern = re.compile(r"\d+")
        extended = extend_grammar({"number": pattern}, {})
        self.assertIs(extended["number"], pattern)

    def test_cycles_point_at_clone(self):
        base = {"group": {"pattern": r"\(\)", "inside": None}}
        base["group"]["inside"] = base
        extended = extend_grammar(base, {"extra": r"x"})
        self.assertIs(extended["group"]["inside"], extended)
        self.assertIs(base["group"]["inside"], base)


class TestInsertBefore(unittest.TestCase):
    """Test cases for insert_before."""

    def test_inserts_in_order(self):
        grammar = {"a": r"a", "c": r"c"}
        result = insert_before(grammar, "c", {"b1": r"b", "b2": r"B"})
        self.assertIs(result, grammar)
        self.assertEqual(list(grammar), ["a", "b1", "b2", "c"])

    def test_existing_key_is_moved(self):
        grammar = {"a": r"a", "b": r"b", "c": r"c"}
        insert_before(grammar, "b", {"c": r"C"})
        self.assertEqual(list(grammar), ["a", "c", "b"])
        self.assertEqual(grammar["c"], r"C")

    def test_references_see_the_change(self):
        inner = {"word": r"\w+"}
        outer = {"block": {"pattern": r"\{.*\}", "inside": inner}}
        insert_before(inner, "word", {"number": r"\d+"})
        self.assertEqual(list(outer["block"]["inside"]), ["number", "word"])

    def test_missing_key(self):
        with self.assertRaises(GrammarError):
            insert_before({"a": r"a"}, "missing", {"b": r"b"})


if __name__ == "__main__":
    unittest.main()

#!/usr/bin/env python3
"""
Integration tests for the highlight cache.

These tests verify that:
- Renderings are reused from memory and from disk
- Persistent entries survive across cache instances
- Clearing removes entries in memory and on disk
- Unreadable entries are ignored rather than served
"""

import os
import shutil
import tempfile
import unittest
from pathlib import Path

from syntax_styler import create_default_styler
from syntax_styler.cache import HighlightCache, acquire_lock, cache_key, release_lock
from syntax_styler.config import CACHE_ENTRIES_DIR
from syntax_styler.errors import UnsupportedLanguageError
from syntax_styler.styler import SyntaxStyler


class TestHighlightCache(unittest.TestCase):
    """Test the memory and disk layers of HighlightCache."""

    @classmethod
    def setUpClass(cls):
        cls.styler = create_default_styler()

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix="syntax_styler_cache_test_")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def entry_files(self):
        entries_dir = Path(self.test_dir) / CACHE_ENTRIES_DIR
        return sorted(entries_dir.glob("*.json")) if entries_dir.is_dir() else []

    def test_memory_hit(self):
        cache = HighlightCache(self.styler)
        first = cache.stylize("const x = 1;", "ts")
        second = cache.stylize("const x = 1;", "ts")
        self.assertEqual(first, second)
        self.assertEqual(first, self.styler.stylize("const x = 1;", "ts"))
        self.assertEqual(cache.stats()["hits"], 1)
        self.assertEqual(cache.stats()["misses"], 1)
        self.assertIsNone(cache.stats()["cache_dir"])

    def test_language_is_part_of_the_key(self):
        self.assertNotEqual(cache_key("js", "x"), cache_key("ts", "x"))
        cache = HighlightCache(self.styler)
        cache.stylize("null", "json")
        cache.stylize("null", "js")
        self.assertEqual(cache.stats()["misses"], 2)

    def test_persistent_entries(self):
        cache = HighlightCache(self.styler, cache_dir=self.test_dir)
        html = cache.stylize('{"a": 1}', "json")
        self.assertEqual(len(self.entry_files()), 1)

        # A styler without languages can only answer from disk
        reloaded = HighlightCache(SyntaxStyler(), cache_dir=self.test_dir)
        self.assertEqual(reloaded.stylize('{"a": 1}', "json"), html)
        self.assertEqual(reloaded.stats()["hits"], 1)
        with self.assertRaises(UnsupportedLanguageError):
            reloaded.stylize('{"b": 2}', "json")

    def test_cache_dir_from_environment(self):
        os.environ["SYNTAX_STYLER_CACHE_DIR"] = self.test_dir
        try:
            cache = HighlightCache(self.styler)
        finally:
            del os.environ["SYNTAX_STYLER_CACHE_DIR"]
        self.assertEqual(cache.stats()["cache_dir"], self.test_dir)

    def test_eviction(self):
        cache = HighlightCache(self.styler, max_entries=2)
        for text in ["a", "b", "c"]:
            cache.stylize(text, "md")
        self.assertEqual(cache.stats()["entries"], 2)
        self.assertIsNone(cache.get("md", "a"))
        self.assertIsNotNone(cache.get("md", "c"))

    def test_clear(self):
        cache = HighlightCache(self.styler, cache_dir=self.test_dir)
        cache.stylize("echo 1", "bash")
        cache.stylize("echo 2", "bash")
        self.assertEqual(cache.clear(), 2)
        self.assertEqual(self.entry_files(), [])
        self.assertEqual(cache.stats()["entries"], 0)
        self.assertIsNone(cache.get("bash", "echo 1"))

    def test_clear_without_directory(self):
        cache = HighlightCache(self.styler)
        cache.stylize("x", "md")
        self.assertEqual(cache.clear(), 0)
        self.assertEqual(cache.stats()["entries"], 0)

    def test_unreadable_entry_is_ignored(self):
        cache = HighlightCache(self.styler, cache_dir=self.test_dir)
        cache.put("css", "a {}", "<stale>")
        path = self.entry_files()[0]
        path.write_text("{not json", encoding="utf-8")

        reloaded = HighlightCache(self.styler, cache_dir=self.test_dir)
        self.assertIsNone(reloaded.get("css", "a {}"))
        self.assertEqual(reloaded.stylize("a {}", "css"), self.styler.stylize("a {}", "css"))

    def test_non_object_entry_is_ignored(self):
        cache = HighlightCache(self.styler, cache_dir=self.test_dir)
        cache.put("json", "[1]", "<stale>")
        self.entry_files()[0].write_text("[1, 2]", encoding="utf-8")

        reloaded = HighlightCache(self.styler, cache_dir=self.test_dir)
        self.assertIsNone(reloaded.get("json", "[1]"))
        self.assertEqual(reloaded.stylize("[1]", "json"), self.styler.stylize("[1]", "json"))


class TestLocks(unittest.TestCase):
    """Test the file lock helpers used for cache entries."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix="syntax_styler_lock_test_")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_acquire_creates_parent(self):
        target = os.path.join(self.test_dir, "nested", "entry.json")
        lock = acquire_lock(target)
        try:
            self.assertTrue(lock.is_locked)
            self.assertTrue(os.path.isdir(os.path.dirname(target)))
        finally:
            release_lock(lock)
        self.assertFalse(lock.is_locked)

    def test_release_none(self):
        release_lock(None)


if __name__ == "__main__":
    unittest.main()

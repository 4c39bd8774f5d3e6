#!/usr/bin/env python3
"""
Integration tests for the syntax-styler command line tool.
"""

import io
import json
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from syntax_styler import cli


class TestCli(unittest.TestCase):
    """Run cli.main against files in a temporary directory."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix="syntax_styler_cli_test_")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def write(self, name, content):
        path = os.path.join(self.test_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def run_cli(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = cli.main(list(argv))
        return code, stdout.getvalue(), stderr.getvalue()

    def test_stylize_by_extension(self):
        path = self.write("data.json", '{"a":1}')
        code, out, _ = self.run_cli("stylize", path)
        self.assertEqual(code, 0)
        self.assertIn('<span class="token_property">"a"</span>', out)
        self.assertIn('<span class="token_number">1</span>', out)

    def test_stylize_with_lang_override(self):
        path = self.write("script.txt", "echo hi")
        code, out, _ = self.run_cli("s", path, "--lang", "sh")
        self.assertEqual(code, 0)
        self.assertIn('<span class="token_builtin">echo</span>', out)

    def test_stylize_ranges(self):
        path = self.write("app.ts", "const x = 1;")
        code, out, _ = self.run_cli("stylize", path, "--mode", "ranges")
        self.assertEqual(code, 0)
        layers = {layer["name"]: layer["ranges"] for layer in json.loads(out)}
        self.assertEqual(layers["token_keyword"], [[0, 5]])
        self.assertEqual(layers["token_number"], [[10, 11]])

    def test_stylize_to_output_file(self):
        path = self.write("page.html", "<p>x</p>")
        output = os.path.join(self.test_dir, "page.out.html")
        code, out, _ = self.run_cli("stylize", path, "-o", output)
        self.assertEqual(code, 0)
        self.assertEqual(out, "")
        with open(output, "r", encoding="utf-8") as f:
            self.assertIn('class="token_tag"', f.read())

    def test_stylize_with_cache_dir(self):
        path = self.write("style.css", "a { color: red; }")
        cache_dir = os.path.join(self.test_dir, "cache")
        first = self.run_cli("stylize", path, "--cache-dir", cache_dir)
        second = self.run_cli("stylize", path, "--cache-dir", cache_dir)
        self.assertEqual(first[:2], second[:2])
        self.assertTrue(os.listdir(os.path.join(cache_dir, "entries")))

    def test_stylize_stdin(self):
        with mock.patch("sys.stdin", io.StringIO("# note")):
            code, out, _ = self.run_cli("stylize", "-", "--lang", "bash")
        self.assertEqual(code, 0)
        self.assertIn('<span class="token_comment"># note</span>', out)

    def test_tokens(self):
        path = self.write("data.json", "[null]")
        code, out, _ = self.run_cli("tokens", path)
        self.assertEqual(code, 0)
        tokens = json.loads(out)
        self.assertEqual(tokens[1], {"type": "null", "alias": ["keyword"], "length": 4, "content": "null"})

    def test_langs(self):
        code, out, _ = self.run_cli("--verbose", "langs")
        self.assertEqual(code, 0)
        self.assertIn("markup", out)
        self.assertIn("typescript", out)
        self.assertIn("bash", out)

    def test_unknown_extension(self):
        path = self.write("notes.txt", "text")
        code, _, err = self.run_cli("stylize", path)
        self.assertEqual(code, 1)
        self.assertIn("Use --lang", err)

    def test_unknown_language(self):
        path = self.write("notes.txt", "text")
        code, _, err = self.run_cli("tokens", path, "--lang", "cobol")
        self.assertEqual(code, 1)
        self.assertIn("cobol", err)

    def test_missing_file(self):
        code, _, err = self.run_cli("stylize", os.path.join(self.test_dir, "missing.ts"))
        self.assertEqual(code, 1)
        self.assertIn("Error", err)

    def test_missing_command(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main([])


if __name__ == "__main__":
    unittest.main()

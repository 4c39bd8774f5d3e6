#!/usr/bin/env python3
"""
Integration tests for the syntax styler MCP server tools.

Network access is replaced with an httpx.MockTransport, so the URL tool runs
against canned responses.
"""

import asyncio
import json
import unittest
from unittest import mock

import httpx

from syntax_styler import server
from syntax_styler.errors import GrammarError


def serve(routes):
    """Build a mock transport answering each path with (status, body)."""

    def handler(request: httpx.Request) -> httpx.Response:
        status, body = routes.get(request.url.path, (404, "not found"))
        return httpx.Response(status, text=body)

    return httpx.MockTransport(handler)


class TestStylizeTools(unittest.TestCase):
    """Test the text based tools."""

    def test_stylize_code_html(self):
        result = asyncio.run(server.stylize_code('{"a":1}', "json"))
        self.assertIn('<span class="token_property">"a"</span>', result)

    def test_stylize_code_ranges(self):
        result = asyncio.run(server.stylize_code("const x = 1;", "typescript", mode="ranges"))
        layers = json.loads(result)
        self.assertEqual([layer["name"] for layer in layers][-1], "token_number")
        priorities = [layer["priority"] for layer in layers]
        self.assertEqual(priorities, sorted(priorities))

    def test_stylize_code_uses_cache(self):
        asyncio.run(server.stylize_code("echo hi", "bash"))
        asyncio.run(server.stylize_code("echo hi", "bash"))
        self.assertEqual(server.highlight_cache.stats()["hits"], 1)

    def test_unknown_language(self):
        result = asyncio.run(server.stylize_code("x", "cobol"))
        self.assertTrue(result.startswith("Error: Language not supported: 'cobol'"))
        self.assertIn("list_languages", result)

    def test_unknown_mode(self):
        result = asyncio.run(server.stylize_code("x", "md", mode="svg"))
        self.assertTrue(result.startswith("Error: Unknown mode 'svg'"))

    def test_input_limit(self):
        with mock.patch.object(server, "MAX_INPUT_LENGTH", 5):
            result = asyncio.run(server.stylize_code("echo hello", "bash"))
            self.assertEqual(result, "Error: Input is 10 characters, limit is 5")
            result = asyncio.run(server.tokenize_code("echo hello", "bash"))
            self.assertTrue(result.startswith("Error: Input is 10 characters"))

    def test_tokenize_code(self):
        result = json.loads(asyncio.run(server.tokenize_code("const x = 1;", "ts")))
        self.assertEqual(result[0], {"type": "keyword", "alias": [], "length": 5, "content": "const"})
        self.assertEqual(result[1], " x = ")

    def test_tokenize_unknown_language(self):
        result = asyncio.run(server.tokenize_code("x", "cobol"))
        self.assertTrue(result.startswith("Error:"))

    def test_tokenize_grammar_error(self):
        with mock.patch.object(
            server.syntax_styler_global, "tokenize", side_effect=GrammarError("Rule for token 'x' has no pattern")
        ):
            result = asyncio.run(server.tokenize_code("x", "ts"))
        self.assertEqual(result, "Error: Rule for token 'x' has no pattern")

    def test_list_languages(self):
        languages = json.loads(asyncio.run(server.list_languages()))
        self.assertEqual(list(languages)[0], "markup")
        self.assertIn("html", languages["markup"])
        self.assertEqual(languages["ts"], ["typescript"])
        self.assertEqual(languages["bash"], ["sh", "shell"])
        self.assertEqual(languages["json"], [])


class TestStylizeUrl(unittest.TestCase):
    """Test fetching and highlighting remote sources."""

    def test_language_from_extension(self):
        server.http_transport = serve({"/src/app.ts": (200, "const x = 1;")})
        result = asyncio.run(server.stylize_url("https://example.com/src/app.ts"))
        self.assertIn('<span class="token_keyword">const</span>', result)

    def test_explicit_language(self):
        server.http_transport = serve({"/run": (200, "echo hi")})
        result = asyncio.run(server.stylize_url("https://example.com/run", lang="bash"))
        self.assertIn('<span class="token_builtin">echo</span>', result)

    def test_unknown_extension(self):
        result = asyncio.run(server.stylize_url("https://example.com/notes.txt"))
        self.assertTrue(result.startswith("Error: Could not determine the language"))

    def test_unsupported_language(self):
        result = asyncio.run(server.stylize_url("https://example.com/app.cob", lang="cobol"))
        self.assertTrue(result.startswith("Error: Language not supported"))

    def test_invalid_url(self):
        result = asyncio.run(server.stylize_url("not a url", lang="ts"))
        self.assertTrue(result.startswith("Error: Invalid URL format"))

    def test_http_error(self):
        server.http_transport = serve({})
        result = asyncio.run(server.stylize_url("https://example.com/missing.json"))
        self.assertEqual(result, "Error fetching https://example.com/missing.json: HTTP Error 404: Not Found")

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        server.http_transport = httpx.MockTransport(handler)
        result = asyncio.run(server.stylize_url("https://example.com/slow.css", timeout=3))
        self.assertIn("Request timed out after 3 seconds", result)

    def test_fetch_source_metadata(self):
        server.http_transport = serve({"/data.json": (200, "[1]")})
        content, status, metadata = asyncio.run(server.fetch_source("https://example.com/data.json"))
        self.assertEqual(content, "[1]")
        self.assertEqual(status, 200)
        self.assertEqual(metadata["final_url"], "https://example.com/data.json")
        self.assertEqual(metadata["size"], 3)
        self.assertIsNone(metadata["error"])


if __name__ == "__main__":
    unittest.main()

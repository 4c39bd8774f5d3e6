"""
JSON grammar. Comments are tolerated so JSONC-style files highlight too.
"""

import re

from ..grammar import RawGrammar
from ..styler import SyntaxStyler


def add_grammar_json(syntax_styler: SyntaxStyler) -> RawGrammar:
    grammar_json: RawGrammar = {
        "property": {
            "pattern": r'(^|[^\\])"(?:\\.|[^\\"\r\n])*"(?=\s*:)',
            "lookbehind": True,
            "greedy": True,
        },
        "string": {
            "pattern": r'(^|[^\\])"(?:\\.|[^\\"\r\n])*"(?!\s*:)',
            "lookbehind": True,
            "greedy": True,
        },
        "comment": {"pattern": r"\/\/.*|\/\*[\s\S]*?(?:\*\/|\Z)", "greedy": True},
        "number": {"pattern": r"-?\b\d+(?:\.\d+)?(?:e[+-]?\d+)?\b", "flags": re.I},
        "punctuation": r"[{}\[\],:]",
        "boolean": r"\b(?:false|true)\b",
        "null": {"pattern": r"\bnull\b", "alias": "keyword"},
    }
    syntax_styler.add_lang("json", grammar_json)
    return grammar_json

"""
CSS grammar, also embedded in markup ``<style>`` elements and ``style`` attributes.
"""

import re

from ..grammar import RawGrammar
from ..styler import SyntaxStyler
from .markup import grammar_markup_add_attribute, grammar_markup_add_inlined

STRING = r"""(?:"(?:\\(?:\r\n|[\s\S])|[^"\\\r\n])*"|'(?:\\(?:\r\n|[\s\S])|[^'\\\r\n])*')"""


def add_grammar_css(syntax_styler: SyntaxStyler) -> RawGrammar:
    grammar_css: RawGrammar = {
        "comment": r"\/\*[\s\S]*?\*\/",
        "atrule": {
            "pattern": r"""@[\w-](?:[^;{\s"']|\s+(?!\s)|""" + STRING + r""")*?(?:;|(?=\s*\{))""",
            "inside": {
                "rule": r"^@[\w-]+",
                "selector_function_argument": {
                    "pattern": r"""(\bselector\s*\(\s*(?![\s)]))(?:[^()\s]|\s+(?![\s)])|\((?:[^()]|\([^()]*\))*\))+(?=\s*\))""",
                    "lookbehind": True,
                    "alias": "selector",
                },
                "keyword": {"pattern": r"(^|[^\w-])(?:and|not|only|or)(?![\w-])", "lookbehind": True},
            },
        },
        "url": {
            "pattern": re.compile(r"""\burl\((?:""" + STRING + r"""|(?:[^\\\r\n()"']|\\[\s\S])*)\)""", re.I),
            "greedy": True,
            "inside": {
                "function": re.compile(r"^url", re.I),
                "punctuation": r"^\(|\)\Z",
                "string": {"pattern": "^" + STRING + r"\Z", "alias": "url"},
            },
        },
        "selector": {
            "pattern": r"""(^|[{}\s])[^{}\s](?:[^{};"'\s]|\s+(?![\s{])|""" + STRING + r""")*(?=\s*\{)""",
            "lookbehind": True,
        },
        "string": {"pattern": STRING, "greedy": True},
        "property": {
            "pattern": re.compile(
                r"(^|[^-\w\xA0-\uFFFF])(?!\s)[-_a-z\xA0-\uFFFF](?:(?!\s)[-\w\xA0-\uFFFF])*(?=\s*:)", re.I
            ),
            "lookbehind": True,
        },
        "important": re.compile(r"!important\b", re.I),
        "function": {"pattern": re.compile(r"(^|[^-a-z0-9])[-a-z0-9]+(?=\()", re.I), "lookbehind": True},
        "punctuation": r"[(){};:,]",
    }
    # At-rule preludes may contain any other CSS token
    grammar_css["atrule"]["inside"]["rest"] = grammar_css

    syntax_styler.add_lang("css", grammar_css)

    if syntax_styler.has_lang("markup"):
        grammar_markup_add_inlined(syntax_styler, "style", "css")
        grammar_markup_add_attribute(syntax_styler, "style", "css")

    return grammar_css

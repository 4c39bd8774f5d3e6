"""
Markdown grammar.

Fenced code blocks are tokenized with the grammar named by their info string,
for every language registered before markdown and for markdown itself, so
fences may nest when the outer fence uses more backticks. Everything else
falls through to markup, since markdown documents may contain raw HTML.
"""

import re
from typing import Any, Dict, List, Optional

from ..grammar import RawGrammar
from ..styler import SyntaxStyler

FENCE_CONTENT = r"(^`{3,}[^\n]*\n)[\s\S]+?(?=\n`{3,}[ \t]*\Z)"


def fenced_code_rule(
    names: Optional[List[str]] = None, lang: Optional[str] = None, lang_grammar: Any = None
) -> Dict[str, Any]:
    """
    Build a rule matching fenced code blocks.

    Args:
        names: Info strings selecting this rule; any info string when None
        lang: Canonical name of the language of the fence content
        lang_grammar: Grammar for the fence content; left plain when None

    Returns:
        Raw rule dict
    """
    if names:
        info = "(?:" + "|".join(re.escape(name) for name in sorted(names, key=len, reverse=True)) + ")"
    else:
        info = r"[^`\n]*?"

    inside: RawGrammar = {}
    if lang_grammar is not None:
        inside[f"lang_{lang}"] = {"pattern": FENCE_CONTENT, "lookbehind": True, "inside": lang_grammar}
    else:
        inside["code_block"] = {"pattern": FENCE_CONTENT, "lookbehind": True}
    inside["code_punctuation"] = {"pattern": r"^`{3,}|`{3,}(?=[ \t]*\Z)", "alias": "punctuation"}
    inside["code_lang"] = r"^[^\s`]+"

    return {
        "pattern": r"^(`{3,})" + info + r"[ \t]*\n(?:[\s\S]*?\n)?\1[ \t]*$",
        "flags": re.M,
        "greedy": True,
        "inside": inside,
    }


def add_grammar_markdown(syntax_styler: SyntaxStyler) -> RawGrammar:
    grammar_markup = syntax_styler.get_raw_lang("markup")

    grammar_md: RawGrammar = {
        # Filled below, once every embeddable grammar is known
        "fenced_code": [],
        "heading": {
            "pattern": r"^#{1,6}[ \t][^\n]*",
            "flags": re.M,
            "inside": {"heading_punctuation": {"pattern": r"^#{1,6}", "alias": "punctuation"}},
        },
        "blockquote": {
            "pattern": r"^>[^\n]*",
            "flags": re.M,
            "inside": {"blockquote_punctuation": {"pattern": r"^>", "alias": "punctuation"}},
        },
        "list": {
            "pattern": r"(^[ \t]*)(?:[-*+]|\d+\.)(?=[ \t])",
            "flags": re.M,
            "lookbehind": True,
            "alias": "punctuation",
        },
        "inline_code": {
            "pattern": r"(^|[^`\\])`[^`\n]+`(?!`)",
            "lookbehind": True,
            "greedy": True,
            "inside": {"code_punctuation": {"pattern": r"^`|`\Z", "alias": "punctuation"}},
        },
        "bold": {
            "pattern": r"\*\*(?!\s)(?:(?!\*\*)[^\n])+?(?<!\s)\*\*|__(?!\s)(?:(?!__)[^\n])+?(?<!\s)__",
            "inside": {"punctuation": r"^(?:\*\*|__)|(?:\*\*|__)\Z"},
        },
        "italic": [
            {
                "pattern": r"(^|[^\w*])\*(?!\s)[^*\n]+?(?<!\s)\*(?![\w*])",
                "lookbehind": True,
                "inside": {"punctuation": r"^\*|\*\Z"},
            },
            {
                "pattern": r"(^|[^\w_])_(?!\s)[^_\n]+?(?<!\s)_(?![\w_])",
                "lookbehind": True,
                "inside": {"punctuation": r"^_|_\Z"},
            },
        ],
        "strikethrough": {
            "pattern": r"~~(?!\s)[^~\n]+?(?<!\s)~~",
            "inside": {"punctuation": r"^~~|~~\Z"},
        },
        "link": {
            "pattern": r"\[[^\]\n]*\]\([^)\s]*\)",
            "inside": {
                "link_text_wrapper": {
                    "pattern": r"^\[[^\]]*\]",
                    "inside": {
                        "link_punctuation": {"pattern": r"^\[|\]\Z", "alias": "punctuation"},
                        "link_text": r"[\s\S]+",
                    },
                },
                "url": {
                    "pattern": r"\([^)]*\)\Z",
                    "inside": {"link_punctuation": {"pattern": r"^\(|\)\Z", "alias": "punctuation"}},
                },
            },
        },
        "rest": grammar_markup,
    }
    # Quoted lines may hold any other markdown
    grammar_md["blockquote"]["inside"]["rest"] = grammar_md

    aliases = syntax_styler.aliases
    fenced_code: List[Dict[str, Any]] = []
    for name in syntax_styler.lang_names():
        names = [name] + [alias for alias, canonical in aliases.items() if canonical == name]
        fenced_code.append(fenced_code_rule(names, name, syntax_styler.get_raw_lang(name)))
    fenced_code.append(fenced_code_rule(["md", "markdown"], "md", grammar_md))
    fenced_code.append(fenced_code_rule())
    grammar_md["fenced_code"] = fenced_code

    syntax_styler.add_lang("md", grammar_md, ["markdown"])
    return grammar_md

"""
Markup (HTML/XML) grammar.

Also provides the helpers other languages use to embed themselves in markup:
``grammar_markup_add_inlined`` for element content such as ``<style>`` and
``<script>``, and ``grammar_markup_add_attribute`` for attribute values such
as ``style=""`` and ``onclick=""``.

Based on Prism (https://github.com/PrismJS/prism) by Lea Verou, MIT license.
"""

import re
from typing import Any, Dict

from ..grammar import RawGrammar
from ..styler import SyntaxStyler

TAG_PATTERN = (
    r"""<\/?(?!\d)[^\s>\/=$<%]+"""
    r"""(?:\s(?:\s*[^\s>\/=]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s'">=]+(?=[\s>]))|(?=[\s/>])))+)?\s*\/?>"""
)


def inlined_content_rule(tag_name: str, lang: str, lang_grammar: Any) -> Dict[str, Any]:
    """
    Build a rule matching the content of ``<tag_name>`` elements.

    The opening tag is lookbehind context, so it is left for the ``tag`` rule,
    and the content is tokenized with ``lang_grammar``. CDATA sections inside
    the content keep their delimiters classed as ``cdata``.
    """
    included_cdata_inside = {
        f"lang_{lang}": {
            "pattern": re.compile(r"(^<!\[CDATA\[)[\s\S]+?(?=\]\]>\Z)", re.I),
            "lookbehind": True,
            "inside": lang_grammar,
        },
        "cdata": re.compile(r"^<!\[CDATA\[|\]\]>\Z", re.I),
    }
    inside = {
        "included_cdata": {
            "pattern": re.compile(r"<!\[CDATA\[[\s\S]*?\]\]>", re.I),
            "inside": included_cdata_inside,
        },
        f"lang_{lang}": {"pattern": r"[\s\S]+", "inside": lang_grammar},
    }
    pattern = r"(<__[^>]*>)(?:<!\[CDATA\[(?:[^\]]|\](?!\]>))*\]\]>|(?!<!\[CDATA\[)[\s\S])*?(?=<\/__>)"
    return {
        "pattern": re.compile(pattern.replace("__", re.escape(tag_name)), re.I),
        "lookbehind": True,
        "greedy": True,
        "inside": inside,
    }


def grammar_markup_add_inlined(syntax_styler: SyntaxStyler, tag_name: str, lang: str) -> None:
    """Embed a registered language in the content of ``tag_name`` elements."""
    lang_grammar = syntax_styler.get_raw_lang(lang)
    syntax_styler.insert_before(
        "markup", "cdata", {tag_name: inlined_content_rule(tag_name, lang, lang_grammar)}
    )


def grammar_markup_add_attribute(syntax_styler: SyntaxStyler, attr_name: str, lang: str) -> None:
    """
    Embed a registered language in the values of matching attributes.

    Args:
        syntax_styler: Styler holding both grammars
        attr_name: Regex source matching the attribute names
        lang: Name of the embedded language
    """
    grammar_markup = syntax_styler.get_raw_lang("markup")
    lang_grammar = syntax_styler.get_raw_lang(lang)
    grammar_markup["tag"]["inside"]["special_attr"].append(
        {
            "pattern": re.compile(
                r"""(^|["'\s])(?:""" + attr_name + r""")\s*=\s*(?:"[^"]*"|'[^']*'|[^\s'">=]+(?=[\s>]))""",
                re.I,
            ),
            "lookbehind": True,
            "inside": {
                "attr_name": r"^[^\s=]+",
                "attr_value": {
                    "pattern": r"=[\s\S]+",
                    "inside": {
                        "value": {
                            "pattern": r"""(^=\s*(["']|(?!["'])))\S[\s\S]*(?=\2\Z)""",
                            "lookbehind": True,
                            "alias": [lang, f"lang_{lang}"],
                            "inside": lang_grammar,
                        },
                        "punctuation": [
                            {"pattern": r"^=", "alias": "attr_equals"},
                            {"pattern": r"""["']""", "alias": "attr_quote"},
                        ],
                    },
                },
            },
        }
    )
    syntax_styler.invalidate()


def add_grammar_markup(syntax_styler: SyntaxStyler) -> RawGrammar:
    entity = [
        {"pattern": re.compile(r"&[\da-z]{1,8};", re.I), "alias": "named_entity"},
        re.compile(r"&#x?[\da-f]{1,8};", re.I),
    ]

    grammar_markup: RawGrammar = {
        "comment": {"pattern": r"<!--(?:(?!<!--)[\s\S])*?-->", "greedy": True},
        "processing_instruction": {"pattern": r"<\?[\s\S]+?\?>", "greedy": True},
        "doctype": {
            "pattern": re.compile(
                r"""<!DOCTYPE(?:[^>"'\[\]]|"[^"]*"|'[^']*')+"""
                r"""(?:\[(?:[^<"'\]]|"[^"]*"|'[^']*'|<(?!!--)|<!--(?:[^-]|-(?!->))*-->)*\]\s*)?>""",
                re.I,
            ),
            "greedy": True,
            "inside": {
                # `inside` wired below: the internal subset is markup again
                "internal_subset": {
                    "pattern": r"(^[^\[]*\[)[\s\S]+(?=\]>\Z)",
                    "lookbehind": True,
                    "greedy": True,
                    "inside": None,
                },
                "string": {"pattern": r""""[^"]*"|'[^']*'""", "greedy": True},
                "punctuation": r"^<!|>\Z|[\[\]]",
                "doctype_tag": re.compile(r"^DOCTYPE", re.I),
                "name": r"""[^\s<>'"]+""",
            },
        },
        "cdata": {"pattern": re.compile(r"<!\[CDATA\[[\s\S]*?\]\]>", re.I), "greedy": True},
        "tag": {
            "pattern": TAG_PATTERN,
            "greedy": True,
            "inside": {
                "tag": {
                    "pattern": r"^<\/?[^\s>\/]+",
                    "inside": {
                        "punctuation": {"pattern": r"^<\/?", "alias": "tag_punctuation"},
                        "namespace": r"^[^\s>\/:]+:",
                    },
                },
                "special_attr": [],
                "attr_value": {
                    "pattern": r"""=\s*(?:"[^"]*"|'[^']*'|[^\s'">=]+)""",
                    "inside": {
                        "punctuation": [
                            {"pattern": r"^=", "alias": "attr_equals"},
                            {"pattern": r"""^(\s*)["']|["']\Z""", "lookbehind": True, "alias": "attr_quote"},
                        ],
                        "entity": entity,
                    },
                },
                "punctuation": {"pattern": r"\/?>", "alias": "tag_punctuation"},
                "attr_name": {"pattern": r"[^\s>\/]+", "inside": {"namespace": r"^[^\s>\/:]+:"}},
            },
        },
        "entity": entity,
    }
    grammar_markup["doctype"]["inside"]["internal_subset"]["inside"] = grammar_markup

    syntax_styler.add_lang("markup", grammar_markup, ["html", "mathml", "svg", "xml", "ssml", "atom", "rss"])
    return grammar_markup

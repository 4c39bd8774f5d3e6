"""
JavaScript grammar, extending the C-like base.

Registered as ``js`` with the alias ``javascript``, and embedded in markup
``<script>`` elements and ``on*`` event attributes.
"""

import re

from ..grammar import RawGrammar, extend_grammar, insert_before
from ..styler import SyntaxStyler
from .markup import grammar_markup_add_attribute, grammar_markup_add_inlined

IDENT_PART = r"(?:(?!\s)[$\w\xA0-\uFFFF])*"
IDENT = r"(?!\s)[_$a-zA-Z\xA0-\uFFFF]" + IDENT_PART

# Up to two levels of nested braces inside `${...}`
INTERPOLATION = r"\$\{(?:[^{}]|\{(?:[^{}]|\{[^}]*\})*\})+\}"

NUMBER = (
    r"(^|[^\w$])(?:NaN|Infinity"
    r"|0[bB][01]+(?:_[01]+)*n?"
    r"|0[oO][0-7]+(?:_[0-7]+)*n?"
    r"|0[xX][\dA-Fa-f]+(?:_[\dA-Fa-f]+)*n?"
    r"|\d+(?:_\d+)*n"
    r"|(?:\d+(?:_\d+)*(?:\.(?:\d+(?:_\d+)*)?)?|\.\d+(?:_\d+)*)(?:[Ee][+-]?\d+(?:_\d+)*)?)(?![\w$])"
)

# A lone `=` is plain text; comparisons and compound assignments are operators
OPERATOR = r"--|\+\+|\*\*=?|=>|&&=?|\|\|=?|[!=]==?|<<=?|>>>?=?|[-+*/%&|^<>]=?|!|\.{3}|\?\?=?|\?\.?|[~:]"

EVENT_ATTRIBUTES = (
    r"on(?:abort|blur|change|click|composition(?:end|start|update)|dblclick|error|focus(?:in|out)?"
    r"|key(?:down|up)|load|mouse(?:down|enter|leave|move|out|over|up)|reset|resize|scroll|select"
    r"|slotchange|submit|unload|wheel)"
)


def add_grammar_js(syntax_styler: SyntaxStyler) -> RawGrammar:
    grammar_clike = syntax_styler.get_raw_lang("clike")

    grammar_js = extend_grammar(
        grammar_clike,
        {
            "class_name": [
                {
                    "pattern": r"(\b(?:class|extends|implements|instanceof|interface|new)\s+)[\w.\\]+",
                    "lookbehind": True,
                    "inside": {"punctuation": r"[.\\]"},
                },
                {
                    "pattern": r"(^|[^$\w\xA0-\uFFFF])(?!\s)[_$A-Z\xA0-\uFFFF]"
                    + IDENT_PART
                    + r"(?=\.(?:constructor|prototype))",
                    "lookbehind": True,
                },
            ],
            "keyword": [
                {"pattern": r"((?:^|\})\s*)catch\b", "lookbehind": True},
                {
                    "pattern": r"(^|[^.]|\.\.\.\s*)\b(?:as|assert(?=\s*\{)"
                    r"|async(?=\s*(?:function\b|\(|[$\w\xA0-\uFFFF]|\Z))|await|break|case|class|const"
                    r"|continue|debugger|default|delete|do|else|enum|export|extends|finally(?=\s*(?:\{|\Z))"
                    r"|for|from(?=\s*(?:['\"]|\Z))|function|(?:get|set)(?=\s*(?:[#\[$\w\xA0-\uFFFF]|\Z))"
                    r"|if|implements|import|in|instanceof|interface|let|new|null|of|package|private|protected"
                    r"|public|return|static|super|switch|this|throw|try|typeof|undefined|var|void|while|with"
                    r"|yield)\b",
                    "lookbehind": True,
                },
            ],
            "function": r"#?" + IDENT + r"(?=\s*(?:\.\s*(?:apply|bind|call)\s*)?\()",
            "number": {"pattern": NUMBER, "lookbehind": True},
            "operator": OPERATOR,
        },
    )

    insert_before(
        grammar_js,
        "keyword",
        {
            "regex": {
                "pattern": r"""((?:^|[^$\w\xA0-\uFFFF."'\])\s]|\b(?:return|yield))\s*)"""
                r"""\/(?:\[(?:[^\]\\\r\n]|\\.)*\]|\\.|[^/\\\[\r\n])+\/[dgimyusv]{0,8}"""
                r"""(?=(?:\s|\/\*(?:[^*]|\*(?!\/))*\*\/)*(?:\Z|[\r\n,.;:})\]]|\/\/))""",
                "lookbehind": True,
                "greedy": True,
                "inside": {
                    "regex_source": {
                        "pattern": r"^(\/)[\s\S]+(?=\/[a-z]*\Z)",
                        "lookbehind": True,
                        "alias": "lang_regex",
                    },
                    "regex_delimiter": r"^\/|\/\Z",
                    "regex_flags": r"^[a-z]+\Z",
                },
            },
            "function_variable": {
                "pattern": r"#?"
                + IDENT
                + r"(?=\s*[=:]\s*(?:async\s*)?(?:\bfunction\b|(?:\((?:[^()]|\([^()]*\))*\)|"
                + IDENT
                + r")\s*=>))",
                "alias": "function",
            },
            "constant": r"\b[A-Z](?:[A-Z_]|\dx?)*\b",
        },
    )

    insert_before(
        grammar_js,
        "string",
        {
            "hashbang": {"pattern": r"^#!.*", "greedy": True, "alias": "comment"},
            "template_string": {
                "pattern": r"`(?:\\[\s\S]|" + INTERPOLATION + r"|(?!\$\{)[^\\`])*`",
                "greedy": True,
                "inside": {
                    "template_punctuation": {"pattern": r"^`|`\Z", "alias": "string"},
                    "interpolation": {
                        "pattern": r"((?:^|[^\\])(?:\\{2})*)" + INTERPOLATION,
                        "lookbehind": True,
                        "inside": {
                            "interpolation_punctuation": {"pattern": r"^\$\{|\}\Z", "alias": "punctuation"},
                            "rest": grammar_js,
                        },
                    },
                    "string": r"[\s\S]+",
                },
            },
            "string_property": {
                "pattern": r"""((?:^|[,{])[ \t]*)(["'])(?:\\(?:\r\n|[\s\S])|(?!\2)[^\\\r\n])*\2(?=\s*:)""",
                "flags": re.M,
                "lookbehind": True,
                "greedy": True,
                "alias": "property",
            },
        },
    )

    insert_before(
        grammar_js,
        "operator",
        {
            "literal_property": {
                "pattern": r"((?:^|[,{])[ \t]*)" + IDENT + r"(?=\s*:)",
                "flags": re.M,
                "lookbehind": True,
                "alias": "property",
            },
        },
    )

    syntax_styler.add_lang("js", grammar_js, ["javascript"])

    if syntax_styler.has_lang("markup"):
        grammar_markup_add_inlined(syntax_styler, "script", "js")
        grammar_markup_add_attribute(syntax_styler, EVENT_ATTRIBUTES, "js")

    return grammar_js

"""
TypeScript grammar, extending JavaScript with types, decorators and generics.
"""

from ..grammar import RawGrammar, extend_grammar, insert_before
from ..styler import SyntaxStyler
from .javascript import IDENT, IDENT_PART

GENERIC_ARGS = r"<(?:[^<>]|<(?:[^<>]|<[^<>]*>)*>)*>"


def add_grammar_ts(syntax_styler: SyntaxStyler) -> RawGrammar:
    grammar_js = syntax_styler.get_raw_lang("js")

    grammar_ts = extend_grammar(
        grammar_js,
        {
            "class_name": {
                "pattern": r"(\b(?:class|extends|implements|instanceof|interface|new|type)\s+)(?!keyof\b)"
                + IDENT
                + r"(?:\s*"
                + GENERIC_ARGS
                + r")?",
                "lookbehind": True,
                "greedy": True,
                "inside": None,
            },
            "builtin": r"\b(?:Array|Function|Promise|any|boolean|console|never|number|string|symbol|unknown)\b",
        },
    )

    grammar_ts["keyword"].extend(
        [
            r"\b(?:abstract|declare|is|keyof|readonly|require|satisfies)\b",
            r"\b(?:asserts|infer|interface|module|namespace|type)\b(?=\s*(?:[{_$a-zA-Z\xA0-\uFFFF]|\Z))",
            r"\btype\b(?=\s*(?:[{*]|\Z))",
        ]
    )
    del grammar_ts["literal_property"]

    # Type positions use everything except class names, to avoid recursing into themselves
    type_inside = extend_grammar(grammar_ts, {})
    del type_inside["class_name"]
    grammar_ts["class_name"]["inside"] = type_inside

    insert_before(
        grammar_ts,
        "function",
        {
            "decorator": {
                "pattern": r"@[$\w\xA0-\uFFFF]+",
                "inside": {
                    "at": {"pattern": r"^@", "alias": "operator"},
                    "decorator_name": {"pattern": r"^[\s\S]+", "alias": "function"},
                },
            },
            "generic_function": {
                "pattern": r"#?" + IDENT + r"\s*" + GENERIC_ARGS + r"(?=\s*\()",
                "greedy": True,
                "inside": {
                    "function": r"^#?(?!\s)[_$a-zA-Z\xA0-\uFFFF]" + IDENT_PART,
                    "generic": {"pattern": r"<[\s\S]+", "alias": "class_name", "inside": type_inside},
                },
            },
        },
    )

    syntax_styler.add_lang("ts", grammar_ts, ["typescript"])
    return grammar_ts

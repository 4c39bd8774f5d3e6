"""
Base grammar shared by C-like languages; JavaScript extends it.
"""

from ..grammar import RawGrammar
from ..styler import SyntaxStyler


def add_grammar_clike(syntax_styler: SyntaxStyler) -> RawGrammar:
    grammar_clike: RawGrammar = {
        "comment": [
            {"pattern": r"(^|[^\\])\/\*[\s\S]*?(?:\*\/|\Z)", "lookbehind": True, "greedy": True},
            {"pattern": r"(^|[^\\:])\/\/.*", "lookbehind": True, "greedy": True},
        ],
        "string": {"pattern": r"""(["'])(?:\\(?:\r\n|[\s\S])|(?!\1)[^\\\r\n])*\1""", "greedy": True},
        "class_name": {
            "pattern": r"(\b(?:class|extends|implements|instanceof|interface|new|trait)\s+|\bcatch\s+\()[\w.\\]+",
            "lookbehind": True,
            "inside": {"punctuation": r"[.\\]"},
        },
        "keyword": r"\b(?:break|catch|continue|do|else|finally|for|function|if|in|instanceof|new|null|return|throw|try|while)\b",
        "boolean": r"\b(?:false|true)\b",
        "function": r"\b\w+(?=\()",
        "number": r"\b0x[\da-f]+\b|(?:\b\d+(?:\.\d*)?|\B\.\d+)(?:e[+-]?\d+)?",
        "operator": r"[<>]=?|[!=]=?=?|--?|\+\+?|&&?|\|\|?|[?*/~^%]",
        "punctuation": r"[{}\[\];(),.:]",
    }
    syntax_styler.add_lang("clike", grammar_clike)
    return grammar_clike

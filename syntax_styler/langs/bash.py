"""
Bash/shell grammar.

Standalone grammar covering comments, here-documents, strings, variables,
command substitution, functions, keywords, builtins, redirections and
operators. Command substitutions are tokenized as bash again.

Based on Prism (https://github.com/PrismJS/prism) by Lea Verou, MIT license.
"""

import re

from ..grammar import RawGrammar
from ..styler import SyntaxStyler

# `$(...)` with two levels of inner parentheses, enough for three nested substitutions
COMMAND_SUB = r"\$\((?:[^()]|\((?:[^()]|\([^()]*\))*\))*\)"

VARIABLE = r"\$\{[^}]+\}|\$(?:\w+|[!@#$*?\-0-9])"


def add_grammar_bash(syntax_styler: SyntaxStyler) -> RawGrammar:
    # `rest` wired below, once the grammar exists. Greedy so `^` only matches at the
    # start of the substitution, not at the start of every remaining segment
    # Not named `punctuation`: own entries shadow `rest`, which would hide bash's
    # punctuation rule inside the substitution
    command_sub_inside: RawGrammar = {
        "command_sub_punctuation": {"pattern": r"^\$\(|\)\Z", "greedy": True, "alias": "punctuation"},
    }
    command_substitution = {"pattern": COMMAND_SUB, "greedy": True, "inside": command_sub_inside}

    grammar_bash: RawGrammar = {
        "shebang": {"pattern": r"^#!.*", "alias": "comment"},
        "comment": {"pattern": r"(^|\s)#.*", "lookbehind": True, "greedy": True},
        # Must precede strings so quoted delimiters are not consumed as strings
        "heredoc": [
            {
                "pattern": re.compile(
                    r"""(^|[^<])<<-?\s*(?:['"])(\w+)(?:['"])[\t ]*\n[\s\S]*?\n[\t ]*\2(?=\s*$)""", re.M
                ),
                "lookbehind": True,
                "greedy": True,
                "alias": "string",
                "inside": {
                    "heredoc_delimiter": [
                        {"pattern": r"""^<<-?\s*(?:['"])\w+(?:['"])""", "alias": "punctuation"},
                        {"pattern": r"\w+\Z", "alias": "punctuation"},
                    ],
                },
            },
            {
                "pattern": re.compile(r"(^|[^<])<<-?\s*(\w+)[\t ]*\n[\s\S]*?\n[\t ]*\2(?=\s*$)", re.M),
                "lookbehind": True,
                "greedy": True,
                "alias": "string",
                "inside": {
                    "heredoc_delimiter": [
                        {"pattern": r"^<<-?\s*\w+", "alias": "punctuation"},
                        {"pattern": r"\w+\Z", "alias": "punctuation"},
                    ],
                    "command_substitution": command_substitution,
                    "variable": VARIABLE,
                },
            },
        ],
        "string": [
            {
                "pattern": r'(^|[^\\](?:\\\\)*)"(?:\\[\s\S]|' + COMMAND_SUB + r'|\$(?!\()|[^"\\$])*"',
                "lookbehind": True,
                "greedy": True,
                "inside": {
                    "command_substitution": command_substitution,
                    "variable": VARIABLE,
                },
            },
            {"pattern": r"(^|[^\\](?:\\\\)*)'[^']*'", "lookbehind": True, "greedy": True},
            # ANSI-C quoting
            {"pattern": r"\$'(?:[^'\\]|\\[\s\S])*'", "greedy": True},
        ],
        "command_substitution": command_substitution,
        "variable": VARIABLE,
        "function": [
            {"pattern": r"(\bfunction\s+)\w+", "lookbehind": True},
            r"\b\w+(?=\s*\(\s*\))",
        ],
        "keyword": (
            r"\b(?:if|then|else|elif|fi|for|while|until|do|done|case|esac|in|select|function|return|local"
            r"|export|declare|typeset|readonly|unset|set|shift|trap|break|continue|coproc|time)\b"
        ),
        "builtin": (
            r"\b(?:echo|printf|cd|pwd|read|test|source|eval|exec|exit|getopts|hash|type|ulimit|umask|wait"
            r"|kill|jobs|bg|fg|disown|alias|unalias|command|shopt)\b"
        ),
        "boolean": r"\b(?:true|false)\b",
        # Before number, so `2>` is a descriptor
        "file_descriptor": {"pattern": r"\B&\d\b|\b\d(?=>>?|<)", "alias": "important"},
        "number": r"\b(?:0x[\da-fA-F]+|0[0-7]+|\d+#[\da-zA-Z]+|\d+)\b",
        "operator": r"\|\||&&|;;|&>>?|<<<?|>>?|=~|[!=]=|[<>]|[|&!]",
        "punctuation": r"[{}\[\]();,]",
    }
    command_sub_inside["rest"] = grammar_bash

    syntax_styler.add_lang("bash", grammar_bash, ["sh", "shell"])
    return grammar_bash

"""
Regex-grammar syntax styler.

Tokenizes source text with declarative, Prism-style grammars and renders the
token tree as classed markup or as per-class highlight ranges.
"""

from .errors import (
    SyntaxStylerError,
    UnsupportedLanguageError,
    DuplicateLanguageError,
    GrammarError,
    TokenLengthMismatchError,
    CacheError,
)
from .token import SyntaxToken, TokenStream, TokenStreamItem, token_text, token_to_dict, find_tokens
from .grammar import GrammarRule, SyntaxGrammar, normalize_grammar, extend_grammar, insert_before
from .tokenizer import tokenize
from .renderer import (
    STYLE_PRIORITIES,
    HighlightLayer,
    WrapEnv,
    get_style_priority,
    highlight_layers,
    stringify_token,
    syntax_ranges,
)
from .styler import SyntaxStyler, TokenizeEnv
from .langs import create_default_styler, get_lang_for_file, EXTENSION_TO_LANG

__version__ = "0.1.0"

# Shared styler with every built-in language registered
syntax_styler_global = create_default_styler()


def stylize(text: str, lang: str, grammar=None) -> str:
    """Render text as classed markup with the shared styler."""
    return syntax_styler_global.stylize(text, lang, grammar)


__all__ = [
    "SyntaxStylerError",
    "UnsupportedLanguageError",
    "DuplicateLanguageError",
    "GrammarError",
    "TokenLengthMismatchError",
    "CacheError",
    "SyntaxToken",
    "TokenStream",
    "TokenStreamItem",
    "token_text",
    "token_to_dict",
    "find_tokens",
    "GrammarRule",
    "SyntaxGrammar",
    "normalize_grammar",
    "extend_grammar",
    "insert_before",
    "tokenize",
    "STYLE_PRIORITIES",
    "HighlightLayer",
    "WrapEnv",
    "get_style_priority",
    "highlight_layers",
    "stringify_token",
    "syntax_ranges",
    "SyntaxStyler",
    "TokenizeEnv",
    "create_default_styler",
    "get_lang_for_file",
    "EXTENSION_TO_LANG",
    "syntax_styler_global",
    "stylize",
]

"""
Exceptions raised by the syntax styler.
"""

from typing import Optional


class SyntaxStylerError(Exception):
    """Base exception for all syntax styler errors."""

    pass


class UnsupportedLanguageError(SyntaxStylerError, LookupError):
    """Raised when a language name or alias has no registered grammar."""

    def __init__(self, lang: Optional[str]):
        self.lang = lang
        super().__init__(f"Language not supported: {lang!r}")


class DuplicateLanguageError(SyntaxStylerError, ValueError):
    """Raised when a name or alias is already bound to a different grammar."""

    pass


class GrammarError(SyntaxStylerError, ValueError):
    """Indicates a malformed grammar definition."""

    pass


class TokenLengthMismatchError(SyntaxStylerError):
    """A token's nested content does not cover exactly the token's span."""

    pass


class CacheError(SyntaxStylerError):
    """Custom exception for highlight cache errors."""

    pass

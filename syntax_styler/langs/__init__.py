"""
Language grammars for the syntax styler.

Each module provides an ``add_grammar_<lang>`` function that registers its
grammar on a ``SyntaxStyler``. Registration order matters: later languages
extend or embed themselves into earlier ones, and markdown must come last so
its fenced code blocks know every other language.
"""

import os

from .markup import add_grammar_markup
from .css import add_grammar_css
from .clike import add_grammar_clike
from .javascript import add_grammar_js
from .typescript import add_grammar_ts
from .json import add_grammar_json
from .svelte import add_grammar_svelte
from .bash import add_grammar_bash
from .markdown import add_grammar_markdown

from ..styler import SyntaxStyler

DEFAULT_GRAMMARS = [
    add_grammar_markup,
    add_grammar_css,
    add_grammar_clike,
    add_grammar_js,
    add_grammar_ts,
    add_grammar_json,
    add_grammar_svelte,
    add_grammar_bash,
    add_grammar_markdown,
]

# Map of file extensions to language names
EXTENSION_TO_LANG = {
    # Markup
    '.html': 'html',
    '.htm': 'html',
    '.xml': 'xml',
    '.svg': 'svg',
    '.mathml': 'mathml',
    '.ssml': 'ssml',
    '.atom': 'atom',
    '.rss': 'rss',
    # CSS
    '.css': 'css',
    # JavaScript
    '.js': 'js',
    '.mjs': 'js',
    '.cjs': 'js',
    '.jsx': 'js',
    # TypeScript
    '.ts': 'ts',
    '.mts': 'ts',
    '.cts': 'ts',
    '.tsx': 'ts',
    # JSON
    '.json': 'json',
    '.jsonc': 'json',
    '.webmanifest': 'json',
    # Svelte
    '.svelte': 'svelte',
    # Shell
    '.sh': 'bash',
    '.bash': 'bash',
    # Markdown
    '.md': 'md',
    '.markdown': 'md',
}


def register_default_langs(syntax_styler: SyntaxStyler) -> SyntaxStyler:
    """Register every built-in grammar, in dependency order."""
    for add_grammar in DEFAULT_GRAMMARS:
        add_grammar(syntax_styler)
    return syntax_styler


def create_default_styler() -> SyntaxStyler:
    """Create a styler with every built-in language registered."""
    return register_default_langs(SyntaxStyler())


def get_lang_for_file(file_path):
    """
    Returns the language name for a given file based on its extension.

    Args:
        file_path: Path to the file

    Returns:
        A language name or None if the file type is not supported
    """
    extension = os.path.splitext(file_path)[1].lower()
    return EXTENSION_TO_LANG.get(extension)

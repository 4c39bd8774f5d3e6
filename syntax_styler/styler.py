"""
Language registry and entry points for the syntax styler.

This module provides the SyntaxStyler class, which maps language names and
aliases to grammars and turns text into markup or highlight ranges.
"""

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from .config import log
from .errors import DuplicateLanguageError, UnsupportedLanguageError
from .grammar import GrammarMemo, RawGrammar, SyntaxGrammar, extend_grammar, insert_before, normalize_grammar
from .renderer import HighlightLayer, WrapHook, highlight_layers, stringify_token
from .token import TokenStream
from .tokenizer import tokenize

GrammarLike = Union[RawGrammar, SyntaxGrammar]


@dataclass
class TokenizeEnv:
    """State shared with tokenize hooks for one stylize call."""

    text: str
    lang: str
    grammar: SyntaxGrammar
    tokens: TokenStream = field(default_factory=list)


TokenizeHook = Callable[[TokenizeEnv], None]


class SyntaxStyler:
    """
    Registry of language grammars.

    Grammars are registered as raw dicts (or prebuilt ``SyntaxGrammar``
    objects) and normalized lazily on first lookup. Registering a language
    may modify the raw grammars of languages registered earlier (for example
    to embed itself in markup), so every registration discards the
    normalized grammars built so far. Once registration is done, lookups
    return the same immutable grammar objects.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._raw: Dict[str, GrammarLike] = {}
        self._aliases: Dict[str, str] = {}
        self._compiled: Dict[str, SyntaxGrammar] = {}
        self._memo: GrammarMemo = {}
        self._lock = threading.RLock()
        self.hooks_before_tokenize: List[TokenizeHook] = []
        self.hooks_after_tokenize: List[TokenizeHook] = []
        self.hooks_wrap: List[WrapHook] = []

    # --- Registration ---

    def _check_available(self, name: str, grammar: GrammarLike) -> bool:
        """Return True if ``name`` is free, False if already bound to ``grammar``."""
        canonical = name if name in self._raw else self._aliases.get(name)
        if canonical is None:
            return True
        if self._raw[canonical] is grammar:
            return False
        raise DuplicateLanguageError(
            f"Language name '{name}' is already registered to a different grammar ('{canonical}')"
        )

    def add_lang(self, name: str, grammar: GrammarLike, aliases: Iterable[str] = ()) -> None:
        """
        Register a grammar under a canonical name and aliases.

        Args:
            name: Canonical language name
            grammar: Raw grammar dict or normalized grammar
            aliases: Alternative names resolving to the same grammar

        Raises:
            DuplicateLanguageError: If a name is bound to a different grammar
        """
        aliases = [alias for alias in aliases if alias != name]
        with self._lock:
            free = [n for n in [name] + aliases if self._check_available(n, grammar)]
            if not free:
                return
            if name in free:
                self._raw[name] = grammar
            else:
                # Already reachable under `name`, so new aliases point at its canonical name
                name = self.resolve_name(name)
            for alias in aliases:
                if alias in free:
                    self._aliases[alias] = name
            self.invalidate()
        log.debug(f"Registered language '{name}' (aliases: {', '.join(aliases) or 'none'})")

    def add_extended_lang(
        self, base: str, name: str, extension: RawGrammar, aliases: Iterable[str] = ()
    ) -> RawGrammar:
        """
        Register a clone of ``base`` with ``extension`` entries set on it.

        Returns:
            The new raw grammar
        """
        raw = self.get_raw_lang(base)
        if raw is None or isinstance(raw, SyntaxGrammar):
            raise UnsupportedLanguageError(base)
        grammar = extend_grammar(raw, extension)
        self.add_lang(name, grammar, aliases)
        return grammar

    def insert_before(self, lang: str, before: str, insert: RawGrammar) -> RawGrammar:
        """Insert entries into a registered raw grammar before the key ``before``."""
        raw = self.get_raw_lang(lang)
        if raw is None or isinstance(raw, SyntaxGrammar):
            raise UnsupportedLanguageError(lang)
        with self._lock:
            insert_before(raw, before, insert)
            self.invalidate()
        return raw

    def invalidate(self) -> None:
        """Discard normalized grammars after raw grammars were modified in place."""
        self._compiled.clear()
        self._memo = {}

    # --- Lookup ---

    def resolve_name(self, name: Optional[str]) -> Optional[str]:
        """Return the canonical name for a name or alias, or None."""
        if name is None:
            return None
        if name in self._raw:
            return name
        return self._aliases.get(name)

    def has_lang(self, name: Optional[str]) -> bool:
        return self.resolve_name(name) is not None

    def get_raw_lang(self, name: str) -> Optional[GrammarLike]:
        canonical = self.resolve_name(name)
        if canonical is None:
            return None
        return self._raw[canonical]

    def get_lang(self, name: Optional[str]) -> Optional[SyntaxGrammar]:
        """
        Resolve a language name or alias to its grammar.

        Lookup is exact and case-sensitive.

        Returns:
            The grammar, or None if the name is not registered
        """
        canonical = self.resolve_name(name)
        if canonical is None:
            return None
        grammar = self._compiled.get(canonical)
        if grammar is None:
            with self._lock:
                grammar = self._compiled.get(canonical)
                if grammar is None:
                    grammar = normalize_grammar(self._raw[canonical], self._memo)
                    self._compiled[canonical] = grammar
        return grammar

    def lang_names(self) -> List[str]:
        """Canonical names in registration order."""
        return list(self._raw)

    @property
    def langs(self) -> Mapping[str, SyntaxGrammar]:
        """Read-only snapshot of canonical names to grammars."""
        return MappingProxyType({name: self.get_lang(name) for name in list(self._raw)})

    @property
    def aliases(self) -> Mapping[str, str]:
        """Read-only snapshot of aliases to canonical names."""
        return MappingProxyType(dict(self._aliases))

    # --- Hooks ---

    def add_hook_before_tokenize(self, hook: TokenizeHook) -> None:
        self.hooks_before_tokenize.append(hook)

    def add_hook_after_tokenize(self, hook: TokenizeHook) -> None:
        self.hooks_after_tokenize.append(hook)

    def add_hook_wrap(self, hook: WrapHook) -> None:
        self.hooks_wrap.append(hook)

    # --- Styling ---

    def _resolve_grammar(self, lang: str, grammar: Optional[GrammarLike]) -> SyntaxGrammar:
        if grammar is not None:
            return normalize_grammar(grammar)
        resolved = self.get_lang(lang)
        if resolved is None:
            raise UnsupportedLanguageError(lang)
        return resolved

    def tokenize(self, text: str, lang: str, grammar: Optional[GrammarLike] = None) -> TokenStream:
        """
        Tokenize text for a language, running tokenize hooks.

        Args:
            text: Source text
            lang: Language name or alias
            grammar: Grammar overriding the registry lookup

        Returns:
            The token stream

        Raises:
            UnsupportedLanguageError: If ``lang`` is unknown and no grammar is given
        """
        env = TokenizeEnv(text=text, lang=lang, grammar=self._resolve_grammar(lang, grammar))
        for hook in self.hooks_before_tokenize:
            hook(env)
        env.tokens = tokenize(env.text, env.grammar)
        for hook in self.hooks_after_tokenize:
            hook(env)
        return env.tokens

    def stylize(self, text: str, lang: str, grammar: Optional[GrammarLike] = None) -> str:
        """
        Render text as classed markup.

        Args:
            text: Source text
            lang: Language name or alias
            grammar: Grammar overriding the registry lookup

        Returns:
            Markup with one ``<span class="token_...">`` per token
        """
        tokens = self.tokenize(text, lang, grammar)
        return stringify_token(tokens, lang, self.hooks_wrap)

    def highlight(self, text: str, lang: str, grammar: Optional[GrammarLike] = None) -> List[HighlightLayer]:
        """Compute priority-ordered highlight layers instead of markup."""
        tokens = self.tokenize(text, lang, grammar)
        return highlight_layers(tokens, len(text))

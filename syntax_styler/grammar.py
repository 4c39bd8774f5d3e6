"""
Grammar definitions for the syntax styler.

Grammars are authored as plain ordered dicts ("raw" grammars) mapping a token
type name to a pattern, a rule dict, or a list of those. The special key
``rest`` names another raw grammar whose entries follow the grammar's own.
Raw grammars may be cyclic; ``normalize_grammar`` turns them into immutable
``SyntaxGrammar`` graphs that the tokenizer walks.
"""

import re
import copy
from typing import Any, Dict, Iterator, List, Optional, Pattern, Tuple, Union

from .errors import GrammarError

RawGrammar = Dict[str, Any]

REST_KEY = "rest"


class GrammarRule:
    """
    Defines one regex alternative for a token type.
    """

    __slots__ = ("pattern", "lookbehind", "greedy", "alias", "inside")

    def __init__(
        self,
        pattern: Union[str, Pattern],
        lookbehind: bool = False,
        greedy: bool = False,
        alias: Union[None, str, List[str], Tuple[str, ...]] = None,
        inside: Optional["SyntaxGrammar"] = None,
        flags: int = 0,
    ):
        """
        Initialize a grammar rule.

        Args:
            pattern: Regex pattern string or compiled pattern
            lookbehind: Whether group 1 is leading context excluded from the token
            greedy: Whether the match may extend across later tokens
            alias: Extra style names attached to the token
            inside: Grammar used to tokenize the matched text
            flags: Regex compilation flags, only used for string patterns
        """
        if isinstance(pattern, str):
            pattern = re.compile(pattern, flags)
        elif not isinstance(pattern, re.Pattern):
            raise GrammarError(f"Invalid pattern: {pattern!r}")
        if lookbehind and pattern.groups < 1:
            raise GrammarError(f"Lookbehind rule needs a capture group: {pattern.pattern!r}")
        self.pattern = pattern
        self.lookbehind = lookbehind
        self.greedy = greedy
        if alias is None:
            self.alias: Tuple[str, ...] = ()
        elif isinstance(alias, str):
            self.alias = (alias,)
        else:
            self.alias = tuple(alias)
        self.inside = inside

    def __repr__(self):
        flags = []
        if self.lookbehind:
            flags.append("lookbehind")
        if self.greedy:
            flags.append("greedy")
        if self.inside is not None:
            flags.append("inside")
        return f"GrammarRule({self.pattern.pattern!r}{', ' if flags else ''}{', '.join(flags)})"


class SyntaxGrammar:
    """
    An ordered rule table for one language.

    Own entries come first, in declaration order, followed by the entries of
    ``rest`` whose names the grammar does not define itself.
    """

    def __init__(
        self,
        tokens: Optional[Dict[str, List[GrammarRule]]] = None,
        rest: Optional["SyntaxGrammar"] = None,
    ):
        self.tokens: Dict[str, List[GrammarRule]] = dict(tokens or {})
        self.rest = rest

    def entries(self) -> Iterator[Tuple[str, List[GrammarRule]]]:
        """Yield ``(name, rules)`` pairs in precedence order."""
        seen = set()
        visited = set()
        grammar: Optional[SyntaxGrammar] = self
        while grammar is not None and id(grammar) not in visited:
            visited.add(id(grammar))
            for name, rules in grammar.tokens.items():
                if name in seen:
                    continue
                seen.add(name)
                yield name, rules
            grammar = grammar.rest

    def keys(self) -> List[str]:
        return [name for name, _ in self.entries()]

    def get(self, name: str) -> Optional[List[GrammarRule]]:
        for key, rules in self.entries():
            if key == name:
                return rules
        return None

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __getitem__(self, name: str) -> List[GrammarRule]:
        rules = self.get(name)
        if rules is None:
            raise KeyError(name)
        return rules

    def __repr__(self):
        return f"SyntaxGrammar({', '.join(self.tokens)}{', rest' if self.rest else ''})"


# id of a raw grammar dict -> (that dict, its normalized grammar)
GrammarMemo = Dict[int, Tuple[RawGrammar, SyntaxGrammar]]


def _normalize_rule(name: str, value: Any, memo: GrammarMemo) -> GrammarRule:
    if isinstance(value, (str, re.Pattern)):
        return GrammarRule(value)
    if not isinstance(value, dict):
        raise GrammarError(f"Invalid rule for token '{name}': {value!r}")
    if "pattern" not in value:
        raise GrammarError(f"Rule for token '{name}' has no pattern")
    inside = value.get("inside")
    return GrammarRule(
        value["pattern"],
        lookbehind=bool(value.get("lookbehind", False)),
        greedy=bool(value.get("greedy", False)),
        alias=value.get("alias"),
        inside=normalize_grammar(inside, memo) if inside is not None else None,
        flags=value.get("flags", 0),
    )


def normalize_grammar(
    raw: Union[RawGrammar, SyntaxGrammar], memo: Optional[GrammarMemo] = None
) -> SyntaxGrammar:
    """
    Convert a raw grammar dict into a ``SyntaxGrammar``.

    Each raw dict maps to exactly one grammar object, so cycles in the raw
    data (a grammar nested inside itself) become cycles in the result.

    Args:
        raw: Raw grammar dict, or an already normalized grammar
        memo: Shared map from raw dict id to (raw dict, grammar), for reuse
            across calls

    Returns:
        The normalized grammar
    """
    if isinstance(raw, SyntaxGrammar):
        return raw
    if not isinstance(raw, dict):
        raise GrammarError(f"Grammar must be a dict, got {type(raw).__name__}")
    if memo is None:
        memo = {}
    # Entries hold their raw dict so a recycled id never matches
    existing = memo.get(id(raw))
    if existing is not None and existing[0] is raw:
        return existing[1]

    # Registered before filling so nested references to `raw` resolve here
    grammar = SyntaxGrammar()
    memo[id(raw)] = (raw, grammar)

    for name, value in raw.items():
        if name == REST_KEY or value is None:
            continue
        values = value if isinstance(value, list) else [value]
        grammar.tokens[name] = [_normalize_rule(name, v, memo) for v in values]

    rest = raw.get(REST_KEY)
    if rest is not None:
        grammar.rest = normalize_grammar(rest, memo)
    return grammar


def extend_grammar(base: RawGrammar, extension: RawGrammar) -> RawGrammar:
    """
    Deep-clone a raw grammar and override or append entries.

    Existing keys keep their position; new keys are appended. Compiled
    patterns are shared, cycles inside the clone point at the clone.

    Args:
        base: Raw grammar to clone
        extension: Entries to set on the clone

    Returns:
        The new raw grammar
    """
    grammar = copy.deepcopy(base)
    for name, value in extension.items():
        grammar[name] = value
    return grammar


def insert_before(grammar: RawGrammar, before: str, insert: RawGrammar) -> RawGrammar:
    """
    Insert entries into a raw grammar before the key ``before``.

    The dict is rebuilt in place, so every existing reference to it (for
    example as another grammar's ``inside`` or ``rest``) sees the new entries.
    Keys of ``insert`` that already exist are moved to the insertion point.

    Args:
        grammar: Raw grammar to modify
        before: Existing key to insert in front of
        insert: Entries to insert, in order

    Returns:
        The same dict, modified
    """
    if before not in grammar:
        raise GrammarError(f"Cannot insert before '{before}': no such token")
    items = list(grammar.items())
    grammar.clear()
    for name, value in items:
        if name == before:
            for new_name, new_value in insert.items():
                grammar[new_name] = new_value
        if name not in insert:
            grammar[name] = value
    return grammar

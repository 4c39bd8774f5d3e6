"""
Tokenizer engine for the syntax styler.

This module converts text into a token stream using a ``SyntaxGrammar``.
Rules are applied one at a time in grammar order over a linked list of
stream nodes: each rule splits the literal segments it matches, so earlier
rules claim text before later rules ever see it.
"""

from typing import List, Optional, Pattern, Tuple, Union

from .token import SyntaxToken, TokenStream, TokenStreamItem
from .grammar import SyntaxGrammar, RawGrammar, normalize_grammar


class _Node:
    __slots__ = ("value", "prev", "next")

    def __init__(self, value: Optional[TokenStreamItem], prev=None, next=None):
        self.value = value
        self.prev = prev
        self.next = next


class TokenList:
    """
    Doubly linked list of stream items with sentinel head and tail nodes.
    """

    def __init__(self):
        self.head = _Node(None)
        self.tail = _Node(None, self.head)
        self.head.next = self.tail
        self.length = 0

    def add_after(self, node: _Node, value: TokenStreamItem) -> _Node:
        """Insert ``value`` after ``node`` and return the new node."""
        next_node = node.next
        new_node = _Node(value, node, next_node)
        node.next = new_node
        next_node.prev = new_node
        self.length += 1
        return new_node

    def remove_range(self, node: _Node, count: int) -> None:
        """Remove up to ``count`` nodes following ``node``."""
        next_node = node.next
        removed = 0
        while removed < count and next_node is not self.tail:
            next_node = next_node.next
            removed += 1
        node.next = next_node
        next_node.prev = node
        self.length -= removed

    def to_list(self) -> TokenStream:
        items: TokenStream = []
        node = self.head.next
        while node is not self.tail:
            items.append(node.value)
            node = node.next
        return items


class RematchState:
    """
    Tracks a nested re-match pass after a greedy token replaced several nodes.

    ``cause`` identifies the rule that triggered the pass; the pass stops when
    it reaches that rule again. ``reach`` is the text offset beyond which
    nothing needs re-matching.
    """

    __slots__ = ("cause", "reach")

    def __init__(self, cause: Tuple[str, int], reach: int):
        self.cause = cause
        self.reach = reach


class _Match:
    __slots__ = ("start", "text")

    def __init__(self, start: int, text: str):
        self.start = start
        self.text = text


def _match_pattern(pattern: Pattern, pos: int, text: str, lookbehind: bool) -> Optional[_Match]:
    """
    Find the first non-empty match of ``pattern`` in ``text`` at or after ``pos``.

    With ``lookbehind``, the text of group 1 is removed from the front of the
    match. Zero-length results are skipped so they can never become tokens.
    """
    while pos <= len(text):
        match = pattern.search(text, pos)
        if match is None:
            return None
        start = match.start()
        value = match.group(0)
        if lookbehind:
            context = match.group(1)
            if context:
                start += len(context)
                value = value[len(context):]
        if value:
            return _Match(start, value)
        pos = match.start() + 1
    return None


def _match_grammar(
    text: str,
    token_list: TokenList,
    grammar: SyntaxGrammar,
    start_node: _Node,
    start_pos: int,
    rematch: Optional[RematchState] = None,
) -> None:
    for name, rules in grammar.entries():
        for index, rule in enumerate(rules):
            if rematch is not None and rematch.cause == (name, index):
                return

            node = start_node.next
            pos = start_pos
            while node is not token_list.tail:
                if rematch is not None and pos >= rematch.reach:
                    break

                segment = node.value
                if isinstance(segment, SyntaxToken):
                    pos += len(segment)
                    node = node.next
                    continue

                remove_count = 1
                if rule.greedy:
                    match = _match_pattern(rule.pattern, pos, text, rule.lookbehind)
                    if match is None or match.start >= len(text):
                        break
                    match_start = match.start
                    match_end = match.start + len(match.text)

                    # Find the node that contains the start of the match
                    p = pos + len(segment)
                    while match_start >= p:
                        node = node.next
                        p += len(node.value)
                    p -= len(node.value)
                    pos = p

                    # A match starting inside an existing token is invalid
                    if isinstance(node.value, SyntaxToken):
                        pos += len(node.value)
                        node = node.next
                        continue

                    # Find the last node covered by the match
                    last = node
                    while last is not token_list.tail and (p < match_end or isinstance(last.value, str)):
                        remove_count += 1
                        p += len(last.value)
                        last = last.next
                    remove_count -= 1

                    segment = text[pos:p]
                    match = _Match(match_start - pos, match.text)
                else:
                    match = _match_pattern(rule.pattern, 0, segment, rule.lookbehind)
                    if match is None:
                        pos += len(segment)
                        node = node.next
                        continue

                before = segment[: match.start]
                after = segment[match.start + len(match.text):]

                reach = pos + len(segment)
                if rematch is not None and reach > rematch.reach:
                    rematch.reach = reach

                remove_from = node.prev
                if before:
                    remove_from = token_list.add_after(remove_from, before)
                    pos += len(before)
                token_list.remove_range(remove_from, remove_count)

                content: Union[str, TokenStream] = match.text
                if rule.inside is not None:
                    content = tokenize(match.text, rule.inside)
                wrapped = SyntaxToken(name, content, rule.alias, len(match.text))
                node = token_list.add_after(remove_from, wrapped)
                if after:
                    token_list.add_after(node, after)

                if remove_count > 1:
                    # The greedy match swallowed other nodes; re-match what follows it
                    nested = RematchState((name, index), reach)
                    _match_grammar(text, token_list, grammar, node.prev, pos, nested)
                    if rematch is not None and nested.reach > rematch.reach:
                        rematch.reach = nested.reach

                pos += len(wrapped)
                node = node.next


def tokenize(text: str, grammar: Union[SyntaxGrammar, RawGrammar]) -> TokenStream:
    """
    Tokenize text with a grammar.

    Args:
        text: Source text
        grammar: Normalized grammar, or a raw grammar dict

    Returns:
        Token stream whose concatenated text equals ``text``
    """
    if not text:
        return []
    grammar = normalize_grammar(grammar)
    token_list = TokenList()
    token_list.add_after(token_list.head, text)
    _match_grammar(text, token_list, grammar, token_list.head, 0)
    return token_list.to_list()

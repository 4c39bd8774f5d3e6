"""
Token class for the syntax styler.
Represents a classified span of text in a token stream.
"""

from typing import List, Union, Tuple, Any, Dict
from dataclasses import dataclass, field


@dataclass
class SyntaxToken:
    """
    Represents a token produced by the tokenizer.

    A token's content is either the matched text or, when its rule declares a
    nested grammar, a token stream covering exactly the matched text.
    """

    type: str
    content: Union[str, List["TokenStreamItem"]]
    alias: Tuple[str, ...] = field(default_factory=tuple)
    length: int = 0

    def __repr__(self):
        return f"SyntaxToken({self.type}, {self.content!r}, alias={list(self.alias)})"

    def __str__(self):
        return f"{self.type}({token_text(self)!r})"

    def __len__(self):
        return self.length

    def is_type(self, *names: str) -> bool:
        """Check if the token's type or one of its aliases is among the names."""
        return self.type in names or any(a in names for a in self.alias)

    @property
    def classes(self) -> List[str]:
        """Style class names for this token, type first."""
        return [f"token_{self.type}"] + [f"token_{a}" for a in self.alias]


TokenStreamItem = Union[str, SyntaxToken]
TokenStream = List[TokenStreamItem]


def token_text(item: Union[TokenStreamItem, TokenStream]) -> str:
    """
    Recover the literal text covered by a token, a string or a stream.

    Args:
        item: A string, a token, or a list of either

    Returns:
        The concatenated source text
    """
    if isinstance(item, str):
        return item
    if isinstance(item, SyntaxToken):
        return token_text(item.content)
    return "".join(token_text(part) for part in item)


def token_to_dict(item: TokenStreamItem) -> Union[str, Dict[str, Any]]:
    """Convert a token (recursively) into JSON-serializable data."""
    if isinstance(item, str):
        return item
    content = item.content
    return {
        "type": item.type,
        "alias": list(item.alias),
        "length": item.length,
        "content": content if isinstance(content, str) else [token_to_dict(c) for c in content],
    }


def find_tokens(stream: TokenStream, name: str) -> List[SyntaxToken]:
    """
    Find all tokens (depth-first, in order) whose type or alias is ``name``.

    Args:
        stream: Token stream to search
        name: Token type or alias

    Returns:
        Matching tokens
    """
    found: List[SyntaxToken] = []
    for item in stream:
        if isinstance(item, str):
            continue
        if item.is_type(name):
            found.append(item)
        if not isinstance(item.content, str):
            found.extend(find_tokens(item.content, name))
    return found

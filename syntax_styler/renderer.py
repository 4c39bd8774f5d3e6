"""
Renderers for token streams.

Two backends consume the same token stream:

- markup: nested ``<span class="token_<type> token_<alias>">`` elements with
  escaped literal text, via ``stringify_token``;
- ranges: per-class character ranges into the original text, via
  ``syntax_ranges`` and ``highlight_layers``, for overlapping-range
  highlighting where the text itself is left unwrapped.
"""

import html
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from .errors import TokenLengthMismatchError
from .token import SyntaxToken, TokenStream, TokenStreamItem

# Layering order for overlapping ranges; higher values paint over lower ones.
STYLE_PRIORITIES: Mapping[str, int] = MappingProxyType(
    {
        "token_processing_instruction": 1,
        "token_doctype": 1,
        "token_cdata": 1,
        "token_punctuation": 1,
        "token_tag": 2,
        "token_constant": 2,
        "token_symbol": 2,
        "token_deleted": 2,
        "token_keyword": 2,
        "token_null": 2,
        "token_boolean": 2,
        "token_interpolation_punctuation": 2,
        "token_heading": 2,
        "token_heading_punctuation": 2,
        "token_tag_punctuation": 2,
        "token_comment": 3,
        "token_char": 3,
        "token_inserted": 3,
        "token_blockquote": 3,
        "token_blockquote_punctuation": 3,
        "token_builtin": 4,
        "token_class_name": 4,
        "token_number": 4,
        "token_attr_value": 5,
        "token_attr_quote": 5,
        "token_string": 5,
        "token_template_punctuation": 5,
        "token_inline_code": 5,
        "token_code_punctuation": 5,
        "token_attr_equals": 6,
        "token_selector": 7,
        "token_function": 7,
        "token_regex": 7,
        "token_important": 7,
        "token_variable": 7,
        "token_atrule": 8,
        "token_attr_name": 9,
        "token_property": 9,
        "token_decorator": 9,
        "token_decorator_name": 9,
        "token_link_text_wrapper": 9,
        "token_link_text": 9,
        "token_link_punctuation": 9,
        "token_special_keyword": 10,
        "token_namespace": 10,
        "token_rule": 10,
        "token_at_keyword": 11,
        "token_url": 11,
        "token_strikethrough": 13,
        "token_bold": 14,
        "token_italic": 15,
    }
)


def get_style_priority(class_name: str) -> int:
    """Priority of a ``token_<name>`` class; unknown classes get 0."""
    return STYLE_PRIORITIES.get(class_name, 0)


# --- Markup rendering ---


@dataclass
class WrapEnv:
    """
    Mutable description of the element about to wrap a token.

    Wrap hooks receive this before the element is serialized and may change
    the tag, classes and attributes.
    """

    type: str
    content: str
    tag: str
    classes: List[str]
    attributes: Dict[str, str] = field(default_factory=dict)
    lang: str = ""


WrapHook = Callable[[WrapEnv], None]


def escape_text(text: str) -> str:
    """Escape literal text for HTML element content."""
    return html.escape(text, quote=False)


def stringify_token(
    item: Union[TokenStreamItem, TokenStream],
    lang: str = "",
    wrap_hooks: Optional[List[WrapHook]] = None,
) -> str:
    """
    Render a token, string or token stream to markup.

    Args:
        item: What to render
        lang: Language name passed on to wrap hooks
        wrap_hooks: Callables run on each token's ``WrapEnv``

    Returns:
        The markup string
    """
    if isinstance(item, str):
        return escape_text(item)
    if isinstance(item, list):
        return "".join(stringify_token(part, lang, wrap_hooks) for part in item)

    env = WrapEnv(
        type=item.type,
        content=stringify_token(item.content, lang, wrap_hooks),
        tag="span",
        classes=item.classes,
        lang=lang,
    )
    for hook in wrap_hooks or ():
        hook(env)

    attributes = "".join(
        f' {name}="{html.escape(value or "", quote=True)}"' for name, value in env.attributes.items()
    )
    classes = html.escape(" ".join(env.classes), quote=True)
    return f'<{env.tag} class="{classes}"{attributes}>{env.content}</{env.tag}>'


# --- Range rendering ---


RangeMap = Dict[str, List[Tuple[int, int]]]


def _collect_ranges(stream: TokenStream, ranges: RangeMap, offset: int, text_length: int) -> int:
    position = offset
    for item in stream:
        if isinstance(item, str):
            position += len(item)
            continue

        end = position + item.length
        if end > text_length:
            raise TokenLengthMismatchError(
                f"Token {item.type} extends beyond text: position {end} > length {text_length}"
            )
        for class_name in item.classes:
            ranges.setdefault(class_name, []).append((position, end))

        if isinstance(item.content, list):
            covered = _collect_ranges(item.content, ranges, position, text_length)
            if covered != end:
                raise TokenLengthMismatchError(
                    f"Token {item.type} length mismatch: claimed {item.length} chars "
                    f"({position}-{end}) but nested content covered {covered - position} chars "
                    f"({position}-{covered})"
                )
        elif len(item.content) != item.length:
            raise TokenLengthMismatchError(
                f"Token {item.type} length mismatch: claimed {item.length} chars "
                f"but content has {len(item.content)}"
            )
        position = end
    return position


def syntax_ranges(stream: TokenStream, text_length: Optional[int] = None) -> RangeMap:
    """
    Compute the character ranges carrying each style class.

    Every token contributes its span to ``token_<type>`` and to each
    ``token_<alias>``. Nested tokens contribute their own spans as well.

    Args:
        stream: Token stream covering the whole text
        text_length: Length of the backing text; defaults to the stream's length

    Returns:
        Map of class name to ``(start, end)`` ranges in document order

    Raises:
        TokenLengthMismatchError: If token lengths are inconsistent with their
            content or with ``text_length``
    """
    covered_length = sum(len(item) for item in stream)
    if text_length is None:
        text_length = covered_length
    ranges: RangeMap = {}
    covered = _collect_ranges(stream, ranges, 0, text_length)
    if covered != text_length:
        raise TokenLengthMismatchError(
            f"Token stream length mismatch: tokens covered {covered} chars but text has {text_length} chars"
        )
    return ranges


@dataclass
class HighlightLayer:
    """One named highlight with its priority and ranges."""

    name: str
    priority: int
    ranges: List[Tuple[int, int]]


def highlight_layers(stream: TokenStream, text_length: Optional[int] = None) -> List[HighlightLayer]:
    """
    Group ``syntax_ranges`` into layers ordered by ascending priority.

    Layers with equal priority keep first-appearance order.
    """
    ranges = syntax_ranges(stream, text_length)
    layers = [HighlightLayer(name, get_style_priority(name), spans) for name, spans in ranges.items()]
    layers.sort(key=lambda layer: layer.priority)
    return layers

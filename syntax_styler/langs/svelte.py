"""
Svelte grammar: markup with template blocks, tags and expressions.

Expressions and ``<script>`` content are TypeScript, ``<style>`` content is CSS.
"""

from ..grammar import RawGrammar, extend_grammar, insert_before
from ..styler import SyntaxStyler
from .markup import inlined_content_rule

# Balanced braces, up to four levels deep
BRACES = r"\{(?:[^{}]|\{(?:[^{}]|\{(?:[^{}]|\{[^{}]*\})*\})*\})*\}"
BRACES_BODY = r"(?:[^{}]|" + BRACES + r")*\}"

TAG_PATTERN = (
    r"""<\/?(?!\d)[^\s>\/=$<%]+"""
    r"""(?:\s(?:\s*(?:""" + BRACES + r"""|[^\s>\/=]+"""
    r"""(?:\s*=\s*(?:"[^"]*"|'[^']*'|""" + BRACES + r"""|[^\s'">=]+(?=[\s>]))|(?=[\s/>]))))+)?\s*\/?>"""
)


def add_grammar_svelte(syntax_styler: SyntaxStyler) -> RawGrammar:
    grammar_ts = syntax_styler.get_raw_lang("ts")
    grammar_css = syntax_styler.get_raw_lang("css")
    grammar_markup = syntax_styler.get_raw_lang("markup")

    interpolation_punctuation = {"pattern": r"^\{|\}\Z", "alias": "punctuation"}
    expression_inside = {"interpolation_punctuation": interpolation_punctuation, "rest": grammar_ts}
    block_inside = {
        "interpolation_punctuation": interpolation_punctuation,
        "special_keyword": r"^[#:\/](?:else\s+if|[a-z]+)",
        "rest": grammar_ts,
    }
    at_tag_inside = {
        "interpolation_punctuation": interpolation_punctuation,
        "at_keyword": r"^@[a-z]+",
        "rest": grammar_ts,
    }

    grammar_svelte = extend_grammar(
        grammar_markup,
        {
            "script": inlined_content_rule("script", "ts", grammar_ts),
            "style": inlined_content_rule("style", "css", grammar_css),
        },
    )

    insert_before(
        grammar_svelte,
        "tag",
        {
            # {#if ...} {:else} {/if}
            "svelte_block": {"pattern": r"\{[#:\/]" + BRACES_BODY, "greedy": True, "inside": block_inside},
            # {@html ...} {@const ...} {@render ...}
            "svelte_at_tag": {"pattern": r"\{@" + BRACES_BODY, "greedy": True, "inside": at_tag_inside},
            "svelte_expression": {"pattern": BRACES, "greedy": True, "inside": expression_inside},
        },
    )

    tag = grammar_svelte["tag"]
    tag["pattern"] = TAG_PATTERN
    # Quoted attribute values may contain expressions
    insert_before(
        tag["inside"]["attr_value"]["inside"],
        "punctuation",
        {"svelte_expression": {"pattern": BRACES, "inside": expression_inside}},
    )
    # Ahead of `special_attr`, whose unquoted values would otherwise cut `onclick={...}` short
    insert_before(
        tag["inside"],
        "special_attr",
        {
            "svelte_attr": {
                "pattern": r"(^|\s)[^\s>\/=]+\s*=\s*" + BRACES,
                "lookbehind": True,
                "inside": {
                    "attr_name": {"pattern": r"^[^\s=]+", "inside": {"namespace": r"^[^\s>\/:]+:"}},
                    "attr_value": {
                        "pattern": r"=[\s\S]+",
                        "inside": {
                            "svelte_expression": {"pattern": BRACES, "inside": expression_inside},
                            "punctuation": {"pattern": r"^=", "alias": "attr_equals"},
                        },
                    },
                },
            },
            # Standalone `{@attach ...}`, `{...props}` and `{name}` shorthand attributes
            "svelte_at_tag": {"pattern": r"(\s)\{@" + BRACES_BODY, "lookbehind": True, "inside": at_tag_inside},
            "svelte_expression": {"pattern": r"(\s)" + BRACES, "lookbehind": True, "inside": expression_inside},
        },
    )

    syntax_styler.add_lang("svelte", grammar_svelte)
    return grammar_svelte

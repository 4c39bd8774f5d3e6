#!/usr/bin/env python3
# cli.py - command line interface for the syntax styler

import argparse
import json
import logging
import sys
from typing import Optional

from . import syntax_styler_global
from .cache import HighlightCache
from .config import log, configure_logging
from .errors import SyntaxStylerError, UnsupportedLanguageError
from .langs import get_lang_for_file
from .token import token_to_dict

# ANSI color codes for terminal messages
COLOR_RESET = "\033[0m"
COLOR_RED = "\033[91m"
COLOR_CYAN = "\033[96m"


def read_source(path: str) -> str:
    """Reads source text from a file, or stdin when the path is '-'."""
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def resolve_lang(args: argparse.Namespace) -> str:
    """Picks the language from --lang, falling back to the file extension."""
    lang: Optional[str] = args.lang
    if not lang and args.file != "-":
        lang = get_lang_for_file(args.file)
    if not lang:
        raise UnsupportedLanguageError(lang)
    return lang


def handle_stylize(args: argparse.Namespace) -> None:
    text = read_source(args.file)
    lang = resolve_lang(args)
    log.debug(f"Stylizing {args.file} as '{lang}' ({len(text)} chars, mode={args.mode})")

    if args.mode == "ranges":
        layers = syntax_styler_global.highlight(text, lang)
        output = json.dumps(
            [{"name": layer.name, "priority": layer.priority, "ranges": layer.ranges} for layer in layers],
            indent=2,
        )
    elif args.cache_dir:
        cache = HighlightCache(syntax_styler_global, cache_dir=args.cache_dir)
        output = cache.stylize(text, lang)
        log.debug(f"Cache stats: {cache.stats()}")
    else:
        output = syntax_styler_global.stylize(text, lang)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        log.info(f"Wrote {len(output)} chars to {args.output}")
    else:
        print(output)


def handle_tokens(args: argparse.Namespace) -> None:
    text = read_source(args.file)
    lang = resolve_lang(args)
    tokens = syntax_styler_global.tokenize(text, lang)
    print(json.dumps([token_to_dict(item) for item in tokens], indent=2))


def handle_langs(args: argparse.Namespace) -> None:
    aliases = syntax_styler_global.aliases
    for name in syntax_styler_global.lang_names():
        names = sorted(alias for alias, canonical in aliases.items() if canonical == name)
        if names:
            print(f"{COLOR_CYAN}{name}{COLOR_RESET} ({', '.join(names)})")
        else:
            print(f"{COLOR_CYAN}{name}{COLOR_RESET}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="syntax-styler",
        description="Syntax Styler: Highlight source code with regex grammars.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  syntax-styler stylize app.ts                  # Print classed HTML for a file
  syntax-styler stylize - --lang bash < run.sh  # Read from stdin
  syntax-styler stylize page.svelte --mode ranges
  syntax-styler stylize README.md --cache-dir ~/.cache/syntax-styler
  syntax-styler tokens data.json                # Print the token tree as JSON
  syntax-styler langs                           # List supported languages
""",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Sub-command help")

    # stylize
    parser_stylize = subparsers.add_parser("stylize", aliases=["s"], help="Render a file as highlighted HTML.")
    parser_stylize.add_argument("file", help="Source file, or '-' for stdin.")
    parser_stylize.add_argument("-l", "--lang", help="Language name or alias (default: from file extension).")
    parser_stylize.add_argument(
        "-m", "--mode", choices=["html", "ranges"], default="html",
        help="Output classed HTML or JSON highlight ranges (default: html).",
    )
    parser_stylize.add_argument("-o", "--output", help="Write output to this file instead of stdout.")
    parser_stylize.add_argument("--cache-dir", help="Directory for persistent cached renderings.")
    parser_stylize.set_defaults(func=handle_stylize)

    # tokens
    parser_tokens = subparsers.add_parser("tokens", aliases=["t"], help="Print the token tree as JSON.")
    parser_tokens.add_argument("file", help="Source file, or '-' for stdin.")
    parser_tokens.add_argument("-l", "--lang", help="Language name or alias (default: from file extension).")
    parser_tokens.set_defaults(func=handle_tokens)

    # langs
    parser_langs = subparsers.add_parser("langs", aliases=["ls"], help="List supported languages and aliases.")
    parser_langs.set_defaults(func=handle_langs)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else None)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    exit_code = 0
    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        exit_code = 130
    except UnsupportedLanguageError as e:
        print(f"{COLOR_RED}Error: {e}. Use --lang to choose one of: "
              f"{', '.join(syntax_styler_global.lang_names())}{COLOR_RESET}", file=sys.stderr)
        exit_code = 1
    except (SyntaxStylerError, OSError) as e:
        print(f"{COLOR_RED}Error: {e}{COLOR_RESET}", file=sys.stderr)
        exit_code = 1
    except Exception as e:
        print(f"{COLOR_RED}An unexpected error occurred. Use --verbose for detailed logs.{COLOR_RESET}", file=sys.stderr)
        print(f"{COLOR_RED}Error details: {e}{COLOR_RESET}", file=sys.stderr)
        log.exception("Unexpected error during command execution:")
        exit_code = 2

    return exit_code


if __name__ == "__main__":
    sys.exit(main())

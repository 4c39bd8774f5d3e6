import json
import sys
from typing import Optional, Dict, Any, Tuple
from urllib.parse import urlparse

import httpx
from pydantic import AnyUrl, ValidationError
from dotenv import load_dotenv

from mcp.server.fastmcp import FastMCP

from . import syntax_styler_global
from .cache import HighlightCache
from .config import log, configure_logging, MAX_INPUT_LENGTH, FETCH_TIMEOUT, DEFAULT_USER_AGENT
from .errors import SyntaxStylerError, UnsupportedLanguageError
from .langs import get_lang_for_file
from .token import token_to_dict

# --- Configuration ---
load_dotenv()  # Load environment variables from .env file

# Create MCP server
mcp = FastMCP("syntax-styler-server")

# Rendered markup for repeated requests
highlight_cache = HighlightCache(syntax_styler_global)

# Transport override for the HTTP client (None uses the network)
http_transport: Optional[httpx.AsyncBaseTransport] = None


# --- Helper Functions ---


def check_input(code: str) -> Optional[str]:
    """Returns an error message if the input is too large to tokenize."""
    if len(code) > MAX_INPUT_LENGTH:
        return f"Error: Input is {len(code)} characters, limit is {MAX_INPUT_LENGTH}"
    return None


def render(code: str, lang: str, mode: str) -> str:
    """
    Render code in the requested mode.

    Raises:
        UnsupportedLanguageError: If ``lang`` is not registered
        ValueError: If ``mode`` is unknown
    """
    if mode == "html":
        return highlight_cache.stylize(code, lang)
    if mode == "ranges":
        layers = syntax_styler_global.highlight(code, lang)
        return json.dumps(
            [{"name": layer.name, "priority": layer.priority, "ranges": layer.ranges} for layer in layers]
        )
    raise ValueError(f"Unknown mode '{mode}', expected 'html' or 'ranges'")


async def fetch_source(
    url: str,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: int = FETCH_TIMEOUT,
) -> Tuple[Optional[str], int, Dict[str, Any]]:
    """
    Fetch the URL and return the content, status code, and metadata.
    Returns (None, status, metadata) on error.
    """
    metadata: Dict[str, Any] = {"original_url": url, "error": None}
    try:
        async with httpx.AsyncClient(follow_redirects=True, transport=http_transport) as client:
            response = await client.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
            metadata.update(
                {
                    "final_url": str(response.url),
                    "status_code": response.status_code,
                    "content_type": response.headers.get("content-type", ""),
                }
            )
            if response.status_code >= 400:
                metadata["error"] = f"HTTP Error {response.status_code}: {response.reason_phrase}"
                return (None, response.status_code, metadata)

            content = response.text
            metadata["size"] = len(content)
            return (content, response.status_code, metadata)

    except httpx.TimeoutException:
        metadata["error"] = f"Request timed out after {timeout} seconds"
        return (None, 408, metadata)  # 408 Request Timeout
    except httpx.RequestError as e:
        metadata["error"] = f"Request error: {str(e)}"
        return (None, 400, metadata)


# --- Tools ---


@mcp.tool()
async def stylize_code(code: str, lang: str, mode: str = "html") -> str:
    """
    Highlights source code with the named language grammar.

    Args:
        code: Source text to highlight.
        lang: Language name or alias (e.g. 'ts', 'html', 'bash', 'md').
        mode: 'html' for markup with token_<type> classes, 'ranges' for JSON
            highlight ranges per class ordered by priority.

    Returns:
        The rendering, or an error message.
    """
    error = check_input(code)
    if error:
        return error
    try:
        return render(code, lang, mode)
    except UnsupportedLanguageError as e:
        log.warning(f"stylize_code: {e}")
        return f"Error: {e}. Use list_languages to see supported languages."
    except (SyntaxStylerError, ValueError) as e:
        log.error(f"stylize_code failed for '{lang}': {e}")
        return f"Error: {e}"


@mcp.tool()
async def tokenize_code(code: str, lang: str) -> str:
    """
    Tokenizes source code and returns the nested token tree as JSON.

    Args:
        code: Source text to tokenize.
        lang: Language name or alias.

    Returns:
        JSON array of literal strings and token objects
        (type, alias, length, content), or an error message.
    """
    error = check_input(code)
    if error:
        return error
    try:
        tokens = syntax_styler_global.tokenize(code, lang)
    except UnsupportedLanguageError as e:
        log.warning(f"tokenize_code: {e}")
        return f"Error: {e}. Use list_languages to see supported languages."
    except (SyntaxStylerError, ValueError) as e:
        log.error(f"tokenize_code failed for '{lang}': {e}")
        return f"Error: {e}"
    return json.dumps([token_to_dict(item) for item in tokens])


@mcp.tool()
async def list_languages() -> str:
    """
    Lists the supported languages.

    Returns:
        JSON object mapping each canonical language name to its aliases.
    """
    aliases = syntax_styler_global.aliases
    return json.dumps(
        {
            name: sorted(alias for alias, canonical in aliases.items() if canonical == name)
            for name in syntax_styler_global.lang_names()
        }
    )


@mcp.tool()
async def stylize_url(
    url: str,
    lang: Optional[str] = None,
    mode: str = "html",
    timeout: int = FETCH_TIMEOUT,
) -> str:
    """
    Fetches a source file from a URL and highlights it.

    Args:
        url: URL of the source file.
        lang: Language name or alias; defaults to the URL path's file extension.
        mode: 'html' or 'ranges', as for stylize_code.
        timeout: Request timeout in seconds.

    Returns:
        The rendering, or an error message.
    """
    try:
        AnyUrl(url)
    except ValidationError as e:
        return f"Error: Invalid URL format: {e}"

    lang = lang or get_lang_for_file(urlparse(url).path)
    if not lang:
        return f"Error: Could not determine the language of {url}, pass lang explicitly."
    if not syntax_styler_global.has_lang(lang):
        return f"Error: {UnsupportedLanguageError(lang)}. Use list_languages to see supported languages."

    log.info(f"Fetching {url} to highlight as '{lang}'")
    content, status_code, metadata = await fetch_source(url, timeout=timeout)
    if content is None:
        error_msg = metadata.get("error") or f"Failed to fetch URL (Status: {status_code})"
        return f"Error fetching {url}: {error_msg}"

    return await stylize_code(content, lang, mode)


def main():
    configure_logging()
    print("Syntax Styler MCP Server running", file=sys.stderr)
    mcp.run()


if __name__ == "__main__":
    main()

"""Integration tests for the syntax styler command line tool, cache and MCP server."""

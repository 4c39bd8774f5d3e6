"""Unit tests for the syntax styler."""

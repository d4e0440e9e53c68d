"""Command line interface for capiscio-action."""

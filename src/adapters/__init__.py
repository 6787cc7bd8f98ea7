"""Adapters: I/O at the edges (HTTP transport, request template, input list)."""

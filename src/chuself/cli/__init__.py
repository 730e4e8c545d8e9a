"""Command line interface for chuself."""

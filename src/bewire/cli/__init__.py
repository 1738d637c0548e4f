"""Command line interface for bewire."""

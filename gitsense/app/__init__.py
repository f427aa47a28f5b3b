"""Command-line application layer for gsc."""

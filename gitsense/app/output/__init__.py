"""Renderers for tree output."""

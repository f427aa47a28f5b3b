"""Shared primitives: enums, errors, config, paths, globs, git, output."""

"""Filter, metadata, search, and tree engines behind the gsc commands."""

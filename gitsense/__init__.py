"""gitsense: metadata-aware code search and repository maps (``gsc``)."""

__version__ = "0.1.0"

"""Manifest database access: store discovery and batched metadata fetches."""

from gitsense.engine.metadata.fetcher import (
    FetchResult,
    FileMetadata,
    fetch_metadata_map,
    projected_fields,
)
from gitsense.engine.metadata.store import (
    describe_fields,
    get_available_fields,
    get_field_types,
    list_databases,
    list_field_values,
    open_store,
    resolve_database,
)

__all__ = [
    "FetchResult",
    "FileMetadata",
    "describe_fields",
    "fetch_metadata_map",
    "get_available_fields",
    "get_field_types",
    "list_databases",
    "list_field_values",
    "open_store",
    "projected_fields",
    "resolve_database",
]

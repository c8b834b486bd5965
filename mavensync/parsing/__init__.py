"""Parsers for repository index pages and descriptors."""

from .listing import (
    CompositeDirectoryListingParser,
    DefaultDirectoryListingParser,
    DirectoryListingParser,
    TableDirectoryListingParser,
    create_listing_parser,
)
from .metadata import MavenMetadataXml, MetadataReader, format_last_updated

__all__ = [
    "CompositeDirectoryListingParser",
    "DefaultDirectoryListingParser",
    "DirectoryListingParser",
    "TableDirectoryListingParser",
    "create_listing_parser",
    "MavenMetadataXml",
    "MetadataReader",
    "format_last_updated",
]

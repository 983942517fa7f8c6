"""Directory services supplying routing data."""

from services.directory import DirectoryService, InMemoryDirectory
from services.catalog import load_catalog, parse_catalog

__all__ = ["DirectoryService", "InMemoryDirectory", "load_catalog", "parse_catalog"]

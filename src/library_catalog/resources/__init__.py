"""Library Catalog MCP Resources Package

Resources are the read-only endpoints of the server: catalog listings,
individual records and the summary report. Writes go through tools.
"""

from .catalog import build_catalog_resources

__all__ = [
    "build_catalog_resources",
]

"""Library Catalog MCP Tools Package

Tools are the operations a client calls by name: searches, filters and the
Admin-only writes.
"""

from .catalog import build_catalog_tools

__all__ = [
    "build_catalog_tools",
]

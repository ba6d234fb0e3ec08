"""
Library Catalog Package.

A role-aware data-access layer for a lending library's books and members,
served over MCP.

Key Components:
- models: Pydantic records for books and members
- database: SQLAlchemy schema, session handling, repositories and seeding
- queries: text search, threshold filters and JSON projections
- reports: aggregate statistics
- access: role policy table and the access boundary
- config: settings with pydantic-settings
- tools / resources / server: the MCP surface
"""

__version__ = "0.1.0"

from . import database

__all__ = [
    "__version__",
    "database",
]

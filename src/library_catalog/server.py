"""Library Catalog MCP Server - Composition Root

This module wires the catalog together and runs it over MCP:

1. Configuration is loaded once (``get_config``)
2. A ``DatabaseManager`` is created for the configured store and the schema
   is ensured; when enabled, the bootstrap seed runs
3. Tools and resources are built around that one store handle and the
   client's resolved role, then registered with FastMCP

Nothing below this module looks the store up globally.
"""

import logging
import signal
import sys
from typing import Any

from fastmcp import FastMCP

from .access import Role
from .config import CatalogConfig, get_config
from .database.seed import seed_database
from .database.session import DatabaseManager
from .resources import build_catalog_resources
from .tools import build_catalog_tools

logger = logging.getLogger(__name__)


def configure_logging(config: CatalogConfig) -> None:
    """Log to stderr; stdout carries the stdio transport."""
    logging.basicConfig(
        level=logging.DEBUG if config.is_development else config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    if not config.is_development:
        logging.getLogger("fastmcp").setLevel(logging.WARNING)


def prepare_store(config: CatalogConfig) -> DatabaseManager:
    """Create the store handle, ensure the schema and run the bootstrap seed."""
    db = DatabaseManager(config.get_database_url())
    db.init_database()

    if config.seed_on_startup:
        with db.session_scope() as session:
            seed_database(session, config)

    return db


def create_server(config: CatalogConfig, db: DatabaseManager) -> FastMCP:
    """
    Build the FastMCP server for one store and the configured client role.

    Args:
        config: Server configuration
        db: Store handle; the caller owns its lifetime

    Returns:
        Server with every catalog tool and resource registered
    """
    role = Role.parse(config.client_role)

    mcp = FastMCP(
        name=config.server_name,
        instructions=(
            "Library Catalog - books and members of a lending library. Use "
            "search_books for public catalog lookups, the other tools to filter "
            "and maintain records, and library:// resources for listings and the "
            "summary report. Writes require the Admin role."
        ),
    )

    tools = build_catalog_tools(db, role)
    for tool in tools:
        mcp.tool(name=tool["name"], description=tool["description"])(tool["handler"])

    resources = build_catalog_resources(db, role)
    for resource in resources:
        mcp.resource(
            resource["uri"],
            name=resource["name"],
            description=resource["description"],
            mime_type=resource["mime_type"],
        )(resource["handler"])

    logger.info(
        "Registered %d tools and %d resources for role %s",
        len(tools),
        len(resources),
        role.value,
    )
    return mcp


def run_stdio_server(config: CatalogConfig) -> None:
    """Run the server on the stdio transport until terminated."""
    db = prepare_store(config)
    mcp = create_server(config, db)

    def signal_handler(signum: int, _frame: Any) -> None:
        logger.info("Received signal %s, initiating shutdown...", signum)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info("Starting %s v%s on stdio transport", config.server_name, config.server_version)
    try:
        mcp.run(transport="stdio")
    finally:
        db.close()


def main() -> None:
    """Entry point for ``library-catalog``."""
    config = get_config()
    configure_logging(config)

    try:
        logger.info("Library Catalog %s (role: %s)", config.server_version, config.client_role)
        run_stdio_server(config)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception:
        logger.exception("Failed to start Library Catalog server")
        sys.exit(1)


if __name__ == "__main__":
    main()

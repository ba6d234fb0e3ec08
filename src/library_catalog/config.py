"""Configuration management for the Library Catalog server.

Settings are loaded from the environment (prefix ``LIBRARY_CATALOG_``) and an
optional ``.env`` file:
1. Server Metadata - Name and version announced to MCP clients
2. Store - SQLite database path or an explicit SQLAlchemy URL
3. Access - The role resolved for the connected client
4. Bootstrap - Seed behaviour and bootstrap user identities
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogConfig(BaseSettings):
    """Library Catalog configuration.

    The store handle is not part of configuration: the composition root builds
    a ``DatabaseManager`` from ``get_database_url()`` and passes it down.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Server Metadata ===

    server_name: str = Field(
        default="library-catalog",
        description="Server name used in the MCP handshake",
        pattern=r"^[a-z0-9-]+$",
    )

    server_version: str = Field(
        default="0.1.0",
        description="Server version",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$",
    )

    # === Store Configuration ===

    database_path: Path = Field(
        default=Path("data/library_catalog.db"),
        description="SQLite database file path",
    )

    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL; overrides database_path when set",
    )

    # === Access Configuration ===

    client_role: str = Field(
        default="Anonymous",
        description="Role resolved for the connected client by the external auth provider",
        pattern=r"^(Admin|Member|Anonymous)$",
    )

    # === Bootstrap Configuration ===

    seed_on_startup: bool = Field(
        default=True,
        description="Ensure roles, bootstrap users and a sample book exist at startup",
    )

    bootstrap_admin_email: str = Field(
        default="admin@example.com",
        description="Email of the bootstrap Admin user",
    )

    bootstrap_member_email: str = Field(
        default="member@example.com",
        description="Email of the bootstrap Member user",
    )

    # === Development Configuration ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    @field_validator("database_path")
    @classmethod
    def validate_database_path(cls, v: Path) -> Path:
        """Make the path absolute and ensure its directory exists."""
        abs_path = v.absolute()
        abs_path.parent.mkdir(parents=True, exist_ok=True)

        if not abs_path.parent.is_dir():
            raise ValueError(f"Database directory {abs_path.parent} is not accessible")

        return abs_path

    @field_validator("server_name")
    @classmethod
    def validate_server_name(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("Server name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Server name must not exceed 50 characters")
        return v

    @property
    def is_development(self) -> bool:
        return self.debug or self.log_level == "DEBUG"

    def get_database_url(self) -> str:
        """Get the SQLAlchemy database URL."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.database_path}"


class _ConfigStore:
    """Internal storage for the configuration singleton."""

    _instance: CatalogConfig | None = None


def get_config() -> CatalogConfig:
    """Get or create the process-wide configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = CatalogConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]

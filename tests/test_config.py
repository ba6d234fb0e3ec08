"""Tests for configuration.

These tests demonstrate:
1. Default value behavior
2. Environment variable loading
3. Validation of names, roles and levels
4. Singleton access and reset
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from library_catalog.config import CatalogConfig, get_config, reset_config


class TestCatalogConfig:
    """Test configuration behavior."""

    def test_default_configuration(self, tmp_path):
        config = CatalogConfig(database_path=tmp_path / "catalog.db")

        assert config.server_name == "library-catalog"
        assert config.server_version == "0.1.0"
        assert config.client_role == "Anonymous"
        assert config.seed_on_startup is True
        assert config.bootstrap_admin_email == "admin@example.com"
        assert config.bootstrap_member_email == "member@example.com"
        assert config.database_url is None

    def test_environment_variable_loading(self, tmp_path):
        env_vars = {
            "LIBRARY_CATALOG_SERVER_NAME": "branch-catalog",
            "LIBRARY_CATALOG_DATABASE_PATH": str(tmp_path / "env.db"),
            "LIBRARY_CATALOG_CLIENT_ROLE": "Admin",
            "LIBRARY_CATALOG_SEED_ON_STARTUP": "false",
            "LIBRARY_CATALOG_LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars):
            config = CatalogConfig()

        assert config.server_name == "branch-catalog"
        assert config.database_path == tmp_path / "env.db"
        assert config.client_role == "Admin"
        assert config.seed_on_startup is False
        assert config.is_development is True

    def test_database_path_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = CatalogConfig(database_path=Path("nested/dir/catalog.db"))

        assert config.database_path.is_absolute()
        assert config.database_path.parent.is_dir()

    def test_database_url(self, tmp_path):
        config = CatalogConfig(database_path=tmp_path / "catalog.db")
        assert config.get_database_url() == f"sqlite:///{tmp_path / 'catalog.db'}"

        override = CatalogConfig(
            database_path=tmp_path / "catalog.db",
            database_url="postgresql://library@localhost/catalog",
        )
        assert override.get_database_url() == "postgresql://library@localhost/catalog"

    @pytest.mark.parametrize("name", ["Library_Catalog", "library catalog", "ab", "a" * 51])
    def test_invalid_server_names(self, tmp_path, name):
        with pytest.raises(ValidationError):
            CatalogConfig(server_name=name, database_path=tmp_path / "catalog.db")

    @pytest.mark.parametrize("role", ["Librarian", "admin", ""])
    def test_invalid_client_role(self, tmp_path, role):
        with pytest.raises(ValidationError):
            CatalogConfig(client_role=role, database_path=tmp_path / "catalog.db")

    def test_invalid_log_level(self, tmp_path):
        with pytest.raises(ValidationError):
            CatalogConfig(log_level="TRACE", database_path=tmp_path / "catalog.db")


def test_get_config_singleton(tmp_path):
    reset_config()
    with patch.dict(os.environ, {"LIBRARY_CATALOG_DATABASE_PATH": str(tmp_path / "s.db")}):
        first = get_config()
        assert get_config() is first

        reset_config()
        assert get_config() is not first
    reset_config()

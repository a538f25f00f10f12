"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_decimal, optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import TenantSyncConfig, get_tenant_sync_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "TenantSyncConfig",
    "configure_logging",
    "get_database_config",
    "get_storage_config",
    "get_tenant_sync_config",
    "optional_env_decimal",
    "optional_env_var",
]

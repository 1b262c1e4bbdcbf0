"""Tenant adapters: hostname resolution and per-tenant configuration."""

from atlas.providers.tenant.hostname_resolver import HostnameTenantResolver
from atlas.providers.tenant.sqlite_tenant_config_provider import SQLiteTenantConfigProvider

__all__ = ["HostnameTenantResolver", "SQLiteTenantConfigProvider"]

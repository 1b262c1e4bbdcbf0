"""Hostname-based tenant resolution.

Production requests identify their tenant by subdomain
(``bournemouth.example.com`` -> ``bournemouth``).  The tenant is never
read from the request body, and a ``?city=`` override is honoured only on
development and preview hosts (localhost, ``*.vercel.app``).  Trying to
override on a real tenant host is rejected with 403 so a user cannot
query another tenant's businesses by editing the URL.

Resolution order:

1. A query override on a non-fallback host -> 403.
2. The subdomain of the request host.
3. On fallback hosts: the query override, then the configured dev default.
4. Otherwise -> 400.
"""

from __future__ import annotations

import fnmatch
import ipaddress
import re
from collections.abc import Iterable, Mapping

import structlog

from atlas.interfaces.tenant_resolver import ITenantResolver
from atlas.utils.errors import TenantResolutionError

logger = structlog.get_logger(logger_name=__name__)

OVERRIDE_PARAM = "city"

_TENANT_ID = re.compile(r"^[a-z0-9][a-z0-9-]{0,62}$")
# Subdomains that belong to the platform itself, not to a tenant.
_RESERVED_SUBDOMAINS = frozenset({"www", "app", "api", "admin", "dashboard"})


def normalize_tenant(value: str) -> str:
    return value.strip().lower()


def _strip_port(host: str) -> str:
    host = host.strip().lower()
    if host.startswith("["):
        # [::1]:8000
        return host[1 : host.find("]")] if "]" in host else host
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


class HostnameTenantResolver(ITenantResolver):
    """Resolve tenants from the request host, with guarded dev overrides."""

    def __init__(
        self,
        base_domain: str = "",
        fallback_hosts: Iterable[str] = ("localhost", "127.0.0.1", "*.vercel.app"),
        dev_default_tenant: str = "",
        allowed_tenants: Iterable[str] = (),
    ) -> None:
        self._base_domain = base_domain.strip().lower().lstrip(".")
        self._fallback_patterns = [p.strip().lower() for p in fallback_hosts if p.strip()]
        self._dev_default = normalize_tenant(dev_default_tenant)
        self._allowed = frozenset(normalize_tenant(t) for t in allowed_tenants if t.strip())

    def is_fallback_host(self, hostname: str) -> bool:
        return any(fnmatch.fnmatch(hostname, pattern) for pattern in self._fallback_patterns)

    def tenant_from_hostname(self, hostname: str) -> str:
        """Return the tenant encoded in *hostname*, or ``""`` if there is none."""
        if not hostname or _is_ip(hostname):
            return ""
        if self._base_domain:
            suffix = "." + self._base_domain
            if not hostname.endswith(suffix):
                return ""
            label = hostname[: -len(suffix)].rsplit(".", 1)[-1]
        else:
            if self.is_fallback_host(hostname):
                return ""
            labels = hostname.split(".")
            if len(labels) < 3:
                return ""
            label = labels[0]
        if label in _RESERVED_SUBDOMAINS:
            return ""
        return label

    def resolve(self, host: str | None, query_params: Mapping[str, str]) -> str:
        hostname = _strip_port(host or "")
        fallback = self.is_fallback_host(hostname)
        override = normalize_tenant(query_params.get(OVERRIDE_PARAM) or "")

        if override and not fallback:
            logger.warning("tenant_override_rejected", hostname=hostname)
            raise TenantResolutionError(
                message="Tenant override is not allowed on this host.",
                status_code=403,
                provider_name="hostname",
            )

        tenant = self.tenant_from_hostname(hostname)
        source = "hostname"
        if not tenant and fallback:
            if override:
                tenant, source = override, "query"
            elif self._dev_default:
                tenant, source = self._dev_default, "env"

        if not tenant:
            logger.warning("tenant_unresolved", hostname=hostname, fallback=fallback)
            raise TenantResolutionError(
                message=(
                    "No tenant detected. Pass ?city=<tenant> or set DEV_DEFAULT_TENANT."
                    if fallback
                    else "No tenant detected from hostname."
                ),
                status_code=400,
                provider_name="hostname",
            )

        if not _TENANT_ID.match(tenant) or (self._allowed and tenant not in self._allowed):
            logger.warning("tenant_unknown", tenant_id=tenant, source=source)
            raise TenantResolutionError(
                message="Unknown tenant.",
                status_code=400,
                provider_name="hostname",
            )

        logger.debug("tenant_resolved", tenant_id=tenant, source=source, hostname=hostname)
        return tenant

"""Listing and detail operations for account resources.

Each resource family is described once by a ``ResourceKind``: where its
identifiers are listed, how a menu label is derived, and which detail
fields are shown in which section. Dotted field names reach into nested
objects (``iam.displayName``).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from ..format import FormatterOptions, OutputFormatter, SectionConfig
from ..menu.types import ResourceEntry
from ..remote import endpoints
from ..remote.errors import RemoteError
from ..remote.source import RemoteDataSource
from .registry import BoundOperation, CommandOutput, ListOperation

logger = structlog.get_logger(__name__)


def lookup(data: Any, dotted: str) -> Any:
    """Return ``data[a][b]`` for ``"a.b"``; ``None`` when any step is missing."""
    value = data
    for part in dotted.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


@dataclass(frozen=True)
class ResourceKind:
    key: str
    title: str
    base_path: str
    sections: tuple[tuple[str, tuple[tuple[str, str], ...]], ...]
    label_fields: tuple[str, ...] = ()
    describe: Callable[[dict[str, Any]], str] | None = None

    @property
    def binding(self) -> str:
        return f"{self.key}:detail"

    def detail_path(self, resource_id: str) -> str:
        return endpoints.resource_path(self.base_path, resource_id)

    def label_for(self, resource_id: str, info: dict[str, Any]) -> str:
        for dotted in self.label_fields:
            value = lookup(info, dotted)
            if value:
                return str(value)
        return resource_id


def _server_description(info: dict[str, Any]) -> str:
    parts = [str(v) for v in (info.get("datacenter"), info.get("state")) if v]
    return " / ".join(parts)


DEDICATED_SERVERS = ResourceKind(
    key="dedicated_servers",
    title="Dedicated server",
    base_path=endpoints.DEDICATED_SERVERS,
    label_fields=("iam.displayName", "reverse", "name"),
    describe=_server_description,
    sections=(
        (
            "Server",
            (
                ("iam.displayName", "Display Name"),
                ("name", "Service Name"),
                ("serverId", "Server ID"),
                ("reverse", "Reverse"),
                ("ip", "IP Address"),
                ("state", "State"),
                ("powerState", "Power State"),
                ("commercialRange", "Commercial Range"),
                ("os", "Operating System"),
            ),
        ),
        (
            "Location",
            (
                ("datacenter", "Datacenter"),
                ("region", "Region"),
                ("availabilityZone", "Availability Zone"),
                ("rack", "Rack"),
            ),
        ),
        (
            "Support",
            (
                ("supportLevel", "Support Level"),
                ("professionalUse", "Professional Use"),
                ("monitoring", "Monitoring"),
                ("linkSpeed", "Link Speed"),
                ("rescueMail", "Rescue Email"),
            ),
        ),
    ),
)

VPS = ResourceKind(
    key="vps",
    title="VPS",
    base_path=endpoints.VPS,
    label_fields=("displayName", "iam.displayName", "name"),
    sections=(
        (
            "VPS",
            (
                ("displayName", "Display Name"),
                ("name", "Service Name"),
                ("state", "State"),
                ("zone", "Zone"),
                ("cluster", "Cluster"),
                ("offerType", "Offer"),
                ("netbootMode", "Netboot Mode"),
                ("slaMonitoring", "SLA Monitoring"),
            ),
        ),
        (
            "Model",
            (
                ("model.name", "Model"),
                ("model.offer", "Offer"),
                ("vcore", "vCores"),
                ("memoryLimit", "Memory (MB)"),
                ("model.disk", "Disk (GB)"),
                ("model.version", "Version"),
            ),
        ),
    ),
)

DOMAINS = ResourceKind(
    key="domains",
    title="Domain",
    base_path=endpoints.DOMAINS,
    sections=(
        (
            "Domain",
            (
                ("domain", "Domain"),
                ("offer", "Offer"),
                ("nameServerType", "Name Server Type"),
                ("transferLockStatus", "Transfer Lock"),
                ("dnssecSupported", "DNSSEC Supported"),
                ("owoSupported", "Whois Obfuscation"),
                ("whoisOwner", "Whois Owner"),
                ("lastUpdate", "Last Update"),
            ),
        ),
    ),
)

HOSTING = ResourceKind(
    key="hosting",
    title="Hosting plan",
    base_path=endpoints.WEB_HOSTING,
    sections=(
        (
            "Hosting",
            (
                ("displayName", "Display Name"),
                ("serviceName", "Service Name"),
                ("offer", "Offer"),
                ("state", "State"),
                ("cluster", "Cluster"),
                ("datacenter", "Datacenter"),
                ("hostingIp", "IPv4"),
                ("hostingIpv6", "IPv6"),
                ("primaryLogin", "Primary Login"),
                ("home", "Home Directory"),
                ("operatingSystem", "Operating System"),
            ),
        ),
        (
            "Quota",
            (
                ("quotaSize.value", "Size"),
                ("quotaSize.unit", "Size Unit"),
                ("quotaUsed.value", "Used"),
                ("quotaUsed.unit", "Used Unit"),
            ),
        ),
    ),
)

RESOURCE_KINDS: tuple[ResourceKind, ...] = (DEDICATED_SERVERS, VPS, DOMAINS, HOSTING)


def list_resources(kind: ResourceKind, source: RemoteDataSource) -> list[ResourceEntry]:
    """Return one entry per listed identifier.

    Kinds with label fields fetch each resource's details for its label; a
    failed detail fetch falls back to the raw identifier.
    """
    ids = source.get(kind.base_path) or []
    entries: list[ResourceEntry] = []
    for raw_id in ids:
        resource_id = str(raw_id)
        label = resource_id
        description = ""
        if kind.label_fields or kind.describe is not None:
            try:
                info = source.get(kind.detail_path(resource_id)) or {}
            except RemoteError as exc:
                logger.warning("resource_label_failed", kind=kind.key, id=resource_id, error=str(exc))
            else:
                label = kind.label_for(resource_id, info)
                if kind.describe is not None:
                    description = kind.describe(info)
        entries.append(ResourceEntry(resource_id, label, kind.binding, description))
    return entries


def format_resource(kind: ResourceKind, resource_id: str, info: dict[str, Any]) -> str:
    formatter = OutputFormatter(FormatterOptions(max_width=80))
    config = SectionConfig(key_value_spacing=2)
    for index, (title, fields) in enumerate(kind.sections):
        section = formatter.add_section(title if index else f"{kind.title}: {resource_id}", config)
        for dotted, label in fields:
            section.add_field(label, lookup(info, dotted), skip_if_empty=True)
    return formatter.render() or f"No details available for {resource_id}.\n"


def show_resource(kind: ResourceKind, source: RemoteDataSource, resource_id: str | None) -> CommandOutput:
    if not resource_id:
        raise ValueError(f"{kind.title} detail needs a resource id")
    info = source.get(kind.detail_path(resource_id)) or {}
    return CommandOutput(format_resource(kind, resource_id, info), info)


def detail_operation(kind: ResourceKind) -> BoundOperation:
    return BoundOperation(kind.binding, lambda source, resource_id: show_resource(kind, source, resource_id))


def list_operation(kind: ResourceKind) -> ListOperation:
    return ListOperation(kind.key, lambda source: list_resources(kind, source))


__all__ = [
    "DEDICATED_SERVERS",
    "DOMAINS",
    "HOSTING",
    "RESOURCE_KINDS",
    "ResourceKind",
    "VPS",
    "detail_operation",
    "format_resource",
    "list_operation",
    "list_resources",
    "lookup",
    "show_resource",
]

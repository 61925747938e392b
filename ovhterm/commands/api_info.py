"""``API information``: applications and the credentials issued for them."""

from __future__ import annotations

from typing import Any

import structlog

from ..format import FormatterOptions, OutputFormatter
from ..remote import endpoints
from ..remote.errors import RemoteError
from ..remote.source import RemoteDataSource
from .registry import BoundOperation, CommandOutput

logger = structlog.get_logger(__name__)

MAX_WIDTH = 100

# Credentials can reference applications that are not listed under the
# account, such as the one behind the customer control panel.
KNOWN_APPLICATIONS: dict[int, dict[str, Any]] = {
    115: {
        "applicationId": 115,
        "name": "OVH Website",
        "description": "Official OVH website application",
        "status": "active",
    },
}


def _fetch_details(source: RemoteDataSource, base: str, ids: list[Any]) -> dict[int, dict[str, Any]]:
    details: dict[int, dict[str, Any]] = {}
    for ident in ids:
        try:
            details[int(ident)] = source.get(endpoints.resource_path(base, ident)) or {}
        except RemoteError as exc:
            # One unreadable entry should not hide the rest of the report.
            logger.warning("api_detail_failed", path=base, id=ident, error=str(exc))
    return details


def fetch_api_info(source: RemoteDataSource) -> dict[str, Any]:
    app_ids = source.get(endpoints.API_APPLICATIONS) or []
    cred_ids = source.get(endpoints.API_CREDENTIALS) or []
    return {
        "applications": _fetch_details(source, endpoints.API_APPLICATIONS, app_ids),
        "credentials": _fetch_details(source, endpoints.API_CREDENTIALS, cred_ids),
    }


def group_by_application(
    applications: dict[int, dict[str, Any]],
    credentials: dict[int, dict[str, Any]],
) -> dict[int, tuple[dict[str, Any], list[dict[str, Any]]]]:
    """Attach each credential to its application, inventing entries for unknown ones."""
    grouped: dict[int, tuple[dict[str, Any], list[dict[str, Any]]]] = {
        app_id: (app, []) for app_id, app in applications.items()
    }
    for cred_id in sorted(credentials):
        cred = credentials[cred_id]
        app_id = int(cred.get("applicationId") or 0)
        if app_id not in grouped:
            app = KNOWN_APPLICATIONS.get(app_id) or {
                "applicationId": app_id,
                "name": "Unknown Application",
                "description": "Application details not available",
                "status": "unknown",
            }
            grouped[app_id] = (app, [])
        grouped[app_id][1].append(cred)
    return grouped


def format_credential(cred: dict[str, Any]) -> str:
    lines = [
        f"Status: {cred.get('status') or ''}",
        f"Created: {cred.get('creation') or ''}",
        f"Expires: {cred.get('expiration') or ''}".rstrip(),
        f"Last used: {cred.get('lastUse') or ''}".rstrip(),
    ]
    allowed = cred.get("allowedIPs") or []
    if allowed:
        lines.append("Allowed IPs:")
        lines.extend(f"• {ip}" for ip in allowed)
    rules = cred.get("rules") or []
    if rules:
        lines.append("Access rules:")
        lines.extend(f"• {rule.get('method', '')} {rule.get('path', '')}" for rule in rules)
    if cred.get("ovhSupport"):
        lines.append("OVH Support access enabled")
    return "\n".join(lines)


def format_api_info(data: dict[str, Any]) -> str:
    grouped = group_by_application(data["applications"], data["credentials"])
    formatter = OutputFormatter(FormatterOptions(max_width=MAX_WIDTH))
    for app_id in sorted(grouped):
        app, creds = grouped[app_id]
        section = formatter.add_section(f"Application: {app.get('name') or app_id}")
        section.add_field("ID", app_id)
        section.add_fields(
            app,
            {
                "applicationKey": "API Key",
                "status": "Status",
                "description": "Description",
            },
        )
        if not creds:
            section.add_field("Credentials", "No active credentials")
        for cred in sorted(creds, key=lambda c: int(c.get("credentialId") or 0)):
            section.add_field(f"Credential {cred.get('credentialId')}", format_credential(cred))
    if not grouped:
        return "No API applications found.\n"
    return formatter.render()


def show_api_info(source: RemoteDataSource, resource_id: str | None = None) -> CommandOutput:
    data = fetch_api_info(source)
    logger.debug("fetch_api_info", applications=len(data["applications"]), credentials=len(data["credentials"]))
    payload = {
        "applications": list(data["applications"].values()),
        "credentials": list(data["credentials"].values()),
    }
    return CommandOutput(format_api_info(data), payload)


API_INFO_OPERATION = BoundOperation("api_info", show_api_info)

__all__ = [
    "API_INFO_OPERATION",
    "fetch_api_info",
    "format_api_info",
    "format_credential",
    "group_by_application",
    "show_api_info",
]

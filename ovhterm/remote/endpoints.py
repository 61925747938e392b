"""API endpoint aliases and path helpers."""

from __future__ import annotations

from urllib.parse import quote

ENDPOINT_URLS: dict[str, str] = {
    "ovh-eu": "https://eu.api.ovh.com/1.0",
    "ovh-us": "https://api.us.ovhcloud.com/1.0",
    "ovh-ca": "https://ca.api.ovh.com/1.0",
    "kimsufi-eu": "https://eu.api.kimsufi.com/1.0",
    "kimsufi-ca": "https://ca.api.kimsufi.com/1.0",
    "soyoustart-eu": "https://eu.api.soyoustart.com/1.0",
    "soyoustart-ca": "https://ca.api.soyoustart.com/1.0",
}

ME = "/me"
API_APPLICATIONS = "/me/api/application"
API_CREDENTIALS = "/me/api/credential"
DEDICATED_SERVERS = "/dedicated/server"
VPS = "/vps"
DOMAINS = "/domain"
WEB_HOSTING = "/hosting/web"


def resolve_endpoint_url(endpoint: str) -> str:
    """Map an alias like ``ovh-eu`` to its base URL; full URLs pass through."""
    if endpoint.startswith(("https://", "http://")):
        return endpoint.rstrip("/")
    try:
        return ENDPOINT_URLS[endpoint]
    except KeyError:
        raise ValueError(f"unknown endpoint: {endpoint}") from None


def resource_path(base: str, resource_id: str | int, *parts: str) -> str:
    """Join ``base`` with a quoted resource id and optional sub-paths."""
    segments = [base.rstrip("/"), quote(str(resource_id), safe="")]
    segments.extend(part.strip("/") for part in parts if part)
    return "/".join(segments)

"""``My information``: the account profile from ``GET /me``."""

from __future__ import annotations

from typing import Any

import structlog

from ..format import FormatterOptions, OutputFormatter, SectionConfig
from ..remote import endpoints
from ..remote.source import RemoteDataSource
from .registry import BoundOperation, CommandOutput

logger = structlog.get_logger(__name__)

MAX_WIDTH = 80
KEY_VALUE_SPACING = 4


def _currency(info: dict[str, Any]) -> str:
    currency = info.get("currency")
    if not isinstance(currency, dict):
        return ""
    code = currency.get("code") or ""
    symbol = currency.get("symbol") or ""
    return f"{code} ({symbol})" if symbol else code


def _phone(info: dict[str, Any]) -> str:
    phone = info.get("phone") or ""
    country = info.get("phoneCountry") or ""
    if phone and country:
        return f"{phone} ({country})"
    return phone


def format_account(info: dict[str, Any]) -> str:
    """Render the account profile as four sections."""
    formatter = OutputFormatter(FormatterOptions(max_width=MAX_WIDTH))
    config = SectionConfig(key_value_spacing=KEY_VALUE_SPACING)

    formatter.add_section("Account Details", config).add_fields(
        info,
        {
            "nichandle": "NIC Handle",
            "customerCode": "Customer Code",
            "state": "Account State",
            "kycValidated": "KYC Validated",
        },
    )
    formatter.add_section("Company Information", config).add_field(
        "Organization", info.get("organisation"), skip_if_empty=True
    ).add_field("Currency", _currency(info), skip_if_empty=True)

    full_name = " ".join(part for part in (info.get("firstname"), info.get("name")) if part)
    formatter.add_section("Personal Information", config).add_field(
        "Name", full_name, skip_if_empty=True
    ).add_field("Email", info.get("email"), skip_if_empty=True).add_field(
        "Phone", _phone(info), skip_if_empty=True
    ).add_field("Language", info.get("language"), skip_if_empty=True)

    formatter.add_section("Address", config).add_fields(
        info,
        {
            "address": "Street",
            "zip": "Postal Code",
            "city": "City",
            "country": "Country",
        },
    )
    return formatter.render()


def show_account(source: RemoteDataSource, resource_id: str | None = None) -> CommandOutput:
    logger.debug("fetch_account")
    info = source.get(endpoints.ME) or {}
    return CommandOutput(format_account(info), info)


ACCOUNT_OPERATION = BoundOperation("me", show_account)

__all__ = ["ACCOUNT_OPERATION", "format_account", "show_account"]

"""``canvelete usage`` and ``canvelete billing``."""

from __future__ import annotations

from typing import Any

import click

from canvelete.bootstrap import AppContainer
from canvelete.service_layer.designs import unwrap

from .designs import limit_option, page_option
from .helpers import call_api, info, json_option, pass_app
from .helpers.output import (
    format_bytes,
    format_date,
    items_of,
    print_fields,
    print_json,
    print_table,
    short_id,
)


def _amount(invoice: dict[str, Any]) -> str:
    try:
        return f"{invoice.get('currency') or ''} {float(invoice.get('amount') or 0):.2f}".strip()
    except (TypeError, ValueError):
        return str(invoice.get("amount"))


# ============================================================================
#                                   usage
# ============================================================================


@click.group()
def usage() -> None:
    """Show usage statistics."""


@usage.command("stats")
@json_option
@pass_app
def usage_stats(app: AppContainer, as_json: bool) -> None:
    """Credits, API calls, renders and storage for the current period."""
    result = call_api(app, lambda client: client.get_usage_stats())
    if as_json:
        print_json(result)
        return
    data = unwrap(result)
    print_fields(
        "Usage Statistics",
        [
            ("Credits Used", f"{data.get('creditsUsed')} / {data.get('creditLimit')}"),
            ("Credits Remaining", data.get("creditsRemaining")),
            ("API Calls", f"{data.get('apiCalls')} / {data.get('apiCallLimit')}"),
            ("Renders", data.get("renders")),
            ("Storage Used", format_bytes(data.get("storageUsed"))),
        ],
    )


@usage.command("history")
@limit_option
@page_option
@json_option
@pass_app
def usage_history(app: AppContainer, limit: int, page: int, as_json: bool) -> None:
    """Usage events, most recent first."""
    result = call_api(app, lambda client: client.get_usage_history(page=page, limit=limit))
    if as_json:
        print_json(result)
        return
    events = items_of(result)
    if not events:
        info("No usage history found.")
        return
    print_table(
        ["Date", "Type", "Credits", "Description"],
        [
            [
                format_date(e.get("createdAt") or e.get("date")),
                e.get("type"),
                e.get("credits"),
                e.get("description"),
            ]
            for e in events
        ],
    )


# ============================================================================
#                                  billing
# ============================================================================


@click.group()
def billing() -> None:
    """Show billing information."""


@billing.command("info")
@json_option
@pass_app
def billing_info(app: AppContainer, as_json: bool) -> None:
    """Plan, status and credit balance."""
    result = call_api(app, lambda client: client.get_billing_info())
    if as_json:
        print_json(result)
        return
    data = unwrap(result)
    print_fields(
        "Billing Information",
        [
            ("Plan", data.get("plan")),
            ("Status", data.get("status")),
            ("Credit Balance", data.get("creditBalance")),
            ("Next Billing", format_date(data.get("nextBillingDate"))),
            (
                "Period",
                f"{format_date(data.get('currentPeriodStart'))} - "
                f"{format_date(data.get('currentPeriodEnd'))}",
            ),
        ],
    )


@billing.command("invoices")
@limit_option
@json_option
@pass_app
def invoices(app: AppContainer, limit: int, as_json: bool) -> None:
    """List invoices."""
    result = call_api(app, lambda client: client.get_invoices(limit=limit))
    if as_json:
        print_json(result)
        return
    items = items_of(result)
    if not items:
        info("No invoices found.")
        return
    print_table(
        ["ID", "Date", "Amount", "Status"],
        [[short_id(i.get("id")), format_date(i.get("date")), _amount(i), i.get("status")] for i in items],
    )

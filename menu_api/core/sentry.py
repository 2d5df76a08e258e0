from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from menu_api.core.config import settings


MENU_ITEM_PATH = re.compile(r"/api/menu/([0-9]+)/?$")


def menu_item_id_from_url(url: str | None) -> str | None:
    """Return the menu item id addressed by an /api/menu/<id> URL, if any."""
    if not url:
        return None
    match = MENU_ITEM_PATH.search(urlsplit(url).path)
    return match.group(1) if match else None


def before_send(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """Tag Sentry events with the request id and the menu item being handled.

    Menu payloads are dropped from the event; the item id tag is enough to
    find the record.
    """
    tags = event.setdefault("tags", {})
    request = hint.get("request")
    if request is not None and hasattr(request, "headers"):
        request_id = request.headers.get("x-request-id")
        if request_id:
            tags["request_id"] = request_id

    request_data = event.get("request")
    if request_data is not None:
        item_id = menu_item_id_from_url(request_data.get("url"))
        if item_id is not None:
            tags["menu_item_id"] = item_id
        request_data.pop("data", None)

    if not tags:
        event.pop("tags")
    return event


def init_sentry() -> bool:
    """Initialize Sentry error tracking. Returns False when no DSN is configured."""
    if not settings.sentry_dsn:
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment or settings.environment,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=None,
                event_level=None,  # Don't create events from logs
            ),
        ],
        traces_sample_rate=0.1,
        before_send=before_send,
        send_default_pii=False,
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )

    sentry_sdk.set_tag("service", settings.app_name)
    sentry_sdk.set_tag("environment", settings.environment)
    return True

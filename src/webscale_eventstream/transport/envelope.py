"""
Envelope construction for the clickstream collector.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from webscale_eventstream.models.envelope import EventEnvelope, EventPayload, EventUser, StoreScope

ENDPOINT_PATH = "/.clickstream/events/batch"

MODULE_NAME = "Webscale_EventStream"
MODULE_PLATFORM = "magento"
MODULE_EVENT_LOGIN = "login"
SDK_NAME = "webscale/eventstream"

COOKIE_ID = "wbs_uid"

NON_JSON_PLACEHOLDER = "[non-JSON response omitted]"


def build_endpoint(base_url: str) -> str:
    """Collector URL: store base URL without trailing slash + fixed path."""
    return base_url.rstrip("/") + ENDPOINT_PATH


def generate_event_id() -> str:
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with offset, e.g. 2026-01-25T14:30:05+00:00."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def sdk_string(version: Optional[str]) -> str:
    return f"{SDK_NAME}:{version or ''}"


def build_envelope(
    user_id: Any,
    email: Any,
    store_code: str,
    website_code: str,
    version: Optional[str] = None,
    cookie_name: str = COOKIE_ID,
    cookie_value: Optional[str] = None,
    event_name: str = MODULE_EVENT_LOGIN,
) -> list[dict[str, Any]]:
    """Build the batch body: a one-element list holding the event."""
    envelope = EventEnvelope(
        platform=MODULE_PLATFORM,
        sdk=sdk_string(version),
        event_name=event_name,
        event_id=generate_event_id(),
        timestamp=utc_timestamp(),
        user=EventUser(
            user_id="" if user_id is None else str(user_id),
            magento=StoreScope(store_id=store_code, website_id=website_code),
        ),
        payload=EventPayload(email="" if email is None else str(email), **{cookie_name: cookie_value}),
    )
    return [envelope.model_dump()]


def loggable_body(body: str) -> str:
    """Return the body if it looks like JSON, otherwise a placeholder."""
    stripped = body.strip()
    if stripped.startswith("{") or stripped.startswith("["):
        return body
    return NON_JSON_PLACEHOLDER

import logging
from typing import Any, Callable, Optional

import httpx
import pytest

from webscale_eventstream.config import XML_PATH_ENABLED, XML_PATH_LOGGING
from webscale_eventstream.context import (
    StaticConfig,
    StaticCookies,
    StaticModuleRegistry,
    StaticRequest,
    StaticStore,
)
from webscale_eventstream.forwarder import AsyncLoginEventForwarder, LoginEventForwarder
from webscale_eventstream.log import LOGGER_NAME
from webscale_eventstream.transport.envelope import MODULE_NAME

BASE_URL = "https://shop.example.com/"
ENDPOINT = "https://shop.example.com/.clickstream/events/batch"


class CountingConfig(StaticConfig):
    """StaticConfig that records every flag read."""

    def __init__(self, flags=None):
        super().__init__(flags)
        self.reads: list[str] = []

    def is_set_flag(self, path: str, scope: str) -> bool:
        self.reads.append(path)
        return super().is_set_flag(path, scope)


def make_collaborators(
    enabled: bool = True,
    logging_enabled: bool = True,
    base_url: Optional[str] = BASE_URL,
    app_id: Optional[str] = "app-123",
    cookie: Optional[str] = "uid-abc",
    version: Optional[str] = "1.2.0",
) -> dict[str, Any]:
    return {
        "config": CountingConfig({XML_PATH_ENABLED: enabled, XML_PATH_LOGGING: logging_enabled}),
        "store": StaticStore(base_url, store_code="default", website_code="base"),
        "request": StaticRequest({"Webscale-App-Id": app_id} if app_id is not None else {}),
        "cookies": StaticCookies({"wbs_uid": cookie} if cookie is not None else {}),
        "modules": StaticModuleRegistry({MODULE_NAME: version} if version else {}),
    }


class Recorder:
    """httpx mock handler that records requests and returns a canned response."""

    def __init__(self, status_code: int = 200, body: str = '{"ok":true}', error: Optional[Exception] = None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.body)


@pytest.fixture
def records(caplog) -> Callable[[], list[logging.LogRecord]]:
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)

    def _records() -> list[logging.LogRecord]:
        return [r for r in caplog.records if r.name == LOGGER_NAME]

    return _records


@pytest.fixture
def make_forwarder():
    created: list[LoginEventForwarder] = []

    def _make(recorder: Recorder, **kwargs: Any) -> LoginEventForwarder:
        forwarder = LoginEventForwarder(
            **make_collaborators(**kwargs), transport=httpx.MockTransport(recorder),
        )
        created.append(forwarder)
        return forwarder

    yield _make
    for forwarder in created:
        forwarder.close()


def make_async_forwarder(handler: Callable, timeout: float = 5.0, **kwargs: Any) -> AsyncLoginEventForwarder:
    return AsyncLoginEventForwarder(
        **make_collaborators(**kwargs), transport=httpx.MockTransport(handler), timeout=timeout,
    )

"""
Login event forwarder — sends one clickstream event per successful login.

Best effort, at most once: the outcome is logged and returned, and nothing
is ever raised to the login flow.
"""

import logging
import traceback
from enum import Enum
from typing import Any, Optional

from webscale_eventstream.config import SCOPE_WEBSITE, XML_PATH_ENABLED, XML_PATH_LOGGING
from webscale_eventstream.context import ConfigReader, CookieReader, ModuleRegistry, RequestContext, StoreContext
from webscale_eventstream.log import logger as default_logger
from webscale_eventstream.models.envelope import EventPayload
from webscale_eventstream.transport.envelope import (
    COOKIE_ID,
    MODULE_NAME,
    build_endpoint,
    build_envelope,
    loggable_body,
)
from webscale_eventstream.transport.http import (
    APP_ID_HEADER,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_TIMEOUT,
    AsyncCollectorClient,
    CollectorClient,
    CollectorResponse,
)

LOG_PREFIX = "[Webscale_EventStream]"
RESERVED_PAYLOAD_FIELDS = frozenset(EventPayload.model_fields)


class DeliveryOutcome(str, Enum):
    DISABLED = "disabled"
    NO_CUSTOMER = "no_customer"
    SENT = "sent"
    REJECTED = "rejected"
    FAILED = "failed"


class _LoggingFlag:
    """Developer logging flag, read at most once per invocation."""

    def __init__(self, config: ConfigReader):
        self._config = config
        self._value: Optional[bool] = None

    def __call__(self) -> bool:
        if self._value is None:
            self._value = self._config.is_set_flag(XML_PATH_LOGGING, SCOPE_WEBSITE)
        return self._value


class _BaseForwarder:
    def __init__(
        self,
        config: ConfigReader,
        store: StoreContext,
        request: RequestContext,
        cookies: CookieReader,
        modules: ModuleRegistry,
        logger: Optional[logging.Logger] = None,
        cookie_name: str = COOKIE_ID,
    ):
        if cookie_name in RESERVED_PAYLOAD_FIELDS:
            raise ValueError(f"cookie_name {cookie_name!r} collides with a payload field")
        self._config = config
        self._store = store
        self._request = request
        self._cookies = cookies
        self._modules = modules
        self._logger = logger or default_logger
        self._cookie_name = cookie_name

    def is_enabled(self) -> bool:
        return self._config.is_set_flag(XML_PATH_ENABLED, SCOPE_WEBSITE)

    def get_endpoint(self) -> str:
        # resolved per call, the base URL depends on the current store
        return build_endpoint(self._store.get_base_url())

    def get_app_id(self) -> str:
        return self._request.get_header(APP_ID_HEADER) or ""

    def get_payload(self, customer: Any) -> list[dict[str, Any]]:
        return build_envelope(
            user_id=customer.id,
            email=customer.email,
            store_code=self._store.get_store_code(),
            website_code=self._store.get_website_code(),
            version=self._modules.get_version(MODULE_NAME),
            cookie_name=self._cookie_name,
            cookie_value=self._cookies.get_cookie(self._cookie_name),
        )

    def _no_customer(self, logging_enabled: _LoggingFlag) -> DeliveryOutcome:
        if logging_enabled():
            self._logger.info(f"{LOG_PREFIX} No customer on customer_login event")
        return DeliveryOutcome.NO_CUSTOMER

    def _report(
        self, endpoint: str, payload: Any, response: CollectorResponse, logging_enabled: _LoggingFlag,
    ) -> DeliveryOutcome:
        if response.ok:
            if logging_enabled():
                self._logger.info(
                    f"{LOG_PREFIX} Login payload sent",
                    extra={"context": {"endpoint": endpoint, "payload": payload, "response": response.body}},
                )
            return DeliveryOutcome.SENT

        self._logger.warning(
            f"{LOG_PREFIX} HTTP {response.status_code} while sending login payload",
            extra={"context": {"endpoint": endpoint, "payload": payload, "response": loggable_body(response.body)}},
        )
        return DeliveryOutcome.REJECTED

    def _report_exception(self, exc: BaseException) -> DeliveryOutcome:
        # never block login flow
        self._logger.error(
            f"{LOG_PREFIX} Exception while sending login payload",
            extra={"context": {
                "message": str(exc),
                "trace": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            }},
        )
        return DeliveryOutcome.FAILED


class LoginEventForwarder(_BaseForwarder):
    """Synchronous forwarder, called on the thread handling the login."""

    def __init__(
        self,
        config: ConfigReader,
        store: StoreContext,
        request: RequestContext,
        cookies: CookieReader,
        modules: ModuleRegistry,
        logger: Optional[logging.Logger] = None,
        cookie_name: str = COOKIE_ID,
        http: Optional[CollectorClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        transport: Any = None,
    ):
        super().__init__(config, store, request, cookies, modules, logger, cookie_name)
        self._http = http or CollectorClient(timeout=timeout, connect_timeout=connect_timeout, transport=transport)

    def on_login_success(self, event: Any) -> DeliveryOutcome:
        try:
            if not self.is_enabled():
                return DeliveryOutcome.DISABLED

            logging_enabled = _LoggingFlag(self._config)
            customer = getattr(event, "customer", None)
            if not customer:
                return self._no_customer(logging_enabled)

            endpoint = self.get_endpoint()
            app_id = self.get_app_id()
            payload = self.get_payload(customer)

            response = self._http.post(endpoint, payload, app_id)
            return self._report(endpoint, payload, response, logging_enabled)
        except Exception as e:
            return self._report_exception(e)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "LoginEventForwarder":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


class AsyncLoginEventForwarder(_BaseForwarder):
    """Async forwarder for hosts running an event loop."""

    def __init__(
        self,
        config: ConfigReader,
        store: StoreContext,
        request: RequestContext,
        cookies: CookieReader,
        modules: ModuleRegistry,
        logger: Optional[logging.Logger] = None,
        cookie_name: str = COOKIE_ID,
        http: Optional[AsyncCollectorClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        transport: Any = None,
    ):
        super().__init__(config, store, request, cookies, modules, logger, cookie_name)
        self._http = http or AsyncCollectorClient(
            timeout=timeout, connect_timeout=connect_timeout, transport=transport,
        )

    async def on_login_success(self, event: Any) -> DeliveryOutcome:
        try:
            if not self.is_enabled():
                return DeliveryOutcome.DISABLED

            logging_enabled = _LoggingFlag(self._config)
            customer = getattr(event, "customer", None)
            if not customer:
                return self._no_customer(logging_enabled)

            endpoint = self.get_endpoint()
            app_id = self.get_app_id()
            payload = self.get_payload(customer)

            response = await self._http.post(endpoint, payload, app_id)
            return self._report(endpoint, payload, response, logging_enabled)
        except Exception as e:
            return self._report_exception(e)

    async def aclose(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> "AsyncLoginEventForwarder":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

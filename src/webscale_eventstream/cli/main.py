"""
Webscale event stream CLI — `eventstream` command.

Commands:
  eventstream preview          Print the login event that would be sent
  eventstream send             Forward one login event to a collector
  eventstream status           Show the configured flags
  eventstream config set       Set a flag in the config file
"""

import json
import logging
import sys
from typing import Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install webscale-eventstream[cli]")

from webscale_eventstream.config import XML_PATH_ENABLED, XML_PATH_LOGGING
from webscale_eventstream.context import (
    DistributionModuleRegistry,
    StaticConfig,
    StaticCookies,
    StaticModuleRegistry,
    StaticRequest,
    StaticStore,
)
from webscale_eventstream.forwarder import DeliveryOutcome, LoginEventForwarder
from webscale_eventstream.log import ContextFormatter, logger
from webscale_eventstream.models.event import Customer, LoginSuccessEvent
from webscale_eventstream.transport.envelope import COOKIE_ID, MODULE_NAME, build_envelope
from webscale_eventstream.transport.http import APP_ID_HEADER

console = Console()

OUTCOME_STYLES = {
    DeliveryOutcome.SENT: "green",
    DeliveryOutcome.REJECTED: "yellow",
    DeliveryOutcome.FAILED: "red",
    DeliveryOutcome.DISABLED: "dim",
    DeliveryOutcome.NO_CUSTOMER: "dim",
}


def _module_registry():
    return DistributionModuleRegistry({MODULE_NAME: "webscale-eventstream"})


def _stream_logging() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ContextFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return handler


@click.group()
@click.version_option("0.1.0")
def main():
    """Webscale event stream — forward login events to the clickstream collector."""


@main.command("preview")
@click.option("--user-id", required=True)
@click.option("--email", required=True)
@click.option("--store", "store_code", default="default", show_default=True)
@click.option("--website", "website_code", default="base", show_default=True)
@click.option("--cookie", default=None, help="Session cookie value")
@click.option("--cookie-name", default=COOKIE_ID, show_default=True)
def preview_cmd(user_id, email, store_code, website_code, cookie, cookie_name):
    """Print the login event that would be sent. No network."""
    payload = build_envelope(
        user_id=user_id,
        email=email,
        store_code=store_code,
        website_code=website_code,
        version=_module_registry().get_version(MODULE_NAME),
        cookie_name=cookie_name,
        cookie_value=cookie,
    )
    click.echo(json.dumps(payload, indent=2))


@main.command("send")
@click.option("--base-url", required=True, help="Store base URL, e.g. https://shop.example.com/")
@click.option("--user-id", required=True)
@click.option("--email", required=True)
@click.option("--app-id", default="", help="Webscale-App-Id header value")
@click.option("--store", "store_code", default="default", show_default=True)
@click.option("--website", "website_code", default="base", show_default=True)
@click.option("--cookie", default=None, help="Session cookie value")
@click.option("--cookie-name", default=COOKIE_ID, show_default=True)
@click.option("--sdk-version", "sdk_version", default=None, help="Override the reported extension version")
@click.option("--verbose", "-v", is_flag=True, help="Enable developer logging")
def send_cmd(
    base_url: str, user_id: str, email: str, app_id: str, store_code: str, website_code: str,
    cookie: Optional[str], cookie_name: str, sdk_version: Optional[str], verbose: bool,
):
    """Forward one login event to the collector at BASE_URL."""
    handler = _stream_logging()
    modules = StaticModuleRegistry({MODULE_NAME: sdk_version}) if sdk_version else _module_registry()
    forwarder = LoginEventForwarder(
        config=StaticConfig({XML_PATH_ENABLED: True, XML_PATH_LOGGING: verbose}),
        store=StaticStore(base_url, store_code=store_code, website_code=website_code),
        request=StaticRequest({APP_ID_HEADER: app_id}),
        cookies=StaticCookies({cookie_name: cookie} if cookie is not None else {}),
        modules=modules,
        cookie_name=cookie_name,
    )
    try:
        with console.status("Sending login event..."):
            outcome = forwarder.on_login_success(LoginSuccessEvent(customer=Customer(id=user_id, email=email)))
    finally:
        forwarder.close()
        logger.removeHandler(handler)

    style = OUTCOME_STYLES[outcome]
    console.print(f"[{style}]{outcome.value}[/{style}]")
    if outcome in (DeliveryOutcome.REJECTED, DeliveryOutcome.FAILED):
        raise SystemExit(1)


# Register subcommands from separate modules
from webscale_eventstream.cli.config import config, status_cmd

main.add_command(config)
main.add_command(status_cmd)


if __name__ == "__main__":
    main()

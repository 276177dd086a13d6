"""
webscale-eventstream — clickstream login events for Webscale.

Forwards one event per successful customer login to the store's
clickstream collector, without ever failing the login itself.
"""

from webscale_eventstream.forwarder import AsyncLoginEventForwarder, DeliveryOutcome, LoginEventForwarder
from webscale_eventstream.errors import EventStreamError, ScopeError, DeliveryError
from webscale_eventstream.models.event import Customer, LoginSuccessEvent
from webscale_eventstream.models.envelope import EventEnvelope

__version__ = "0.1.0"
__all__ = [
    "LoginEventForwarder",
    "AsyncLoginEventForwarder",
    "DeliveryOutcome",
    "EventStreamError",
    "ScopeError",
    "DeliveryError",
    "Customer",
    "LoginSuccessEvent",
    "EventEnvelope",
]

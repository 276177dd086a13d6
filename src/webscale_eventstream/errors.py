"""
Event stream error types.
"""

from typing import Any, Optional


class EventStreamError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ScopeError(EventStreamError):
    def __init__(self, message: str, code: str = "scope_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class DeliveryError(EventStreamError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("delivery_error", message, details)

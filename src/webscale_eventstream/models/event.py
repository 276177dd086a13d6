"""
Login event models.

Hosts may pass their own objects instead; the forwarder only reads
`event.customer`, `customer.id` and `customer.email`.
"""

from typing import Any, Optional
from pydantic import BaseModel


class Customer(BaseModel):
    id: Any
    email: Optional[str] = None


class LoginSuccessEvent(BaseModel):
    customer: Optional[Customer] = None

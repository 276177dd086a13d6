"""
Clickstream event envelope — the wire payload posted to the collector.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict


class StoreScope(BaseModel):
    store_id: str
    website_id: str


class EventUser(BaseModel):
    user_id: str
    magento: StoreScope


class EventPayload(BaseModel):
    # the session cookie is stored under its own name, so extra keys are allowed
    model_config = ConfigDict(extra="allow")

    email: str


class EventEnvelope(BaseModel):
    platform: str
    sdk: str
    event_name: str
    event_id: str
    timestamp: str
    user: EventUser
    payload: EventPayload

    def cookie(self, name: str) -> Optional[str]:
        return (self.payload.model_extra or {}).get(name)

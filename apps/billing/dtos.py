"""DTOs for Billing app."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SubscriptionDTO:
    subscription_id: str
    client_secret: Optional[str]

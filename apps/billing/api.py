"""
API endpoints for Billing app.
"""
from typing import Optional
from ninja import Router, Schema
from ninja.errors import HttpError
from django.http import HttpRequest

from apps.identity.security import require_auth
from .services import BillingNotConfiguredError, get_or_create_subscription

router = Router(tags=["Billing"])


class SubscriptionOut(Schema):
    subscription_id: str
    client_secret: Optional[str] = None


@router.post("/subscription", response=SubscriptionOut, auth=None)
def get_or_create_user_subscription(request: HttpRequest):
    """Return the user's Stripe subscription, creating it if needed."""
    user = require_auth(request)
    try:
        return get_or_create_subscription(user)
    except BillingNotConfiguredError:
        raise HttpError(503, "Payment processing not configured. Please contact support.")
    except ValueError as e:
        raise HttpError(400, str(e))

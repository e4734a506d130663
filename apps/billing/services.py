"""
Billing services backed by Stripe.

A user has at most one subscription. Asking for it again returns the stored
subscription's payment client secret instead of creating a second one.
"""
import logging
from typing import Optional

import stripe
from django.conf import settings

from apps.identity.models import User, SubscriptionStatus
from .dtos import SubscriptionDTO

logger = logging.getLogger(__name__)


class BillingNotConfiguredError(Exception):
    """STRIPE_SECRET_KEY is not set."""


def is_configured() -> bool:
    return bool(settings.STRIPE_SECRET_KEY)


def _client_secret(invoice) -> Optional[str]:
    if not invoice:
        return None
    payment_intent = invoice.get('payment_intent')
    if not payment_intent or isinstance(payment_intent, str):
        return None
    return payment_intent.get('client_secret')


def _existing_subscription(subscription_id: str) -> Optional[SubscriptionDTO]:
    """Look up a stored subscription; None if Stripe no longer knows it."""
    try:
        subscription = stripe.Subscription.retrieve(subscription_id)
        invoice = None
        if subscription.get('latest_invoice'):
            invoice = stripe.Invoice.retrieve(
                subscription['latest_invoice'],
                expand=['payment_intent'],
            )
    except stripe.StripeError as e:
        logger.warning(f"Could not retrieve subscription {subscription_id}: {e}")
        return None

    return SubscriptionDTO(subscription_id=subscription['id'], client_secret=_client_secret(invoice))


def get_or_create_subscription(user: User) -> SubscriptionDTO:
    """
    Return the user's subscription, creating the customer and an incomplete
    subscription for STRIPE_PRICE_ID when needed.

    Raises:
        BillingNotConfiguredError: if Stripe is not configured.
        ValueError: if the user has no email or Stripe rejects the request.
    """
    if not is_configured():
        raise BillingNotConfiguredError("Payment processing not configured")

    stripe.api_key = settings.STRIPE_SECRET_KEY

    if user.stripe_subscription_id:
        existing = _existing_subscription(user.stripe_subscription_id)
        if existing:
            return existing

    if not user.email:
        raise ValueError("No user email on file")

    try:
        customer_id = user.stripe_customer_id
        if not customer_id:
            customer = stripe.Customer.create(
                email=user.email,
                name=f"{user.first_name or ''} {user.last_name or ''}".strip(),
            )
            customer_id = customer['id']

        subscription = stripe.Subscription.create(
            customer=customer_id,
            items=[{'price': settings.STRIPE_PRICE_ID}],
            payment_behavior='default_incomplete',
            expand=['latest_invoice.payment_intent'],
        )
    except stripe.StripeError as e:
        logger.error(f"Subscription creation failed for user {user.id}: {e}")
        raise ValueError(str(e))

    user.stripe_customer_id = customer_id
    user.stripe_subscription_id = subscription['id']
    user.subscription_status = SubscriptionStatus.ACTIVE
    user.save(update_fields=['stripe_customer_id', 'stripe_subscription_id', 'subscription_status'])

    logger.info(f"Created subscription {subscription['id']} for user {user.id}")
    return SubscriptionDTO(
        subscription_id=subscription['id'],
        client_secret=_client_secret(subscription.get('latest_invoice')),
    )

"""Stripe adapter: every call to the payment provider goes through here."""

import logging

import stripe
from fastapi import HTTPException, status

from booking_api.core import config

logger = logging.getLogger(__name__)

PAYMENT_METHOD_TYPES = ['card']


def require_stripe():
    """Configure ``stripe.api_key`` and return the module.

    Raises 503 when no secret key is configured, so a misconfigured deployment
    fails before any request reaches Stripe.
    """
    if not config.STRIPE_SECRET_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Payments are not configured (STRIPE_SECRET_KEY missing).',
        )
    stripe.api_key = config.STRIPE_SECRET_KEY
    return stripe


def to_minor_units(price: float) -> int:
    return int(round(price * 100))


def create_payment_intent(amount: int, currency: str | None = None, metadata: dict | None = None):
    """Create a card-only PaymentIntent for ``amount`` minor units.

    Returns the Stripe object; callers only need its ``client_secret``.
    """
    require_stripe()
    intent = stripe.PaymentIntent.create(
        amount=amount,
        currency=currency or config.STRIPE_CURRENCY,
        payment_method_types=PAYMENT_METHOD_TYPES,
        metadata=metadata or {},
    )
    logger.info('Created payment intent %s amount=%s', getattr(intent, 'id', None), amount)
    return intent

"""
Subscriptions Service integration.

The request handler only depends on the ``SubscriptionLookup`` protocol;
``SubscriptionsClient`` is the HTTP implementation wired in production.
"""

from .client import SubscriptionLookup, SubscriptionsClient, build_ssl_context, parse_skus

__all__ = ["SubscriptionLookup", "SubscriptionsClient", "build_ssl_context", "parse_skus"]

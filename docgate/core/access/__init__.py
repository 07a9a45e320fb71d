"""Subscription tier feature gating."""

from __future__ import annotations

from .features import Feature, SubscriptionTier
from .policy import FeatureAccessPolicy, PolicyConfigurationError

__all__ = [
    "Feature",
    "SubscriptionTier",
    "FeatureAccessPolicy",
    "PolicyConfigurationError",
]

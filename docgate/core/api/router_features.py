"""
Feature access API router.

Lets route guards and the UI ask which features the caller's subscription
tier unlocks.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from docgate.logging.setup import get_logger
from docgate.core.access import Feature, FeatureAccessPolicy, SubscriptionTier
from docgate.core.api.dependencies import get_feature_policy, get_subscription_tier
from docgate.core.api.errors import not_found_error

logger = get_logger(__name__)

router = APIRouter(
    prefix="/features",
    tags=["features"]
)


@router.get("")
async def list_features(
    tier: SubscriptionTier = Depends(get_subscription_tier),
    policy: FeatureAccessPolicy = Depends(get_feature_policy),
):
    """Access decision for every feature at the caller's tier."""
    return {
        "tier": tier.value,
        "features": {
            feature.value: policy.can_access(feature, tier)
            for feature in Feature
        },
    }


@router.get("/{feature}")
async def check_feature(
    feature: str,
    tier: SubscriptionTier = Depends(get_subscription_tier),
    policy: FeatureAccessPolicy = Depends(get_feature_policy),
):
    """
    Access decision for one feature.

    Raises:
        HTTPException: 404 for an unknown feature
    """
    try:
        gated = Feature(feature)
    except ValueError:
        not_found_error("Feature", feature)

    allowed = policy.can_access(gated, tier)
    if not allowed:
        logger.debug(f"Feature {gated.value} denied for tier {tier.value}")

    return {
        "feature": gated.value,
        "tier": tier.value,
        "allowed": allowed,
        "upgrade_message": "" if allowed else policy.upgrade_message(gated),
    }

"""
FastAPI dependencies for caller identity, subscription tier and services.

Authentication happens upstream; these dependencies only read the headers
that layer sets and turn them into explicit arguments.
"""

from __future__ import annotations

from fastapi import Request

from docgate.core.access import FeatureAccessPolicy, SubscriptionTier
from docgate.core.api.errors import authentication_error, raise_error
from docgate.core.storage.file import FileManager


def require_identity(request: Request) -> str:
    """
    Return the verified caller id from the identity header.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    header = request.app.state.config_manager.identity_header
    owner_id = (request.headers.get(header) or "").strip()
    if not owner_id:
        authentication_error(f"Missing caller identity ({header} header)")
    return owner_id


def get_subscription_tier(request: Request) -> SubscriptionTier:
    """
    Return the caller's subscription tier; ``free`` when the header is absent.

    Raises:
        HTTPException: 400 for an unknown tier value
    """
    header = request.app.state.config_manager.tier_header
    value = (request.headers.get(header) or "").strip().lower()
    if not value:
        return SubscriptionTier.FREE

    try:
        return SubscriptionTier(value)
    except ValueError:
        raise_error(
            message=f"Unknown subscription tier '{value}'",
            details=[f"Valid tiers: {', '.join(t.value for t in SubscriptionTier)}"],
            field=header,
            code="INVALID_TIER"
        )


def get_file_manager(request: Request) -> FileManager:
    return request.app.state.file_manager


def get_feature_policy(request: Request) -> FeatureAccessPolicy:
    return request.app.state.feature_policy

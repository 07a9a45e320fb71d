"""Subscription tiers and gated features."""

from __future__ import annotations

from enum import Enum


class SubscriptionTier(str, Enum):
    """
    Entitlement level attached to a user by the billing system.

    docgate never changes a user's tier; it only reads it.
    """

    FREE = "free"
    PAID = "paid"


class Feature(str, Enum):
    """
    Named units of gated functionality.

    Values are shared with the UI layer, so renaming one is a breaking change.
    """

    DOCUMENT_GENERATION = "document-generation"
    INTERVIEW_PRACTICE = "interview-practice"
    JOB_TRACKING = "job-tracking"
    UNLIMITED_SEARCH = "unlimited-search"
    QA_GENERATOR = "qa-generator"
    BASIC_PROFILE = "basic-profile"
    LIMITED_JOB_VIEW = "limited-job-view"


DEFAULT_FEATURE_ACCESS: dict[Feature, list[SubscriptionTier]] = {
    Feature.DOCUMENT_GENERATION: [SubscriptionTier.PAID],
    Feature.INTERVIEW_PRACTICE: [SubscriptionTier.PAID],
    Feature.JOB_TRACKING: [SubscriptionTier.PAID],
    Feature.UNLIMITED_SEARCH: [SubscriptionTier.PAID],
    Feature.QA_GENERATOR: [SubscriptionTier.PAID],
    Feature.BASIC_PROFILE: [SubscriptionTier.FREE, SubscriptionTier.PAID],
    Feature.LIMITED_JOB_VIEW: [SubscriptionTier.FREE, SubscriptionTier.PAID],
}

DEFAULT_UPGRADE_MESSAGES: dict[Feature, str] = {
    Feature.DOCUMENT_GENERATION:
        "Unlock professional CV and supporting information generation",
    Feature.INTERVIEW_PRACTICE:
        "Get unlimited interview practice with expert feedback",
    Feature.JOB_TRACKING:
        "Track all your job applications in one dashboard",
    Feature.UNLIMITED_SEARCH:
        "Search unlimited jobs and get personalised matches",
    Feature.QA_GENERATOR:
        "Generate tailored interview Q&As for any role",
}

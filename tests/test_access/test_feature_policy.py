"""Tests for FeatureAccessPolicy."""

from __future__ import annotations

import pytest

from docgate.config.settings import FeatureSettings
from docgate.core.access import (
    Feature,
    FeatureAccessPolicy,
    PolicyConfigurationError,
    SubscriptionTier,
)
from docgate.core.access.features import DEFAULT_FEATURE_ACCESS

FREE = SubscriptionTier.FREE
PAID = SubscriptionTier.PAID


@pytest.fixture
def policy():
    return FeatureAccessPolicy.from_settings(FeatureSettings())


PAID_ONLY = [
    Feature.DOCUMENT_GENERATION,
    Feature.INTERVIEW_PRACTICE,
    Feature.JOB_TRACKING,
    Feature.UNLIMITED_SEARCH,
    Feature.QA_GENERATOR,
]
EVERYONE = [Feature.BASIC_PROFILE, Feature.LIMITED_JOB_VIEW]


@pytest.mark.parametrize("feature", PAID_ONLY)
def test_paid_only_features(policy, feature):
    assert not policy.can_access(feature, FREE)
    assert policy.can_access(feature, PAID)


@pytest.mark.parametrize("feature", EVERYONE)
def test_features_open_to_everyone(policy, feature):
    assert policy.can_access(feature, FREE)
    assert policy.can_access(feature, PAID)


def test_interview_practice(policy):
    assert policy.can_access(Feature.INTERVIEW_PRACTICE, PAID) is True
    assert policy.can_access(Feature.INTERVIEW_PRACTICE, FREE) is False


def test_every_feature_is_covered(policy):
    for feature in Feature:
        assert policy.allowed_tiers(feature)


def test_answers_are_stable(policy):
    first = [policy.can_access(f, t) for f in Feature for t in SubscriptionTier]
    second = [policy.can_access(f, t) for f in Feature for t in SubscriptionTier]

    assert first == second


def test_accepts_string_values(policy):
    assert policy.can_access("qa-generator", "paid")
    assert not policy.can_access("qa-generator", "free")


def test_unknown_values_raise(policy):
    with pytest.raises(ValueError):
        policy.can_access("teleportation", PAID)
    with pytest.raises(ValueError):
        policy.can_access(Feature.BASIC_PROFILE, "enterprise")


def test_features_for(policy):
    assert policy.features_for(FREE) == EVERYONE
    assert policy.features_for("paid") == list(Feature)


def test_upgrade_messages(policy):
    assert "interview" in policy.upgrade_message(Feature.INTERVIEW_PRACTICE).lower()
    assert policy.upgrade_message(Feature.BASIC_PROFILE) == ""


def test_to_dict(policy):
    table = policy.to_dict()

    assert table["document-generation"] == ["paid"]
    assert table["basic-profile"] == ["free", "paid"]
    assert len(table) == len(Feature)


class TestPolicyValidation:

    def test_missing_feature_is_rejected(self):
        table = dict(DEFAULT_FEATURE_ACCESS)
        del table[Feature.JOB_TRACKING]

        with pytest.raises(PolicyConfigurationError, match="job-tracking"):
            FeatureAccessPolicy(table)

    def test_feature_without_tiers_is_rejected(self):
        table = dict(DEFAULT_FEATURE_ACCESS)
        table[Feature.QA_GENERATOR] = []

        with pytest.raises(PolicyConfigurationError, match="qa-generator"):
            FeatureAccessPolicy(table)

    def test_unknown_feature_is_rejected(self):
        table = dict(DEFAULT_FEATURE_ACCESS)
        table["teleportation"] = ["paid"]

        with pytest.raises(PolicyConfigurationError, match="teleportation"):
            FeatureAccessPolicy(table)

    def test_unknown_tier_is_rejected(self):
        table = dict(DEFAULT_FEATURE_ACCESS)
        table[Feature.BASIC_PROFILE] = ["free", "enterprise"]

        with pytest.raises(PolicyConfigurationError):
            FeatureAccessPolicy(table)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            FeatureAccessPolicy({})

    def test_table_from_strings(self):
        policy = FeatureAccessPolicy(
            {f.value: ["free"] for f in Feature})

        assert policy.can_access(Feature.QA_GENERATOR, FREE)
        assert not policy.can_access(Feature.QA_GENERATOR, PAID)

    def test_source_table_changes_do_not_leak(self):
        table = {f: [PAID] for f in Feature}
        policy = FeatureAccessPolicy(table)

        table[Feature.BASIC_PROFILE].append(FREE)

        assert not policy.can_access(Feature.BASIC_PROFILE, FREE)

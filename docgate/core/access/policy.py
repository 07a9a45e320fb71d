"""
Feature access policy.

Decides whether a subscription tier may use a feature. The table is built
once at startup and is read-only afterwards, so lookups need no locking.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from docgate.logging.setup import get_logger
from .features import Feature, SubscriptionTier

logger = get_logger(__name__)


class PolicyConfigurationError(ValueError):
    """Feature access table is incomplete or malformed."""
    pass


class FeatureAccessPolicy:
    """
    Static mapping from feature to the tiers allowed to use it.

    Construction fails unless every :class:`Feature` has at least one tier,
    so a missing entry shows up at startup instead of as a silent denial.
    """

    def __init__(
        self,
        table: Mapping[Feature | str, Iterable[SubscriptionTier | str]],
        upgrade_messages: Mapping[Feature | str, str] | None = None,
    ):
        """
        Args:
            table: feature -> tiers allowed to use it
            upgrade_messages: feature -> text shown when access is denied

        Raises:
            PolicyConfigurationError: Unknown names, missing features or
                features without tiers
        """
        self._table = MappingProxyType(self._build_table(table))
        self._upgrade_messages = MappingProxyType({
            self._feature(name): message
            for name, message in (upgrade_messages or {}).items()
        })

        logger.info(
            f"Feature access policy loaded: {len(self._table)} features")

    @classmethod
    def from_settings(cls, settings: Any) -> FeatureAccessPolicy:
        """Build the policy from the ``features`` configuration section."""
        return cls(settings.access, settings.upgrade_messages)

    def _build_table(self, table) -> dict[Feature, frozenset[SubscriptionTier]]:
        built = {}
        for name, tiers in table.items():
            feature = self._feature(name)
            try:
                built[feature] = frozenset(SubscriptionTier(t) for t in tiers)
            except ValueError as e:
                raise PolicyConfigurationError(
                    f"Feature '{feature.value}' lists an unknown tier: {e}") from e

        missing = [f.value for f in Feature if f not in built]
        if missing:
            raise PolicyConfigurationError(
                f"Feature access table has no entry for: {', '.join(missing)}")

        empty = [f.value for f, tiers in built.items() if not tiers]
        if empty:
            raise PolicyConfigurationError(
                f"Features without any permitted tier: {', '.join(empty)}")

        return built

    @staticmethod
    def _feature(name: Feature | str) -> Feature:
        try:
            return Feature(name)
        except ValueError as e:
            raise PolicyConfigurationError(f"Unknown feature: {name}") from e

    def can_access(
        self,
        feature: Feature | str,
        tier: SubscriptionTier | str,
    ) -> bool:
        """
        Check whether ``tier`` may use ``feature``.

        Args:
            feature: Feature member or its string value
            tier: Tier member or its string value

        Returns:
            True if the tier is in the feature's permitted set

        Raises:
            ValueError: If feature or tier is not a known value
        """
        return SubscriptionTier(tier) in self._table[Feature(feature)]

    def allowed_tiers(self, feature: Feature | str) -> frozenset[SubscriptionTier]:
        return self._table[Feature(feature)]

    def features_for(self, tier: SubscriptionTier | str) -> list[Feature]:
        """Features available to a tier, in declaration order."""
        tier = SubscriptionTier(tier)
        return [f for f in Feature if tier in self._table[f]]

    def upgrade_message(self, feature: Feature | str) -> str:
        """Upsell text for a feature; empty when no message is configured."""
        return self._upgrade_messages.get(Feature(feature), "")

    def to_dict(self) -> dict[str, list[str]]:
        return {
            feature.value: sorted(t.value for t in tiers)
            for feature, tiers in self._table.items()
        }

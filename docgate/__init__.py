"""Per-user document storage and subscription feature gates."""

__version__ = "0.1.0"

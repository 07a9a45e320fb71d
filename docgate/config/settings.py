"""
Configuration manager for docgate using Pydantic Settings.

- Config file discovery (env var, working directory, packaged default)
- Environment variable overrides with type conversion
- Validation with clear error messages
- No dependency on the logging setup
"""

from __future__ import annotations

import os
import logging
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource

from docgate.core.access.features import (
    DEFAULT_FEATURE_ACCESS,
    DEFAULT_UPGRADE_MESSAGES,
    Feature,
    SubscriptionTier,
)


# Plain logger: custom logging is configured only after settings load
_basic_logger = logging.getLogger(__name__)

MIB = 1024 * 1024


class StorageSettings(BaseModel):
    """Where uploaded files live and how they are addressed."""
    root: str = Field(
        default="uploads",
        description="Base directory holding one sub-directory per owner")
    public_url_prefix: str = Field(
        default="/uploads",
        description="Prefix of public file URLs served by the static file host")
    chunk_size: int = Field(default=64 * 1024, ge=1024, le=16 * MIB)

    @field_validator("public_url_prefix")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class UploadSettings(BaseModel):
    """Upload allow-lists and size ceiling."""
    max_size_bytes: int = Field(default=5 * MIB, ge=1)
    allowed_mime_types: list[str] = Field(
        default_factory=lambda: [
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "image/png",
            "image/jpeg",
            "image/jpg",
        ],
        description="Declared MIME types accepted for upload")
    allowed_extensions: list[str] = Field(
        default_factory=lambda: [
            ".pdf", ".doc", ".docx", ".png", ".jpg", ".jpeg"],
        description="File extensions accepted for upload (with leading dot)")

    @field_validator("allowed_mime_types")
    @classmethod
    def _normalize_mime_types(cls, value: list[str]) -> list[str]:
        return [v.strip().lower() for v in value]

    @field_validator("allowed_extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return normalized


class FeatureSettings(BaseModel):
    """
    Feature access table and upsell texts.

    The table is checked for completeness when the policy is built, not here,
    so that a partial table reports every missing feature at once.
    """
    access: dict[Feature, list[SubscriptionTier]] = Field(
        default_factory=lambda: {
            feature: list(tiers)
            for feature, tiers in DEFAULT_FEATURE_ACCESS.items()
        })
    upgrade_messages: dict[Feature, str] = Field(
        default_factory=lambda: dict(DEFAULT_UPGRADE_MESSAGES))


class SecuritySettings(BaseModel):
    """Headers set by the upstream authentication layer."""
    identity_header: str = Field(
        default="X-User-Id",
        description="Header carrying the verified caller id")
    tier_header: str = Field(
        default="X-Subscription-Tier",
        description="Header carrying the caller's subscription tier")


class APISettings(BaseModel):
    """API configuration."""
    host: str = Field(default="0.0.0.0", description="Host for uvicorn")
    port: int = Field(default=8000, ge=1, le=65535)


class LoggingSettings(BaseModel):
    """Logging configuration (raw dict for logging.config.dictConfig)."""
    version: int = Field(default=1)
    disable_existing_loggers: bool = Field(default=False)
    formatters: dict[str, Any] = Field(default_factory=dict)
    handlers: dict[str, Any] = Field(default_factory=dict)
    root: dict[str, Any] = Field(default_factory=dict)
    loggers: dict[str, Any] = Field(default_factory=dict)

    model_config = {'extra': 'allow'}


class AppSettings(BaseSettings):
    """
    Main application settings.

    Values come from (highest priority first):
    1. Environment variables ``DOCGATE_SECTION__KEY``
       (e.g. ``DOCGATE_STORAGE__ROOT=/srv/uploads``)
    2. The YAML file passed to :meth:`from_yaml`
    3. Defaults
    """

    storage: StorageSettings = Field(default_factory=StorageSettings)
    uploads: UploadSettings = Field(default_factory=UploadSettings)
    features: FeatureSettings = Field(default_factory=FeatureSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    api: APISettings = Field(default_factory=APISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="DOCGATE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML data arrives as init kwargs; environment wins over it
        return (
            env_settings,
            init_settings,
        )

    @classmethod
    def from_yaml(cls, config_path: str | None = None) -> AppSettings:
        """
        Build settings from a YAML file, then apply environment overrides.

        Without ``config_path`` the first existing file wins:
        1. $DOCGATE_CONFIG_PATH
        2. ./config.yaml
        3. the config.yaml shipped inside docgate.config

        Raises:
            FileNotFoundError: Nothing found at the given or searched paths
            ValueError: Unparseable YAML, a non-mapping document, or values
                that fail validation
        """
        path = config_path or cls._find_config_file()
        data = cls._read_yaml(path)

        try:
            settings = cls(**data)
        except ValidationError as e:
            _basic_logger.error(f"Invalid settings in {path}: {e}")
            raise ValueError(f"Configuration validation failed for {path}:\n{e}")

        _basic_logger.info(f"Settings loaded from {path}")
        return settings

    @classmethod
    def _read_yaml(cls, path: str) -> dict[str, Any]:
        if not os.path.isfile(path):
            _basic_logger.error(f"Config file {path} does not exist")
            raise FileNotFoundError(
                f"Configuration file not found: {path} "
                f"(search order: {', '.join(p for p in cls._candidate_paths() if p)})")

        with open(path, "r") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration file {path} must contain a mapping, "
                f"got {type(data).__name__}")
        return data

    @staticmethod
    def _candidate_paths() -> list[str]:
        return [
            os.getenv("DOCGATE_CONFIG_PATH", ""),
            os.path.join(os.getcwd(), "config.yaml"),
            os.path.join(os.path.dirname(__file__), "config.yaml"),
        ]

    @classmethod
    def _find_config_file(cls) -> str:
        candidates = [p for p in cls._candidate_paths() if p]
        found = next((p for p in candidates if os.path.isfile(p)), None)
        if found is None:
            raise FileNotFoundError(
                "No configuration file found. Looked at: "
                + ", ".join(candidates)
                + ". Set DOCGATE_CONFIG_PATH or add config.yaml to the "
                "working directory.")
        return found


class ConfigManager:
    """
    Process-wide holder of the loaded :class:`AppSettings`.

    Nothing is read from disk until the first access. Tests call
    :meth:`reset_instance` to start from a clean slate.
    """

    _instance: ConfigManager | None = None
    _settings: AppSettings | None = None
    _config_path: str | None = None

    @classmethod
    def get_instance(cls) -> ConfigManager:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        cls._instance = None
        cls._settings = None
        cls._config_path = None

    def load(self, config_path: str | None = None) -> dict[str, Any]:
        """
        Read settings, reusing the cached ones unless a path is given.

        Returns:
            JSON-compatible dump of the settings
        """
        if config_path is not None or self._settings is None:
            self._settings = AppSettings.from_yaml(config_path)
            self._config_path = config_path
        return self._settings.model_dump(mode="json")

    @property
    def settings(self) -> AppSettings:
        if self._settings is None:
            self.load()
        return self._settings

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``"uploads.max_size_bytes"``."""
        node: Any = self.get_config()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_config(self) -> dict[str, Any]:
        return self.settings.model_dump(mode="json")

    def get_config_path(self) -> str | None:
        return self._config_path

    @property
    def storage_root(self) -> str:
        return self.settings.storage.root

    @property
    def public_url_prefix(self) -> str:
        return self.settings.storage.public_url_prefix

    @property
    def upload_settings(self) -> UploadSettings:
        return self.settings.uploads

    @property
    def feature_settings(self) -> FeatureSettings:
        return self.settings.features

    @property
    def identity_header(self) -> str:
        return self.settings.security.identity_header

    @property
    def tier_header(self) -> str:
        return self.settings.security.tier_header

    @property
    def api_host(self) -> str:
        return self.settings.api.host

    @property
    def api_port(self) -> int:
        return self.settings.api.port

    @property
    def logging_config(self) -> dict[str, Any]:
        return self.settings.logging.model_dump()


def get_config_manager() -> ConfigManager:
    """Get the ConfigManager singleton instance."""
    return ConfigManager.get_instance()


__all__ = [
    'ConfigManager',
    'AppSettings',
    'get_config_manager',
    'StorageSettings',
    'UploadSettings',
    'FeatureSettings',
    'SecuritySettings',
    'APISettings',
    'LoggingSettings',
]

"""Configuration management - loads membership.yaml and environment variables."""

import os
from decimal import Decimal
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from membership_service.models import Member, MembershipServiceConfig


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


class Config:
    """Application configuration loader and manager.

    Loads membership.yaml and provides validated access to:
    - Payment verifier settings
    - Notification backend settings
    - Clock settings
    - Seed members for the local store
    """

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to membership.yaml file. If not provided, uses CONFIG_PATH env var
                        or defaults to ./config/membership.yaml
        """
        self._config_path = self._resolve_config_path(config_path)
        self._service_config: Optional[MembershipServiceConfig] = None
        self._load_config()

    def _resolve_config_path(self, config_path: Optional[str]) -> Path:
        """Resolve configuration file path from argument, env var, or default."""
        if config_path:
            return Path(config_path)

        env_path = os.getenv("CONFIG_PATH")
        if env_path:
            return Path(env_path)

        return Path("config/membership.yaml")

    def _load_config(self) -> None:
        """Load and validate membership.yaml configuration."""
        if not self._config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {self._config_path}\n"
                f"Please create config/membership.yaml or set CONFIG_PATH environment variable"
            )

        try:
            with open(self._config_path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e

        if not raw_config:
            raise ConfigurationError(f"Configuration file is empty: {self._config_path}")

        try:
            self._service_config = MembershipServiceConfig(**raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    @property
    def settings(self) -> MembershipServiceConfig:
        """Get validated service configuration."""
        if self._service_config is None:
            raise ConfigurationError("Configuration not loaded")
        return self._service_config

    @property
    def config_path(self) -> Path:
        """Get path to configuration file."""
        return self._config_path

    @property
    def payment_failure_rate(self) -> float:
        """Get the random payment decline rate (0.0-1.0)."""
        return self.settings.payment.failure_rate

    @property
    def payment_min_amount(self) -> Decimal:
        """Get the smallest amount the simulated verifier accepts."""
        return self.settings.payment.min_amount

    @property
    def notification_backend(self) -> str:
        """Get notification backend name ("log" or "pubsub")."""
        return self.settings.notifications.backend

    @property
    def use_virtual_clock(self) -> bool:
        """Whether the service runs on a controllable virtual clock."""
        return self.settings.clock.virtual

    @property
    def seed_members(self) -> list[Member]:
        """Get members to load into the local store at start-up.

        Returns:
            Fresh copies, so the configuration itself is never mutated by the store
        """
        return [member.model_copy(deep=True) for member in self.settings.members]

    def reload(self) -> None:
        """Reload configuration from disk.

        Useful for development when membership.yaml is modified.
        """
        self._load_config()


# Global configuration instance
_config_instance: Optional[Config] = None


def get_config(config_path: Optional[str] = None) -> Config:
    """Get global configuration instance (singleton).

    Args:
        config_path: Optional path to configuration file (only used on first call)

    Returns:
        Config instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_path)
    return _config_instance


def reload_config() -> None:
    """Reload global configuration from disk."""
    global _config_instance
    if _config_instance:
        _config_instance.reload()
    else:
        _config_instance = Config()


def reset_config() -> None:
    """Drop the global configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None

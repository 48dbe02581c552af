"""Configuration management for zapdos.

Supports YAML profiles and environment variable overrides. The API key is
never written to disk; it only comes from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from zapdos.core.exceptions import ConfigurationError, ProfileNotFoundError

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "zapdos"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_BASE_URL = "https://api.zapdoslabs.com"
DEFAULT_TIMEOUT = 30
DEFAULT_UPLOAD_METHOD = "PUT"

# Environment variable names
ENV_URL = "ZAPDOS_URL"
ENV_API_KEY = "ZAPDOS_API_KEY"
ENV_PROFILE = "ZAPDOS_PROFILE"
ENV_VERIFY_SSL = "ZAPDOS_VERIFY_SSL"
ENV_TIMEOUT = "ZAPDOS_TIMEOUT"


# =============================================================================
# Profile
# =============================================================================


@dataclass
class Profile:
    """Configuration profile for a Zapdos API endpoint."""

    url: str = DEFAULT_BASE_URL
    verify_ssl: bool = True
    timeout: int = DEFAULT_TIMEOUT
    upload_method: str = DEFAULT_UPLOAD_METHOD

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "url": self.url,
            "verify_ssl": self.verify_ssl,
            "timeout": self.timeout,
            "upload_method": self.upload_method,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create from dictionary."""
        return cls(
            url=data.get("url", DEFAULT_BASE_URL),
            verify_ssl=data.get("verify_ssl", True),
            timeout=data.get("timeout", DEFAULT_TIMEOUT),
            upload_method=data.get("upload_method", DEFAULT_UPLOAD_METHOD),
        )


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """Application configuration."""

    default_profile: str = "default"
    output_format: str = "table"
    profiles: dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load config from file with environment variable overrides.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults

        Args:
            config_path: Optional path to config file.

        Returns:
            Loaded configuration.

        Raises:
            ConfigurationError: If the file exists but cannot be parsed.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

                config.default_profile = data.get("default_profile", "default")
                config.output_format = data.get("output_format", "table")

                for name, pdata in (data.get("profiles") or {}).items():
                    config.profiles[name] = Profile.from_dict(pdata or {})
            except (OSError, yaml.YAMLError, AttributeError) as e:
                raise ConfigurationError(f"Failed to load config: {e}") from e

        if url := os.getenv(ENV_URL):
            verify_ssl = os.getenv(ENV_VERIFY_SSL, "true").lower() in ("true", "1", "yes")
            try:
                timeout = int(os.getenv(ENV_TIMEOUT, str(DEFAULT_TIMEOUT)))
            except ValueError as e:
                raise ConfigurationError(
                    "Timeout must be an integer", field=ENV_TIMEOUT, value=os.getenv(ENV_TIMEOUT)
                ) from e

            config.profiles["default"] = Profile(
                url=url,
                verify_ssl=verify_ssl,
                timeout=timeout,
            )

        if profile := os.getenv(ENV_PROFILE):
            config.default_profile = profile

        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save config to file (excludes secrets).

        Args:
            config_path: Optional path to config file.
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "default_profile": self.default_profile,
            "output_format": self.output_format,
            "profiles": {name: p.to_dict() for name, p in self.profiles.items()},
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Get profile by name or default.

        Falls back to a built-in profile pointing at the public API when no
        profiles are configured at all.

        Raises:
            ProfileNotFoundError: If a named profile doesn't exist.
        """
        name = name or self.default_profile
        if name in self.profiles:
            return self.profiles[name]
        if not self.profiles and name == "default":
            return Profile()
        raise ProfileNotFoundError(name)

    def has_profile(self, name: str) -> bool:
        """Check if profile exists."""
        return name in self.profiles

    def add_profile(
        self,
        name: str,
        url: str,
        verify_ssl: bool = True,
        timeout: int = DEFAULT_TIMEOUT,
        upload_method: str = DEFAULT_UPLOAD_METHOD,
    ) -> Profile:
        """Add or update a profile."""
        profile = Profile(
            url=url,
            verify_ssl=verify_ssl,
            timeout=timeout,
            upload_method=upload_method,
        )
        self.profiles[name] = profile
        return profile

    def remove_profile(self, name: str) -> bool:
        """Remove a profile.

        Returns:
            True if removed, False if didn't exist.
        """
        if name in self.profiles:
            del self.profiles[name]
            return True
        return False

    def set_default_profile(self, name: str) -> None:
        """Set the default profile.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        self.default_profile = name


def get_api_key() -> Optional[str]:
    """Get the API key from the environment.

    Returns:
        API key if set, None otherwise.
    """
    return os.getenv(ENV_API_KEY)

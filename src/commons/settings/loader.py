"""Settings loader with layered configuration support."""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from src.commons.settings.models import Settings


class SettingsLoader:
    """Builds the process-wide Settings object once at startup.

    Configuration precedence (highest to lowest):
    1. Environment variables (VIDEO_VAULT__SECTION__KEY)
    2. Environment-specific config (appsettings.{env}.json)
    3. Base config (appsettings.json)
    """

    ENV_PREFIX = "VIDEO_VAULT__"

    def __init__(
        self,
        config_dir: Path | None = None,
        environment: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the settings loader.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to 'config' in current working directory.
            environment: Environment name (dev, staging, prod).
                        Defaults to VIDEO_VAULT__APP__ENVIRONMENT or 'dev'.
            environ: Environment mapping, defaults to os.environ.
        """
        self.config_dir = config_dir or Path("config")
        self._environ = environ if environ is not None else os.environ
        self.environment = environment or self._environ.get(
            f"{self.ENV_PREFIX}APP__ENVIRONMENT", "dev"
        )

    def load(self) -> Settings:
        """Load settings with proper precedence.

        Returns:
            Fully resolved Settings instance.
        """
        config = self._read_json("appsettings.json")
        for layer in (
            self._read_json(f"appsettings.{self.environment}.json"),
            self._env_overrides(),
        ):
            config = _deep_merge(config, layer)
        return Settings(**config)

    def _env_overrides(self) -> dict[str, Any]:
        """Collect prefixed environment variables as a nested dict.

        VIDEO_VAULT__UPLOAD__MAX_UPLOAD_MB=50 becomes
        {"upload": {"max_upload_mb": "50"}}. Scalars stay strings and are
        converted by pydantic; JSON lists and objects are decoded here.
        """
        overrides: dict[str, Any] = {}
        for key, value in self._environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            *parents, leaf = key[len(self.ENV_PREFIX) :].lower().split("__")
            node = overrides
            for part in parents:
                node = node.setdefault(part, {})
            node[leaf] = _decode_structured(value)
        return overrides

    def _read_json(self, filename: str) -> dict[str, Any]:
        """Read a JSON config file, returning {} when it is absent."""
        path = self.config_dir / filename
        if not path.exists():
            return {}
        with path.open(encoding="utf-8") as f:
            return dict(json.load(f))


def _decode_structured(value: str) -> Any:
    if value.startswith(("[", "{")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass
    return value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


_settings: Settings | None = None


def get_settings(
    config_dir: Path | None = None,
    environment: str | None = None,
    *,
    reload: bool = False,
) -> Settings:
    """Get or create the global settings instance.

    Args:
        config_dir: Optional config directory override.
        environment: Optional environment override.
        reload: Force reload settings from files.

    Returns:
        Settings instance.
    """
    global _settings  # noqa: PLW0603
    if _settings is None or reload:
        _settings = SettingsLoader(config_dir=config_dir, environment=environment).load()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance. Useful for testing."""
    global _settings  # noqa: PLW0603
    _settings = None

# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Configuration management for Composite Fingerprint.

Policy constants (the private-mode quota threshold and the comparator field
weights) are settings rather than hard-coded values. Configuration can be
loaded from environment variables, config files, or programmatically.

Example:
    >>> from composite_fingerprint.config import FingerprintSettings
    >>> settings = FingerprintSettings()  # Loads from environment
    >>> settings.weights.total
    13
"""

from __future__ import annotations

import json
import os
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from composite_fingerprint.exceptions import ConfigurationError

DEFAULT_PRIVATE_QUOTA_THRESHOLD = 150_000_000
DEFAULT_SALT_KEY = "__fp_salt_v1"


class ScoringWeights(BaseModel):
    """Per-field multipliers used by the comparator.

    Attributes:
        audio_hash: Weight of the audio rendering digest
        drm_hash: Weight of the DRM key system digest
        canvas_hash: Weight of the canvas rendering digest
        user_agent: Weight of the user agent string
        screen_res: Weight of the screen resolution
        device_memory: Weight of the reported device memory
        hardware_concurrency: Weight of the logical CPU count
        timezone: Weight of the IANA timezone
        language: Weight of the preferred language
        primary_language: Weight of the first entry of the language list
    """

    audio_hash: int = Field(default=2, ge=0, description="audioHash weight")
    drm_hash: int = Field(default=2, ge=0, description="drmHash weight")
    canvas_hash: int = Field(default=1, ge=0, description="canvasHash weight")
    user_agent: int = Field(default=2, ge=0, description="deviceInfo.userAgent weight")
    screen_res: int = Field(default=1, ge=0, description="deviceInfo.screenRes weight")
    device_memory: int = Field(default=1, ge=0, description="deviceInfo.deviceMemory weight")
    hardware_concurrency: int = Field(
        default=1, ge=0, description="deviceInfo.hardwareConcurrency weight"
    )
    timezone: int = Field(default=1, ge=0, description="localeInfo.timezone weight")
    language: int = Field(default=1, ge=0, description="localeInfo.language weight")
    primary_language: int = Field(default=1, ge=0, description="localeInfo.languages[0] weight")

    @property
    def total(self) -> int:
        """Sum of all weights."""
        return sum(self.as_dict().values())

    def as_dict(self) -> Dict[str, int]:
        return self.model_dump()


class FingerprintSettings(BaseSettings):
    """Main configuration loaded from environment variables.

    Environment variables are prefixed with COMPOSITE_FP_ and use uppercase.
    Nested configs use double underscore as separator.

    Example:
        COMPOSITE_FP_PRIVATE_QUOTA_THRESHOLD=120000000
        COMPOSITE_FP_WEIGHTS__CANVAS_HASH=2
        COMPOSITE_FP_SALT_STORE_PATH=~/.cache/composite-fp/salt.json
    """

    # Signal policy
    private_quota_threshold: int = Field(
        default=DEFAULT_PRIVATE_QUOTA_THRESHOLD,
        gt=0,
        description="Storage quota (bytes) below which a browser is reported as private",
    )
    hash_algorithm: str = Field(default="sha256", description="Digest algorithm")

    # Comparator
    weights: ScoringWeights = Field(default_factory=ScoringWeights)

    # Storage salt
    salt_key: str = Field(default=DEFAULT_SALT_KEY, description="Storage key for the salt")
    salt_store_path: Optional[str] = Field(
        default=None,
        description="JSON file used as the salt storage scope in headless mode",
    )

    # Browser probing
    browser_type: str = Field(default="chromium", description="chromium, firefox or webkit")
    headless: bool = Field(default=True, description="Run the probe browser headless")
    probe_url: str = Field(default="about:blank", description="Page the probes run in")
    navigation_timeout_ms: int = Field(default=30000, ge=1000, description="Navigation timeout")

    log_level: str = Field(default="INFO", description="Logging level")

    model_config = {
        "env_prefix": "COMPOSITE_FP_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }


# Global settings instance
_settings: Optional[FingerprintSettings] = None


def get_settings() -> FingerprintSettings:
    """Get the global settings, loading them from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = FingerprintSettings()
    return _settings


def reload_settings() -> FingerprintSettings:
    """Reload settings from environment.

    Returns:
        Fresh FingerprintSettings instance
    """
    global _settings
    _settings = FingerprintSettings()
    return _settings


def load_settings_from_file(path: str) -> FingerprintSettings:
    """Load settings from a YAML or JSON file.

    Values from the file take precedence over environment variables.

    Args:
        path: Path to configuration file

    Returns:
        FingerprintSettings instance

    Raises:
        ConfigurationError: If the file doesn't exist or can't be parsed
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith((".yaml", ".yml")):
                data = yaml.safe_load(f)
            elif path.endswith(".json"):
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported config file format: {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {path}")

    return FingerprintSettings(**data)

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

"""Tests for settings loading."""

import json

import pytest
from pydantic import ValidationError

from composite_fingerprint.config import (
    DEFAULT_PRIVATE_QUOTA_THRESHOLD,
    FingerprintSettings,
    ScoringWeights,
    get_settings,
    load_settings_from_file,
    reload_settings,
)
from composite_fingerprint.exceptions import ConfigurationError


class TestDefaults:
    def test_defaults(self):
        settings = FingerprintSettings()
        assert settings.private_quota_threshold == DEFAULT_PRIVATE_QUOTA_THRESHOLD
        assert settings.hash_algorithm == "sha256"
        assert settings.salt_key == "__fp_salt_v1"
        assert settings.salt_store_path is None
        assert settings.browser_type == "chromium"
        assert settings.headless is True
        assert settings.weights.total == 13

    def test_weights_as_dict(self):
        weights = ScoringWeights().as_dict()
        assert weights["audio_hash"] == 2
        assert weights["user_agent"] == 2
        assert weights["primary_language"] == 1

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            ScoringWeights(canvas_hash=-1)


class TestEnvironment:
    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("COMPOSITE_FP_PRIVATE_QUOTA_THRESHOLD", "120000000")
        monkeypatch.setenv("COMPOSITE_FP_WEIGHTS__CANVAS_HASH", "3")
        monkeypatch.setenv("COMPOSITE_FP_SALT_STORE_PATH", "/tmp/salt.json")

        settings = FingerprintSettings()
        assert settings.private_quota_threshold == 120_000_000
        assert settings.weights.canvas_hash == 3
        assert settings.weights.total == 15
        assert settings.salt_store_path == "/tmp/salt.json"

    def test_zero_threshold_rejected(self, monkeypatch):
        monkeypatch.setenv("COMPOSITE_FP_PRIVATE_QUOTA_THRESHOLD", "0")
        with pytest.raises(ValidationError):
            FingerprintSettings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reload_settings(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("COMPOSITE_FP_HASH_ALGORITHM", "sha3_256")
        try:
            reloaded = reload_settings()
            assert reloaded is not first
            assert reloaded.hash_algorithm == "sha3_256"
            assert get_settings() is reloaded
        finally:
            monkeypatch.delenv("COMPOSITE_FP_HASH_ALGORITHM")
            reload_settings()


class TestConfigFiles:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "fp.yaml"
        path.write_text("private_quota_threshold: 200000000\nweights:\n  audio_hash: 4\n")
        settings = load_settings_from_file(str(path))
        assert settings.private_quota_threshold == 200_000_000
        assert settings.weights.audio_hash == 4
        assert settings.weights.drm_hash == 2

    def test_json_file(self, tmp_path):
        path = tmp_path / "fp.json"
        path.write_text(json.dumps({"probe_url": "https://example.com"}))
        assert load_settings_from_file(str(path)).probe_url == "https://example.com"

    def test_empty_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_settings_from_file(str(path)).weights.total == 13

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings_from_file(str(tmp_path / "nope.yaml"))

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "fp.toml"
        path.write_text("x = 1")
        with pytest.raises(ConfigurationError):
            load_settings_from_file(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "fp.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_settings_from_file(str(path))

    def test_non_mapping_content(self, tmp_path):
        path = tmp_path / "fp.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            load_settings_from_file(str(path))

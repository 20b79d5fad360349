# Copyright 2026 Firefly Software Solutions Inc
# SPDX-License-Identifier: Apache-2.0

"""
Shared test fixtures for the Composite Fingerprint test suite.

This module provides:
- Deterministic signal sets built from static sources
- Sample component records and fingerprints
- A mock Playwright page
"""

from __future__ import annotations

import os
from typing import Any, Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from composite_fingerprint.models import ComponentRecord, DeviceInfo, LocaleInfo
from composite_fingerprint.signals.base import SignalSet, StaticSource


# ==================== Environment Setup ====================

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables."""
    os.environ.setdefault("COMPOSITE_FP_LOG_LEVEL", "warning")
    yield


# ==================== Signal Fixtures ====================

DEFAULT_SIGNAL_VALUES: Dict[str, Any] = {
    "audio": "a" * 64,
    "drm": "d" * 64,
    "canvas": "c" * 64,
    "storage_salt": "1-2-3-4",
    "private_mode": False,
    "device_info": {
        "userAgent": "Mozilla/5.0 (X11; Linux x86_64) Test/1.0",
        "screenRes": "1920x1080",
        "deviceMemory": 8,
        "hardwareConcurrency": 8,
    },
    "locale_info": {
        "timezone": "Europe/Berlin",
        "language": "de-DE",
        "languages": ["de-DE", "en-US"],
    },
}


def make_signals(**overrides: Any) -> SignalSet:
    """Signal set of static sources, with per-signal value overrides."""
    values = {**DEFAULT_SIGNAL_VALUES, **overrides}
    return SignalSet(**{name: StaticSource(value, name=name) for name, value in values.items()})


@pytest.fixture
def signal_factory() -> Callable[..., SignalSet]:
    """Factory for deterministic signal sets."""
    return make_signals


@pytest.fixture
def fixed_signals() -> SignalSet:
    """Signal set with every signal available."""
    return make_signals()


@pytest.fixture
def sample_record() -> ComponentRecord:
    """A fully populated component record."""
    return ComponentRecord(
        audio_hash="a" * 64,
        drm_hash="d" * 64,
        canvas_hash="c" * 64,
        storage_salt="1-2-3-4",
        private_flag=False,
        device_info=DeviceInfo(
            user_agent="Mozilla/5.0 (X11; Linux x86_64) Test/1.0",
            screen_res="1920x1080",
            device_memory=8,
            hardware_concurrency=8,
        ),
        locale_info=LocaleInfo(
            timezone="Europe/Berlin",
            language="de-DE",
            languages=["de-DE", "en-US"],
        ),
    )


@pytest.fixture
def sample_components(sample_record: ComponentRecord) -> Dict[str, Any]:
    """The sample record as a wire-format dictionary."""
    return sample_record.to_dict()


# ==================== Mock Page ====================

@pytest.fixture
def mock_page() -> MagicMock:
    """Create a mock Playwright page whose evaluate() is an AsyncMock."""
    page = MagicMock()
    page.evaluate = AsyncMock()
    page.goto = AsyncMock()
    return page

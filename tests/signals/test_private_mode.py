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

"""Tests for private mode detection."""

import pytest

from composite_fingerprint.exceptions import ProbeUnsupported
from composite_fingerprint.signals.private_mode import (
    DatabaseBackend,
    PrivateModeSource,
    classify_private_mode,
)


class FakeBackend(DatabaseBackend):
    """Backend returning (or raising) preset values."""

    def __init__(self, opened=True, quota=None):
        self.opened = opened
        self.quota = quota
        self.estimate_calls = 0

    async def open_test_database(self):
        if isinstance(self.opened, Exception):
            raise self.opened
        return self.opened

    async def estimate_quota(self):
        self.estimate_calls += 1
        if isinstance(self.quota, Exception):
            raise self.quota
        return self.quota


class TestClassify:
    @pytest.mark.parametrize(
        "opened,quota,expected",
        [
            (False, None, True),
            (False, 10 ** 12, True),
            (True, None, False),
            (True, 0, False),
            (True, 120_000_000, True),
            (True, 150_000_000, False),
            (True, 10 ** 10, False),
        ],
    )
    def test_rules(self, opened, quota, expected):
        assert classify_private_mode(opened, quota) is expected

    def test_custom_threshold(self):
        assert classify_private_mode(True, 120_000_000, threshold=100_000_000) is False


class TestPrivateModeSource:
    @pytest.mark.asyncio
    async def test_no_backend_is_not_private(self):
        assert await PrivateModeSource().probe() is False

    @pytest.mark.asyncio
    async def test_large_quota_is_not_private(self):
        assert await PrivateModeSource(FakeBackend(quota=10 ** 10)).probe() is False

    @pytest.mark.asyncio
    async def test_small_quota_is_private(self):
        assert await PrivateModeSource(FakeBackend(quota=100_000_000)).probe() is True

    @pytest.mark.asyncio
    async def test_threshold_from_constructor(self):
        source = PrivateModeSource(FakeBackend(quota=100_000_000), threshold=50_000_000)
        assert await source.probe() is False

    @pytest.mark.asyncio
    async def test_database_open_failure_is_private(self):
        backend = FakeBackend(opened=False)
        assert await PrivateModeSource(backend).probe() is True
        assert backend.estimate_calls == 0

    @pytest.mark.asyncio
    async def test_database_open_error_is_private(self):
        assert await PrivateModeSource(FakeBackend(opened=RuntimeError("denied"))).probe() is True

    @pytest.mark.asyncio
    async def test_missing_database_api_is_not_private(self):
        backend = FakeBackend(opened=ProbeUnsupported("no indexedDB"))
        assert await PrivateModeSource(backend).probe() is False

    @pytest.mark.asyncio
    async def test_missing_estimate_api_is_not_private(self):
        backend = FakeBackend(quota=ProbeUnsupported("no estimate"))
        assert await PrivateModeSource(backend).probe() is False

    @pytest.mark.asyncio
    async def test_estimate_error_is_not_private(self):
        backend = FakeBackend(quota=RuntimeError("estimate failed"))
        assert await PrivateModeSource(backend).probe() is False

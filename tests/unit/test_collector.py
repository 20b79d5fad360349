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

"""Tests for ComponentCollector."""

import asyncio

import pytest

from composite_fingerprint.collector import ComponentCollector
from composite_fingerprint.exceptions import ProbeUnavailable, ProbeUnsupported
from composite_fingerprint.models import ComponentRecord
from composite_fingerprint.signals.base import SignalSource, safe_probe
from composite_fingerprint.signals.storage import MemoryStore, StorageSaltSource

RECORD_KEYS = [
    "audioHash", "drmHash", "canvasHash", "storageSalt",
    "privateFlag", "deviceInfo", "localeInfo",
]


class RaisingSource(SignalSource):
    def __init__(self, exc: Exception, name: str = "raising") -> None:
        self.exc = exc
        self.name = name

    async def probe(self):
        raise self.exc


class RecordingSource(SignalSource):
    """Sleeps, then records when it finished."""

    def __init__(self, value, delay: float, log: list, name: str) -> None:
        self.value = value
        self.delay = delay
        self.log = log
        self.name = name

    async def probe(self):
        self.log.append(f"start:{self.name}")
        await asyncio.sleep(self.delay)
        self.log.append(f"end:{self.name}")
        return self.value


class TestSafeProbe:
    @pytest.mark.asyncio
    async def test_unavailable_error_becomes_sentinel(self):
        assert await safe_probe(RaisingSource(ProbeUnavailable("nope"))) == "unavailable"

    @pytest.mark.asyncio
    async def test_unsupported_error_becomes_sentinel(self):
        assert await safe_probe(RaisingSource(ProbeUnsupported("nope"))) == "unsupported"

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_unavailable(self):
        assert await safe_probe(RaisingSource(RuntimeError("boom"))) == "unavailable"


class TestComponentCollector:
    @pytest.mark.asyncio
    async def test_collects_all_signals(self, fixed_signals, sample_record):
        record = await ComponentCollector(fixed_signals).collect()
        assert isinstance(record, ComponentRecord)
        assert record == sample_record

    @pytest.mark.asyncio
    async def test_all_unavailable_produces_complete_record(self, signal_factory):
        signals = signal_factory(**{name: "unavailable" for name in (
            "audio", "drm", "canvas", "storage_salt", "private_mode", "device_info", "locale_info",
        )})
        data = (await ComponentCollector(signals).collect()).to_dict()

        assert list(data) == RECORD_KEYS
        assert data["audioHash"] == "unavailable"
        assert data["privateFlag"] == "unavailable"
        assert data["deviceInfo"] == {
            "userAgent": "unavailable",
            "screenRes": "unavailable",
            "deviceMemory": "unavailable",
            "hardwareConcurrency": "unavailable",
        }
        assert data["localeInfo"] == {
            "timezone": "unavailable",
            "language": "unavailable",
            "languages": [],
        }

    @pytest.mark.asyncio
    async def test_raising_probes_never_propagate(self, fixed_signals):
        signals = fixed_signals.replace(
            audio=RaisingSource(RuntimeError("no audio")),
            drm=RaisingSource(ProbeUnsupported("no drm")),
            device_info=RaisingSource(ValueError("no device")),
        )
        record = await ComponentCollector(signals).collect()
        assert record.audio_hash == "unavailable"
        assert record.drm_hash == "unsupported"
        assert record.device_info.user_agent == "unavailable"
        assert record.canvas_hash == "c" * 64

    @pytest.mark.asyncio
    async def test_unsupported_structured_signal(self, signal_factory):
        record = await ComponentCollector(signal_factory(locale_info="unsupported")).collect()
        assert record.locale_info.timezone == "unsupported"
        assert record.locale_info.languages == []

    @pytest.mark.asyncio
    async def test_malformed_values_are_replaced(self, signal_factory):
        signals = signal_factory(
            audio=12345,
            private_mode={"not": "a flag"},
            device_info={"userAgent": "only this"},
            locale_info=["not", "a", "mapping"],
        )
        record = await ComponentCollector(signals).collect()
        assert record.audio_hash == "unavailable"
        assert record.private_flag == "unavailable"
        assert record.device_info.screen_res == "unavailable"
        assert record.locale_info.language == "unavailable"

    @pytest.mark.asyncio
    async def test_rendering_probes_run_concurrently(self, fixed_signals):
        log: list = []
        signals = fixed_signals.replace(
            audio=RecordingSource("a" * 64, 0.03, log, "audio"),
            drm=RecordingSource("d" * 64, 0.02, log, "drm"),
            canvas=RecordingSource("c" * 64, 0.01, log, "canvas"),
        )
        record = await ComponentCollector(signals).collect()

        # All three start before any finishes
        assert log[:3] == ["start:audio", "start:drm", "start:canvas"]
        # Completion order doesn't affect field assignment
        assert log[3:] == ["end:canvas", "end:drm", "end:audio"]
        assert record.audio_hash == "a" * 64
        assert record.canvas_hash == "c" * 64

    @pytest.mark.asyncio
    async def test_salt_reused_within_scope(self, fixed_signals):
        store = MemoryStore()
        signals = fixed_signals.replace(storage_salt=StorageSaltSource(store))
        first = await ComponentCollector(signals).collect()
        second = await ComponentCollector(signals).collect()
        assert first.storage_salt == second.storage_salt
        assert first.storage_salt != "unavailable"

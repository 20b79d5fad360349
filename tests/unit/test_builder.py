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

"""Tests for canonicalization and FingerprintBuilder."""

import json

import pytest

from composite_fingerprint.builder import FingerprintBuilder, canonicalize
from composite_fingerprint.collector import ComponentCollector
from composite_fingerprint.comparator import Comparator
from composite_fingerprint.digest import digest
from composite_fingerprint.models import ComponentRecord


class TestCanonicalize:
    def test_compact_json_in_field_order(self, sample_record):
        text = canonicalize(sample_record)
        assert text.startswith('{"audioHash":"' + "a" * 64 + '","drmHash":')
        assert " " not in text.replace("Mozilla/5.0 (X11; Linux x86_64) Test/1.0", "")
        assert list(json.loads(text)) == [
            "audioHash", "drmHash", "canvasHash", "storageSalt",
            "privateFlag", "deviceInfo", "localeInfo",
        ]

    def test_input_key_order_does_not_matter(self, sample_components):
        reversed_components = dict(reversed(list(sample_components.items())))
        reversed_components["deviceInfo"] = dict(
            reversed(list(sample_components["deviceInfo"].items()))
        )
        a = ComponentRecord.from_dict(sample_components)
        b = ComponentRecord.from_dict(reversed_components)
        assert canonicalize(a) == canonicalize(b)

    def test_non_ascii_kept(self, sample_record):
        record = sample_record.model_copy(
            update={"locale_info": sample_record.locale_info.model_copy(update={"timezone": "Amérique"})}
        )
        assert "Amérique" in canonicalize(record)


class TestFingerprintBuilder:
    def test_build_uses_digest_of_canonical_text(self, sample_record):
        fingerprint = FingerprintBuilder(ComponentCollector()).build(sample_record)
        assert fingerprint.identifier == digest(canonicalize(sample_record))
        assert fingerprint.components == sample_record

    def test_build_with_custom_digest(self, sample_record):
        builder = FingerprintBuilder(ComponentCollector(), digest=lambda text: "x" * 64)
        assert builder.build(sample_record).identifier == "x" * 64

    def test_sentinel_substitution_changes_identifier(self, sample_record):
        builder = FingerprintBuilder(ComponentCollector())
        degraded = sample_record.model_copy(update={"canvas_hash": "unavailable"})
        assert builder.build(sample_record).identifier != builder.build(degraded).identifier

    @pytest.mark.asyncio
    async def test_generate_is_deterministic_for_fixed_signals(self, signal_factory):
        first = await FingerprintBuilder(ComponentCollector(signal_factory())).generate()
        second = await FingerprintBuilder(ComponentCollector(signal_factory())).generate()
        assert first.identifier == second.identifier
        assert first.components == second.components

    @pytest.mark.asyncio
    async def test_salt_changes_identifier_but_not_score(self, signal_factory):
        first = await FingerprintBuilder(
            ComponentCollector(signal_factory(storage_salt="1-1-1-1"))
        ).generate()
        second = await FingerprintBuilder(
            ComponentCollector(signal_factory(storage_salt="2-2-2-2"))
        ).generate()
        assert first.identifier != second.identifier
        assert Comparator().compare(first, second) == 1.0

    @pytest.mark.asyncio
    async def test_private_flag_changes_identifier_but_not_score(self, signal_factory):
        normal = await FingerprintBuilder(ComponentCollector(signal_factory())).generate()
        private = await FingerprintBuilder(
            ComponentCollector(signal_factory(private_mode=True))
        ).generate()
        assert normal.identifier != private.identifier
        assert Comparator().compare(normal, private) == 1.0

    @pytest.mark.asyncio
    async def test_all_unavailable_still_yields_identifier(self, signal_factory):
        signals = signal_factory(**{name: "unavailable" for name in (
            "audio", "drm", "canvas", "storage_salt", "private_mode", "device_info", "locale_info",
        )})
        fingerprint = await FingerprintBuilder(ComponentCollector(signals)).generate()
        assert len(fingerprint.identifier) == 64
        int(fingerprint.identifier, 16)

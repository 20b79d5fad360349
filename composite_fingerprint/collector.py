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
Component collection.

The collector runs every signal source and assembles the results into a
``ComponentRecord``. It never fails: probe errors become sentinels, and a
structured signal that comes back malformed is replaced by a record of the
same shape whose fields all carry the sentinel.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from composite_fingerprint.models import (
    ComponentRecord,
    DeviceInfo,
    LocaleInfo,
    Sentinel,
)
from composite_fingerprint.signals.base import SignalSet, safe_probe
from composite_fingerprint.signals.headless import headless_signals
from composite_fingerprint.utils.logger import logger

SENTINEL_VALUES = frozenset(s.value for s in Sentinel)


def _is_sentinel(value: Any) -> bool:
    return isinstance(value, str) and value in SENTINEL_VALUES


def _as_text(value: Any) -> str:
    """Scalar digest signals must be strings; anything else is unavailable."""
    if isinstance(value, str):
        return value
    return Sentinel.UNAVAILABLE.value


def _as_flag(value: Any) -> Any:
    if isinstance(value, bool) or _is_sentinel(value):
        return value
    return Sentinel.UNAVAILABLE.value


def _placeholder(value: Any) -> str:
    return value if _is_sentinel(value) else Sentinel.UNAVAILABLE.value


def build_device_info(value: Any) -> DeviceInfo:
    if isinstance(value, Mapping):
        try:
            return DeviceInfo.model_validate(dict(value))
        except ValidationError as e:
            logger.debug(f"Malformed device info signal: {e.error_count()} errors")
    return DeviceInfo.filled_with(_placeholder(value))


def build_locale_info(value: Any) -> LocaleInfo:
    if isinstance(value, Mapping):
        try:
            return LocaleInfo.model_validate(dict(value))
        except ValidationError as e:
            logger.debug(f"Malformed locale info signal: {e.error_count()} errors")
    return LocaleInfo.filled_with(_placeholder(value))


class ComponentCollector:
    """
    Orchestrates the signal sources.

    The rendering probes (audio, DRM, canvas) are independent and run
    concurrently; the storage, private mode, device and locale probes run
    after them. Results are keyed by field, so completion order doesn't
    matter.

    Example:
        >>> collector = ComponentCollector(headless_signals())
        >>> record = await collector.collect()
        >>> record.audio_hash
        'unavailable'
    """

    def __init__(self, signals: Optional[SignalSet] = None) -> None:
        """
        Args:
            signals: Sources to collect from. Defaults to the headless set.
        """
        self.signals = signals or headless_signals()

    async def collect(self) -> ComponentRecord:
        """Run all probes and assemble the component record."""
        signals = self.signals

        audio, drm, canvas = await asyncio.gather(
            safe_probe(signals.audio),
            safe_probe(signals.drm),
            safe_probe(signals.canvas),
        )

        storage_salt = await safe_probe(signals.storage_salt)
        private_flag = await safe_probe(signals.private_mode)
        device_info = await safe_probe(signals.device_info)
        locale_info = await safe_probe(signals.locale_info)

        record = ComponentRecord(
            audio_hash=_as_text(audio),
            drm_hash=_as_text(drm),
            canvas_hash=_as_text(canvas),
            storage_salt=_as_text(storage_salt),
            private_flag=_as_flag(private_flag),
            device_info=build_device_info(device_info),
            locale_info=build_locale_info(locale_info),
        )

        sentinels = sum(
            1 for v in (record.audio_hash, record.drm_hash, record.canvas_hash, record.storage_salt)
            if _is_sentinel(v)
        )
        logger.debug(f"Collected component record ({sentinels} of 4 scalar signals missing)")
        return record

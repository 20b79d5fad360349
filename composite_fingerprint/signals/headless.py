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
Signal sources for a headless host (no browser).

Rendering signals (audio, DRM, canvas) can't be observed outside a browser
and report ``"unavailable"``. Device and locale information come from the
host operating system.
"""

from __future__ import annotations

import math
import os
import platform
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

import psutil

from composite_fingerprint.config import FingerprintSettings, get_settings
from composite_fingerprint.signals.base import CallableSource, SignalSet, unavailable
from composite_fingerprint.signals.private_mode import PrivateModeSource
from composite_fingerprint.signals.storage import JsonFileStore, KeyValueStore, StorageSaltSource

UNKNOWN = "unknown"

GIB = 1024 ** 3


def host_user_agent() -> str:
    """User agent equivalent for the Python runtime."""
    system = platform.system() or UNKNOWN
    release = platform.release()
    machine = platform.machine() or UNKNOWN
    os_part = f"{system} {release}".strip()
    return f"Python/{platform.python_version()} ({os_part}; {machine})"


def total_memory_bytes() -> Optional[int]:
    """Physical memory size in bytes."""
    try:
        total = psutil.virtual_memory().total
    except (OSError, RuntimeError):
        return None
    return total or None


def device_memory_label(total_bytes: Optional[int]) -> str:
    """Rounded gigabytes, e.g. ``"16 GB"``."""
    if not total_bytes:
        return UNKNOWN
    # Round half up
    return f"{math.floor(total_bytes / GIB + 0.5)} GB"


def collect_device_info() -> Dict[str, Any]:
    cpus: Union[int, str] = os.cpu_count() or UNKNOWN
    return {
        "userAgent": host_user_agent(),
        "screenRes": "N/A",
        "deviceMemory": device_memory_label(total_memory_bytes()),
        "hardwareConcurrency": cpus,
    }


def resolve_timezone() -> str:
    """
    Best-effort IANA timezone name of the host.

    Checks ``TZ``, ``/etc/timezone`` and the ``/etc/localtime`` link before
    falling back to the local abbreviation (e.g. ``"CET"``).
    """
    tz = os.environ.get("TZ", "").lstrip(":")
    if tz:
        return tz

    timezone_file = Path("/etc/timezone")
    try:
        name = timezone_file.read_text(encoding="utf-8").strip()
        if name:
            return name
    except OSError:
        pass

    try:
        target = str(Path("/etc/localtime").resolve())
        if "zoneinfo/" in target:
            return target.split("zoneinfo/", 1)[1]
    except OSError:
        pass

    return time.tzname[0] or UNKNOWN


def collect_locale_info() -> Dict[str, Any]:
    return {
        "timezone": resolve_timezone(),
        "language": os.environ.get("LANG") or UNKNOWN,
        "languages": [],
    }


def headless_signals(
    settings: Optional[FingerprintSettings] = None,
    store: Optional[KeyValueStore] = None,
) -> SignalSet:
    """
    Build the signal set for a host without a browser.

    Args:
        settings: Settings to use (default: global settings)
        store: Salt storage scope. Defaults to a ``JsonFileStore`` at
            ``settings.salt_store_path`` when configured, otherwise the salt
            is reported as unavailable.

    Returns:
        SignalSet for the collector.
    """
    settings = settings or get_settings()
    if store is None and settings.salt_store_path:
        store = JsonFileStore(settings.salt_store_path)

    return SignalSet(
        audio=unavailable("audio"),
        drm=unavailable("drm"),
        canvas=unavailable("canvas"),
        storage_salt=StorageSaltSource(store, key=settings.salt_key),
        private_mode=PrivateModeSource(None, threshold=settings.private_quota_threshold),
        device_info=CallableSource(collect_device_info, name="device_info"),
        locale_info=CallableSource(collect_locale_info, name="locale_info"),
    )

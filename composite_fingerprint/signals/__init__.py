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
Pluggable signal sources.

Two environments are provided:
- ``headless_signals()``: the host running Python, no browser
- ``browser_signals(page)`` / ``BrowserSession``: a Playwright page

The Playwright-backed sources live in ``composite_fingerprint.signals.browser``
and are imported from there so that headless use doesn't load Playwright.
"""

from composite_fingerprint.signals.base import (
    CallableSource,
    SignalSet,
    SignalSource,
    StaticSource,
    safe_probe,
    unavailable,
)
from composite_fingerprint.signals.headless import headless_signals
from composite_fingerprint.signals.private_mode import (
    DatabaseBackend,
    PrivateModeSource,
    classify_private_mode,
)
from composite_fingerprint.signals.storage import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    StorageSaltSource,
    generate_salt,
)

__all__ = [
    "CallableSource",
    "SignalSet",
    "SignalSource",
    "StaticSource",
    "safe_probe",
    "unavailable",
    "headless_signals",
    "DatabaseBackend",
    "PrivateModeSource",
    "classify_private_mode",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "StorageSaltSource",
    "generate_salt",
]

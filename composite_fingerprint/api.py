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
Top-level operations.

There is no notion of a "current baseline": callers keep whatever earlier
fingerprint they want and pass both sides to ``compare``.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Optional

from composite_fingerprint.builder import FingerprintBuilder
from composite_fingerprint.collector import ComponentCollector
from composite_fingerprint.comparator import Comparator, ComparisonResult
from composite_fingerprint.config import FingerprintSettings, get_settings
from composite_fingerprint.digest import digest
from composite_fingerprint.models import Fingerprint
from composite_fingerprint.signals.base import SignalSet
from composite_fingerprint.signals.headless import headless_signals


async def generate(
    signals: Optional[SignalSet] = None,
    settings: Optional[FingerprintSettings] = None,
) -> Fingerprint:
    """
    Collect signals and build a fresh fingerprint.

    Args:
        signals: Sources to collect from (default: headless host signals)
        settings: Settings to use (default: global settings)

    Returns:
        New Fingerprint.
    """
    settings = settings or get_settings()
    collector = ComponentCollector(signals or headless_signals(settings))
    builder = FingerprintBuilder(collector, digest=partial(digest, algorithm=settings.hash_algorithm))
    return await builder.generate()


def explain(
    left: Any,
    right: Any,
    settings: Optional[FingerprintSettings] = None,
) -> ComparisonResult:
    """Compare two inputs and return the per-field breakdown."""
    settings = settings or get_settings()
    return Comparator(weights=settings.weights).explain(left, right)


def compare(
    left: Any,
    right: Any,
    settings: Optional[FingerprintSettings] = None,
) -> float:
    """
    Similarity score between two fingerprints.

    Either side may be a Fingerprint, a ComponentRecord, a plain mapping, an
    identifier string or JSON text of a fingerprint or record.

    Returns:
        Score in [0, 1].
    """
    return explain(left, right, settings).score

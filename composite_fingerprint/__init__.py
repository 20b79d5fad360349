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
Composite Fingerprint - composite device identifiers with fuzzy comparison.

Several independently collected environmental signals (audio and canvas
rendering, DRM support, a per-scope storage salt, private mode, device and
locale information) are combined into one SHA-256 identifier. Two
fingerprints can be compared with a weighted similarity score that tolerates
drift in volatile signals.

Example:
    >>> import asyncio
    >>> from composite_fingerprint import generate, compare
    >>>
    >>> baseline = asyncio.run(generate())
    >>> current = asyncio.run(generate())
    >>> compare(baseline, current)
    1.0
"""

__version__ = "26.10.01"
__author__ = "Firefly Software Solutions Inc"
__license__ = "Apache-2.0"

from composite_fingerprint.api import compare, explain, generate
from composite_fingerprint.builder import FingerprintBuilder, canonicalize
from composite_fingerprint.collector import ComponentCollector
from composite_fingerprint.comparator import (
    SCORING_FIELDS,
    Comparator,
    ComparisonResult,
    FieldMatch,
)
from composite_fingerprint.config import FingerprintSettings, ScoringWeights, get_settings
from composite_fingerprint.digest import digest
from composite_fingerprint.exceptions import (
    BrowserSessionError,
    CompositeFingerprintError,
    ConfigurationError,
    DigestError,
    ProbeError,
    ProbeUnavailable,
    ProbeUnsupported,
)
from composite_fingerprint.models import (
    ComponentRecord,
    DeviceInfo,
    Fingerprint,
    IdentifierOnly,
    LocaleInfo,
    NormalizedRecord,
    Sentinel,
)
from composite_fingerprint.normalizer import normalize
from composite_fingerprint.signals import SignalSet, SignalSource, headless_signals

__all__ = [
    # Operations
    "generate",
    "compare",
    "explain",
    "normalize",
    "digest",
    "canonicalize",
    # Components
    "ComponentCollector",
    "FingerprintBuilder",
    "Comparator",
    "ComparisonResult",
    "FieldMatch",
    "SCORING_FIELDS",
    "SignalSet",
    "SignalSource",
    "headless_signals",
    # Models
    "ComponentRecord",
    "DeviceInfo",
    "LocaleInfo",
    "Fingerprint",
    "NormalizedRecord",
    "IdentifierOnly",
    "Sentinel",
    # Configuration
    "FingerprintSettings",
    "ScoringWeights",
    "get_settings",
    # Errors
    "CompositeFingerprintError",
    "ProbeError",
    "ProbeUnavailable",
    "ProbeUnsupported",
    "DigestError",
    "ConfigurationError",
    "BrowserSessionError",
]

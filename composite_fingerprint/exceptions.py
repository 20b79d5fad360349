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
Exception hierarchy for Composite Fingerprint.

Probe errors never leave the collector: signal sources may raise
``ProbeUnavailable`` or ``ProbeUnsupported`` and the collector turns them
into the matching sentinel value. The remaining errors signal programmer or
configuration mistakes and do propagate.
"""

from __future__ import annotations

from typing import Optional

from composite_fingerprint.models import Sentinel


class CompositeFingerprintError(Exception):
    """Base class for all package errors."""


class ProbeError(CompositeFingerprintError):
    """
    Raised by a signal source that cannot produce a value.

    Attributes:
        signal: Name of the signal that failed
        sentinel: Sentinel recorded in place of the value
    """

    sentinel: Sentinel = Sentinel.UNAVAILABLE

    def __init__(self, message: str = "", signal: Optional[str] = None) -> None:
        super().__init__(message or f"{self.sentinel.value} signal")
        self.signal = signal


class ProbeUnavailable(ProbeError):
    """The signal cannot be produced in the current environment."""

    sentinel = Sentinel.UNAVAILABLE


class ProbeUnsupported(ProbeError):
    """The environment lacks the capability behind the signal entirely."""

    sentinel = Sentinel.UNSUPPORTED


class DigestError(CompositeFingerprintError):
    """An explicitly requested hash algorithm is not available."""


class ConfigurationError(CompositeFingerprintError):
    """A configuration file is missing or cannot be parsed."""


class BrowserSessionError(CompositeFingerprintError):
    """The probe browser could not be started."""

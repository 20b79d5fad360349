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
Signal source interface.

A signal source observes one environmental property and returns it as a
plain value. Sources are pluggable: the collector receives a ``SignalSet``
at construction, so each environment (headless host, Playwright page, test
fakes) supplies its own implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Iterator, Tuple

from composite_fingerprint.exceptions import ProbeError
from composite_fingerprint.models import Sentinel, SignalValue
from composite_fingerprint.utils.logger import logger


class SignalSource(ABC):
    """Abstract base class for signal sources."""

    name: str = "signal"

    @abstractmethod
    async def probe(self) -> SignalValue:
        """
        Observe the signal.

        Returns:
            The signal value, or a ``Sentinel`` when it cannot be obtained.
            Implementations may raise ``ProbeUnavailable`` or
            ``ProbeUnsupported`` instead of returning the sentinel.
        """


class StaticSource(SignalSource):
    """Source that always returns the same value."""

    def __init__(self, value: SignalValue, name: str = "static") -> None:
        self.value = value
        self.name = name

    async def probe(self) -> SignalValue:
        return self.value


class CallableSource(SignalSource):
    """Adapts a plain synchronous function into a signal source."""

    def __init__(self, func: Callable[[], SignalValue], name: str = "callable") -> None:
        self.func = func
        self.name = name

    async def probe(self) -> SignalValue:
        return self.func()


def unavailable(name: str = "unavailable") -> StaticSource:
    """Source for a signal the current environment can't observe."""
    return StaticSource(Sentinel.UNAVAILABLE.value, name=name)


async def safe_probe(source: SignalSource) -> Any:
    """
    Run a probe and convert any failure into a sentinel value.

    Args:
        source: Signal source to run

    Returns:
        The probed value, with ``Sentinel`` members replaced by their plain
        string value.
    """
    try:
        value = await source.probe()
    except ProbeError as e:
        logger.debug(f"Signal {source.name} reported {e.sentinel.value}: {e}")
        return e.sentinel.value
    except Exception as e:
        logger.debug(f"Signal {source.name} failed: {type(e).__name__}: {e}")
        return Sentinel.UNAVAILABLE.value

    if isinstance(value, Sentinel):
        return value.value
    return value


@dataclass
class SignalSet:
    """
    The seven sources a component record is built from.

    Attributes:
        audio: Audio rendering digest (concurrent group)
        drm: DRM key system digest (concurrent group)
        canvas: Canvas rendering digest (concurrent group)
        storage_salt: Per-scope random salt
        private_mode: Private browsing detection
        device_info: Hardware record
        locale_info: Locale record
    """

    audio: SignalSource
    drm: SignalSource
    canvas: SignalSource
    storage_salt: SignalSource
    private_mode: SignalSource
    device_info: SignalSource
    locale_info: SignalSource

    def items(self) -> Iterator[Tuple[str, SignalSource]]:
        for f in fields(self):
            yield f.name, getattr(self, f.name)

    def replace(self, **sources: SignalSource) -> SignalSet:
        """Return a copy with some sources swapped out."""
        current: Dict[str, SignalSource] = dict(self.items())
        current.update(sources)
        return SignalSet(**current)

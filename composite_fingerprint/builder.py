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

"""Fingerprint building: canonical serialization and hashing."""

from __future__ import annotations

import json
from typing import Callable, Optional

from composite_fingerprint.collector import ComponentCollector
from composite_fingerprint.digest import digest as default_digest
from composite_fingerprint.models import ComponentRecord, Fingerprint
from composite_fingerprint.utils.logger import logger


def canonicalize(record: ComponentRecord) -> str:
    """
    Serialize a component record to its canonical text.

    Keys follow the record's declared field order (not the order of any
    mapping the record was built from), with compact separators and
    non-ASCII characters kept as-is. The same logical record always yields
    the same text.
    """
    return json.dumps(record.to_dict(), separators=(",", ":"), ensure_ascii=False)


class FingerprintBuilder:
    """
    Turns collected components into a ``Fingerprint``.

    Example:
        >>> builder = FingerprintBuilder(ComponentCollector(signals))
        >>> fingerprint = await builder.generate()
        >>> len(fingerprint.identifier)
        64
    """

    def __init__(
        self,
        collector: Optional[ComponentCollector] = None,
        digest: Callable[[str], str] = default_digest,
    ) -> None:
        self.collector = collector or ComponentCollector()
        self.digest = digest

    def build(self, record: ComponentRecord) -> Fingerprint:
        """Compute the identifier for an already collected record."""
        identifier = self.digest(canonicalize(record))
        return Fingerprint(identifier=identifier, components=record)

    async def generate(self) -> Fingerprint:
        """Collect components and build a fresh fingerprint."""
        record = await self.collector.collect()
        fingerprint = self.build(record)
        logger.debug(f"Generated fingerprint {fingerprint.identifier[:16]}...")
        return fingerprint

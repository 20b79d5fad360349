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
Data model for composite fingerprints.

The component record has a fixed key set and nesting shape no matter which
environment produced it; only the values change or become sentinels. Field
names are snake_case in Python and serialize with the camelCase aliases used
on the wire, in declaration order.

Example:
    >>> record = ComponentRecord(
    ...     audio_hash="unavailable",
    ...     drm_hash="unavailable",
    ...     canvas_hash="unavailable",
    ...     storage_salt="1-2-3-4",
    ...     private_flag=False,
    ...     device_info=DeviceInfo(
    ...         user_agent="Python/3.12.1", screen_res="N/A",
    ...         device_memory="16 GB", hardware_concurrency=8,
    ...     ),
    ...     locale_info=LocaleInfo(timezone="UTC", language="en_US.UTF-8"),
    ... )
    >>> list(record.to_dict())[:3]
    ['audioHash', 'drmHash', 'canvasHash']
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field


class Sentinel(str, Enum):
    """Placeholder values recorded when a signal cannot be obtained."""

    UNAVAILABLE = "unavailable"  # probe could not run here
    UNSUPPORTED = "unsupported"  # capability missing entirely


SignalValue = Union[str, bool, int, float, Dict[str, Any], Sentinel]


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary using the wire field names."""
        return self.model_dump(by_alias=True, mode="json")


class DeviceInfo(_Record):
    """Hardware and user agent characteristics."""

    user_agent: str = Field(alias="userAgent")
    screen_res: str = Field(alias="screenRes")
    device_memory: Union[int, float, str] = Field(alias="deviceMemory")
    hardware_concurrency: Union[int, str] = Field(alias="hardwareConcurrency")

    @classmethod
    def filled_with(cls, value: str) -> DeviceInfo:
        """Build a record where every field holds the same placeholder."""
        return cls(
            user_agent=value,
            screen_res=value,
            device_memory=value,
            hardware_concurrency=value,
        )


class LocaleInfo(_Record):
    """Timezone and language preferences."""

    timezone: str
    language: str
    languages: List[str] = Field(default_factory=list)

    @classmethod
    def filled_with(cls, value: str) -> LocaleInfo:
        """Build a record where every scalar field holds the same placeholder."""
        return cls(timezone=value, language=value, languages=[])


class ComponentRecord(_Record):
    """
    The canonical set of signals a fingerprint is computed from.

    Attributes:
        audio_hash: Digest of the rendered audio spectrum, or a sentinel
        drm_hash: Digest of the DRM key system access results, or a sentinel
        canvas_hash: Digest of the rendered canvas image, or a sentinel
        storage_salt: Random value persisted per storage scope, or a sentinel
        private_flag: Best-effort private browsing detection
        device_info: Hardware and user agent record
        locale_info: Timezone and language record
    """

    audio_hash: str = Field(alias="audioHash")
    drm_hash: str = Field(alias="drmHash")
    canvas_hash: str = Field(alias="canvasHash")
    storage_salt: str = Field(alias="storageSalt")
    private_flag: Union[bool, str] = Field(alias="privateFlag")
    device_info: DeviceInfo = Field(alias="deviceInfo")
    locale_info: LocaleInfo = Field(alias="localeInfo")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ComponentRecord:
        """Create from a wire-format (camelCase) or snake_case mapping."""
        return cls.model_validate(dict(data))


class Fingerprint(_Record):
    """
    A composite identifier together with the components it was computed from.

    The identifier is the digest of the canonical serialization of
    ``components``; any change to a component value changes it.
    """

    identifier: str
    components: ComponentRecord

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "identifier": self.identifier,
            "components": self.components.to_dict(),
        }


# ============================================================================
# Normalized comparison shapes
# ============================================================================


@dataclass(frozen=True)
class NormalizedRecord:
    """A component mapping ready for field-by-field scoring."""

    data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.data


@dataclass(frozen=True)
class IdentifierOnly:
    """An opaque identifier that can only be compared for equality."""

    identifier: str


NormalizedShape = Union[NormalizedRecord, IdentifierOnly]

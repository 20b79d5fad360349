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
Comparator input normalization.

Accepts anything a caller might hold on to between two fingerprinting runs
and reduces it to one of two shapes:

- ``NormalizedRecord``: a component mapping that can be scored field by field
- ``IdentifierOnly``: an opaque identifier that can only be tested for equality

Recognized inputs, checked in this order:

1. ``NormalizedRecord`` / ``IdentifierOnly`` (returned unchanged)
2. ``Fingerprint``, a mapping with a non-empty ``components`` entry, or any
   other object with a non-empty ``components`` attribute
3. ``ComponentRecord`` or a mapping containing ``audioHash``
4. JSON text (or UTF-8 bytes) of any of the above
5. Any other text, taken as an identifier

Everything else degrades to an empty record and logs a warning. Nothing is
raised.

Example:
    >>> normalize('{"components": {"audioHash": "ab"}}')
    NormalizedRecord(data={'audioHash': 'ab'})
    >>> normalize("9f86d081884c7d65")
    IdentifierOnly(identifier='9f86d081884c7d65')
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from composite_fingerprint.models import (
    ComponentRecord,
    Fingerprint,
    IdentifierOnly,
    NormalizedRecord,
    NormalizedShape,
)
from composite_fingerprint.utils.logger import logger

RECORD_MARKER = "audioHash"

# Text starting with one of these was meant to be structured data
_STRUCTURED_PREFIXES = ("{", "[")


def _empty(reason: str) -> NormalizedRecord:
    logger.warning(f"Comparator input not recognized, using empty record: {reason}")
    return NormalizedRecord({})


def _from_components(components: Any) -> NormalizedRecord:
    if isinstance(components, ComponentRecord):
        return NormalizedRecord(components.to_dict())
    if isinstance(components, Mapping):
        return NormalizedRecord(dict(components))
    # Not a mapping: kept so the comparator can reject it
    return NormalizedRecord(components)


def _from_mapping(value: Mapping[str, Any]) -> NormalizedRecord:
    components = value.get("components")
    if components:
        return _from_components(components)

    if RECORD_MARKER in value:
        return NormalizedRecord(dict(value))

    return _empty(f"mapping without components or {RECORD_MARKER}")


def _from_text(text: str) -> NormalizedShape:
    try:
        parsed = json.loads(text)
    except ValueError:
        if text.lstrip().startswith(_STRUCTURED_PREFIXES):
            return _empty("malformed JSON text")
        return IdentifierOnly(text)

    if isinstance(parsed, Mapping):
        return _from_mapping(parsed)
    if isinstance(parsed, str):
        # JSON-quoted identifier (or doubly encoded JSON)
        return _from_text(parsed)
    if isinstance(parsed, list):
        return _empty("JSON array")
    # Bare JSON scalars ("12345", "true") are identifiers that happen to parse
    return IdentifierOnly(text)


def normalize(value: Any) -> NormalizedShape:
    """
    Reduce comparator input to a record or an identifier.

    Args:
        value: Fingerprint, ComponentRecord, mapping, identifier, JSON text
            or an already normalized shape

    Returns:
        ``NormalizedRecord`` or ``IdentifierOnly``.
    """
    if isinstance(value, (NormalizedRecord, IdentifierOnly)):
        return value
    if isinstance(value, Fingerprint):
        return NormalizedRecord(value.components.to_dict())
    if isinstance(value, ComponentRecord):
        return NormalizedRecord(value.to_dict())
    if isinstance(value, Mapping):
        return _from_mapping(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            return _from_text(bytes(value).decode("utf-8"))
        except UnicodeDecodeError:
            return _empty("bytes are not UTF-8")
    if isinstance(value, str):
        return _from_text(value)
    components = getattr(value, "components", None)
    if components:
        return _from_components(components)
    return _empty(f"unsupported type {type(value).__name__}")

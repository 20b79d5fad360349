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
Digest function for canonical payloads.

The hashing primitive is chosen at call time from what the running
interpreter's ``hashlib`` provides. Every supported primitive yields a
32-byte digest, so identifiers are always 64 lowercase hex characters.
Nothing is mixed into the payload: any salt must already be part of the
text being hashed.
"""

from __future__ import annotations

import hashlib
from typing import Optional, Tuple

from composite_fingerprint.exceptions import DigestError

DEFAULT_ALGORITHM = "sha256"

# Fallback order when no algorithm is requested or the default is missing
PREFERRED_ALGORITHMS: Tuple[str, ...] = ("sha256", "sha3_256", "blake2b")

DIGEST_SIZE = 32


def select_algorithm(requested: Optional[str] = None) -> str:
    """
    Pick the hashing primitive to use for this call.

    Args:
        requested: Algorithm name to use. When given it must be available
            and must be one of the 32-byte primitives.

    Returns:
        Name of the selected algorithm.

    Raises:
        DigestError: If the requested algorithm cannot be used.
    """
    available = hashlib.algorithms_available
    if requested:
        name = requested.lower().replace("-", "_")
        if name == "sha_256":
            name = "sha256"
        if name not in PREFERRED_ALGORITHMS or name not in available:
            raise DigestError(f"Hash algorithm not available: {requested}")
        return name

    for name in PREFERRED_ALGORITHMS:
        if name in available:
            return name
    raise DigestError("No supported hash algorithm available")


def digest(text: str, algorithm: Optional[str] = None) -> str:
    """
    Hash text to a fixed-length hex identifier.

    Args:
        text: Canonical payload
        algorithm: Optional algorithm override (default: sha256)

    Returns:
        64-character lowercase hex digest.
    """
    name = select_algorithm(algorithm)
    payload = text.encode("utf-8")
    if name == "blake2b":
        return hashlib.blake2b(payload, digest_size=DIGEST_SIZE).hexdigest()
    return hashlib.new(name, payload).hexdigest()

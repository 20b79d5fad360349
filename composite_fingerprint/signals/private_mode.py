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
Best-effort private browsing detection.

Private windows typically either refuse to open a database or grant a much
smaller storage quota than a normal profile. The detection attempts to open
a throwaway test database and then compares the estimated quota against a
threshold.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from composite_fingerprint.config import DEFAULT_PRIVATE_QUOTA_THRESHOLD
from composite_fingerprint.exceptions import ProbeError, ProbeUnsupported
from composite_fingerprint.signals.base import SignalSource
from composite_fingerprint.utils.logger import logger


class DatabaseBackend(ABC):
    """The storage capabilities private-mode detection needs."""

    @abstractmethod
    async def open_test_database(self) -> bool:
        """
        Open (and discard) a test database.

        Returns:
            False if opening failed.

        Raises:
            ProbeUnsupported: If the environment has no database API.
        """

    @abstractmethod
    async def estimate_quota(self) -> Optional[int]:
        """
        Estimate the storage quota in bytes.

        Raises:
            ProbeUnsupported: If the environment has no estimation API.
        """


def classify_private_mode(
    opened: bool,
    quota: Optional[float],
    threshold: int = DEFAULT_PRIVATE_QUOTA_THRESHOLD,
) -> bool:
    """
    Decide whether the probed storage looks like a private session.

    Args:
        opened: Whether the test database opened
        quota: Estimated quota in bytes, None when it couldn't be estimated
        threshold: Quota below which the session counts as private

    Returns:
        True for private.
    """
    if not opened:
        return True
    if not quota:
        return False
    return quota < threshold


class PrivateModeSource(SignalSource):
    """
    Private mode signal.

    Without a backend, or without a database API, the session is reported
    as not private.
    """

    name = "private_mode"

    def __init__(
        self,
        backend: Optional[DatabaseBackend] = None,
        threshold: int = DEFAULT_PRIVATE_QUOTA_THRESHOLD,
    ) -> None:
        self.backend = backend
        self.threshold = threshold

    async def probe(self) -> bool:
        if self.backend is None:
            return False

        try:
            opened = await self.backend.open_test_database()
        except ProbeUnsupported:
            return False
        except Exception as e:
            logger.debug(f"Test database failed to open: {type(e).__name__}: {e}")
            return True

        quota: Optional[int] = None
        if opened:
            try:
                quota = await self.backend.estimate_quota()
            except ProbeError as e:
                logger.debug(f"Storage quota estimate unsupported: {e}")
            except Exception as e:
                logger.debug(f"Storage quota estimate failed: {type(e).__name__}: {e}")

        return classify_private_mode(opened, quota, self.threshold)

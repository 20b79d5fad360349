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
Signal sources backed by a Playwright page.

The probes run the JavaScript in ``signals.scripts`` inside the page and
hash the raw results with the package digest function. ``BrowserSession``
manages a throwaway browser for one-off collections:

Example:
    >>> async with BrowserSession(browser_type="chromium") as signals:
    ...     fingerprint = await FingerprintBuilder(ComponentCollector(signals)).generate()

Storage-backed signals need a real origin. On ``about:blank`` the page has
an opaque origin, ``localStorage`` throws and the storage salt is reported
as unavailable.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

from composite_fingerprint.config import FingerprintSettings, get_settings
from composite_fingerprint.digest import digest as default_digest
from composite_fingerprint.exceptions import (
    BrowserSessionError,
    ProbeUnavailable,
    ProbeUnsupported,
)
from composite_fingerprint.signals import scripts
from composite_fingerprint.signals.base import SignalSet, SignalSource
from composite_fingerprint.signals.private_mode import DatabaseBackend, PrivateModeSource
from composite_fingerprint.signals.storage import KeyValueStore, StorageSaltSource
from composite_fingerprint.utils.logger import logger

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

TEST_DATABASE_NAME = "fp-test"

DigestFunc = Callable[[str], str]


class PageSource(SignalSource):
    """Base class for sources that evaluate a script in a page."""

    def __init__(self, page: Page, digest: DigestFunc = default_digest) -> None:
        self.page = page
        self.digest = digest


class AudioHashSource(PageSource):
    name = "audio"

    async def probe(self) -> str:
        samples = await self.page.evaluate(scripts.AUDIO_SAMPLES_SCRIPT)
        if samples is None:
            raise ProbeUnavailable("AudioContext not available", signal=self.name)
        return self.digest(samples)


class DrmHashSource(PageSource):
    name = "drm"

    async def probe(self) -> str:
        results = await self.page.evaluate(scripts.DRM_ACCESS_SCRIPT, scripts.DRM_KEY_SYSTEMS)
        if results is None:
            raise ProbeUnsupported("requestMediaKeySystemAccess missing", signal=self.name)
        return self.digest("|".join(results))


class CanvasHashSource(PageSource):
    name = "canvas"

    async def probe(self) -> str:
        data_url = await self.page.evaluate(scripts.CANVAS_DATA_URL_SCRIPT, scripts.CANVAS_TEXT)
        if not data_url:
            raise ProbeUnavailable("2d canvas context not available", signal=self.name)
        return self.digest(data_url)


class DeviceInfoSource(PageSource):
    name = "device_info"

    async def probe(self) -> Dict[str, Any]:
        return await self.page.evaluate(scripts.DEVICE_INFO_SCRIPT)


class LocaleInfoSource(PageSource):
    name = "locale_info"

    async def probe(self) -> Dict[str, Any]:
        return await self.page.evaluate(scripts.LOCALE_INFO_SCRIPT)


class LocalStorageStore(KeyValueStore):
    """The page origin's ``localStorage``."""

    def __init__(self, page: Page) -> None:
        self.page = page

    async def get(self, key: str) -> Optional[str]:
        return await self.page.evaluate(scripts.LOCAL_STORAGE_GET_SCRIPT, key)

    async def set(self, key: str, value: str) -> None:
        await self.page.evaluate(scripts.LOCAL_STORAGE_SET_SCRIPT, [key, value])


class IndexedDBBackend(DatabaseBackend):
    """IndexedDB and the StorageManager estimate API of a page."""

    def __init__(self, page: Page, database_name: str = TEST_DATABASE_NAME) -> None:
        self.page = page
        self.database_name = database_name

    async def open_test_database(self) -> bool:
        status = await self.page.evaluate(scripts.OPEN_TEST_DATABASE_SCRIPT, self.database_name)
        if status == "unsupported":
            raise ProbeUnsupported("indexedDB missing", signal="private_mode")
        return status == "opened"

    async def estimate_quota(self) -> Optional[int]:
        quota = await self.page.evaluate(scripts.STORAGE_QUOTA_SCRIPT)
        if quota is None:
            raise ProbeUnsupported("navigator.storage.estimate missing", signal="private_mode")
        return int(quota)


def browser_signals(
    page: Page,
    settings: Optional[FingerprintSettings] = None,
    digest: DigestFunc = default_digest,
) -> SignalSet:
    """
    Build the signal set for a Playwright page.

    Args:
        page: Page the probes run in
        settings: Settings to use (default: global settings)
        digest: Digest function for the rendering signals

    Returns:
        SignalSet for the collector.
    """
    settings = settings or get_settings()
    return SignalSet(
        audio=AudioHashSource(page, digest),
        drm=DrmHashSource(page, digest),
        canvas=CanvasHashSource(page, digest),
        storage_salt=StorageSaltSource(LocalStorageStore(page), key=settings.salt_key),
        private_mode=PrivateModeSource(
            IndexedDBBackend(page), threshold=settings.private_quota_threshold
        ),
        device_info=DeviceInfoSource(page, digest),
        locale_info=LocaleInfoSource(page, digest),
    )


class BrowserSession:
    """
    Launches a browser, opens the probe page and yields its signal set.

    Args:
        settings: Settings to use (default: global settings)
        browser_type: Overrides ``settings.browser_type``
        headless: Overrides ``settings.headless``
        url: Overrides ``settings.probe_url``
    """

    def __init__(
        self,
        settings: Optional[FingerprintSettings] = None,
        browser_type: Optional[str] = None,
        headless: Optional[bool] = None,
        url: Optional[str] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.browser_type = (browser_type or self.settings.browser_type).lower()
        self.headless = self.settings.headless if headless is None else headless
        self.url = url or self.settings.probe_url
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    @property
    def page(self) -> Optional[Page]:
        return self._page

    async def start(self) -> SignalSet:
        """
        Start the browser and navigate to the probe page.

        Raises:
            BrowserSessionError: If the browser type is unknown or fails to start
        """
        if self.browser_type not in SUPPORTED_BROWSERS:
            raise BrowserSessionError(f"Unsupported browser type: {self.browser_type}")

        try:
            logger.info(f"Starting {self.browser_type} probe browser (headless={self.headless})")
            self._playwright = await async_playwright().start()
            launcher = getattr(self._playwright, self.browser_type)
            self._browser = await launcher.launch(headless=self.headless)
            self._page = await self._browser.new_page()
            await self._page.goto(self.url, timeout=self.settings.navigation_timeout_ms)
        except Exception as e:
            await self.stop()
            raise BrowserSessionError(f"Failed to start probe browser: {e}") from e

        return browser_signals(self._page, self.settings)

    async def stop(self) -> None:
        """Close the browser and stop Playwright."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing probe browser: {e}")
            self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
            self._playwright = None
        self._page = None

    async def __aenter__(self) -> SignalSet:
        return await self.start()

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.stop()

"""Browser context: owns Playwright, the browser and its tabs."""

from typing import Optional

from playwright.async_api import (
    Browser,
    BrowserContext as PlaywrightContext,
    Playwright,
    async_playwright,
)

from browser_runner.browser.tab import Tab
from browser_runner.utils.config import Config
from browser_runner.utils.logger import setup_logger

logger = setup_logger(__name__)


class BrowserContext:
    """
    Starts or attaches to a browser and hands out tabs.

    With ``cdp_endpoint`` configured we attach to an already running
    Chromium (and reuse its first context and pages), otherwise a browser
    of ``browser_type`` is launched.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[PlaywrightContext] = None
        self._tabs: list[Tab] = []
        self._current: Optional[Tab] = None

    @property
    def is_started(self) -> bool:
        return self._context is not None

    async def start(self) -> None:
        """Start Playwright and open or attach to the browser."""
        if self.is_started:
            return

        self._playwright = await async_playwright().start()

        if self.config.cdp_endpoint:
            logger.info(f"Connecting to browser over CDP: {self.config.cdp_endpoint}")
            self._browser = await self._playwright.chromium.connect_over_cdp(
                self.config.cdp_endpoint
            )
            if self._browser.contexts:
                self._context = self._browser.contexts[0]
            else:
                self._context = await self._browser.new_context()
        else:
            logger.info(
                f"Launching {self.config.browser_type} (headless={self.config.headless})"
            )
            browser_type = getattr(self._playwright, self.config.browser_type)
            self._browser = await browser_type.launch(headless=self.config.headless)
            self._context = await self._browser.new_context()

        for page in self._context.pages:
            self._tabs.append(self._wrap(page))
        if self._tabs:
            self._current = self._tabs[0]

        logger.info(f"Browser context started with {len(self._tabs)} tab(s)")

    async def close(self) -> None:
        """Close the browser (or detach from it) and stop Playwright."""
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._playwright is not None:
                await self._playwright.stop()
            self._playwright = None
            self._browser = None
            self._context = None
            self._tabs = []
            self._current = None
            logger.info("Browser context closed")

    def _require_context(self) -> PlaywrightContext:
        if self._context is None:
            raise RuntimeError(
                "Browser context not started. Call await context.start() first."
            )
        return self._context

    def _wrap(self, page) -> Tab:
        return Tab(
            page,
            completion_timeout_ms=self.config.completion_timeout_ms,
            settle_timeout_ms=self.config.settle_timeout_ms,
        )

    def tabs(self) -> list[Tab]:
        """Open tabs, closed pages are dropped."""
        self._tabs = [tab for tab in self._tabs if not tab.is_closed()]
        return list(self._tabs)

    def current_tab(self) -> Optional[Tab]:
        if self._current is not None and self._current.is_closed():
            self._current = None
        return self._current

    async def new_tab(self) -> Tab:
        """Open a new page and make it the current tab."""
        context = self._require_context()
        page = await context.new_page()
        tab = self._wrap(page)
        self._tabs.append(tab)
        self._current = tab
        logger.debug(f"Opened new tab, {len(self._tabs)} tab(s) open")
        return tab

    async def ensure_tab(self) -> Tab:
        """Current tab, opening one if there is none yet."""
        self._require_context()
        tab = self.current_tab()
        if tab is None:
            open_tabs = self.tabs()
            tab = open_tabs[-1] if open_tabs else await self.new_tab()
            self._current = tab
        return tab

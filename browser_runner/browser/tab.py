"""Tab: one Playwright page plus the helpers tools need around it."""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from browser_runner.utils.logger import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class PageSnapshot:
    """What the page looks like after a tool call."""

    url: str
    title: str
    aria: str


class Tab:
    """
    Wraps a Playwright Page.

    Tools never hold on to the page themselves: they get it from the tab
    for the duration of one call.
    """

    def __init__(
        self,
        page: Page,
        completion_timeout_ms: int = 10000,
        settle_timeout_ms: int = 1000,
    ) -> None:
        self.page = page
        self._completion_timeout_ms = completion_timeout_ms
        self._settle_timeout_ms = settle_timeout_ms

    async def wait_for_completion(self, callback: Callable[[], Awaitable[T]]) -> T:
        """
        Run callback and wait until the work it triggered on the page settles.

        Requests issued while the callback runs are tracked; after it returns
        we wait for them to finish, or for the ``load`` state if the main
        frame navigated. Waiting is capped by the completion timeout, then
        the settle delay is applied.

        Listeners are removed exactly once whether the callback succeeds or
        raises. Exceptions from the callback propagate unchanged.

        Args:
            callback: Async callable doing the actual work

        Returns:
            Whatever callback returned
        """
        requests: set[Any] = set()
        settled = asyncio.Event()
        navigated = False
        disposed = False
        load_task: "asyncio.Task[None] | None" = None
        loop = asyncio.get_running_loop()

        def on_request(request: Any) -> None:
            requests.add(request)

        def on_request_done(request: Any) -> None:
            requests.discard(request)
            if not requests:
                settled.set()

        def on_frame_navigated(frame: Any) -> None:
            nonlocal navigated, load_task
            if frame.parent_frame is not None:
                return
            navigated = True
            dispose()
            load_task = asyncio.ensure_future(self._wait_for_load(settled))

        def on_timeout() -> None:
            logger.debug("Completion timeout reached, not waiting any longer")
            dispose()
            settled.set()

        listeners = {
            "request": on_request,
            "requestfinished": on_request_done,
            "requestfailed": on_request_done,
            "framenavigated": on_frame_navigated,
        }

        def dispose() -> None:
            nonlocal disposed
            if disposed:
                return
            disposed = True
            timer.cancel()
            for event, listener in listeners.items():
                self.page.remove_listener(event, listener)

        for event, listener in listeners.items():
            self.page.on(event, listener)
        timer = loop.call_later(self._completion_timeout_ms / 1000, on_timeout)

        try:
            result = await callback()

            if not requests and not navigated:
                settled.set()
            await settled.wait()

            if self._settle_timeout_ms:
                await self.page.wait_for_timeout(self._settle_timeout_ms)
            return result
        finally:
            dispose()
            if load_task is not None and not load_task.done():
                load_task.cancel()

    async def _wait_for_load(self, settled: asyncio.Event) -> None:
        try:
            await self.page.wait_for_load_state(
                "load", timeout=self._completion_timeout_ms
            )
        except PlaywrightError as e:
            logger.debug(f"Load state not reached after navigation: {e}")
        finally:
            settled.set()

    async def capture_snapshot(self) -> PageSnapshot:
        """Capture URL, title and ARIA snapshot of the page body."""
        title = await self.page.title()
        aria = await self.page.locator("body").aria_snapshot()
        return PageSnapshot(url=self.page.url, title=title, aria=aria)

    def is_closed(self) -> bool:
        return self.page.is_closed()

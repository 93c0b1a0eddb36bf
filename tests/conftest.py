from collections import defaultdict

import pytest

from browser_runner.browser.tab import Tab
from browser_runner.utils.config import Config


class FakeFrame:
    def __init__(self, parent_frame=None):
        self.parent_frame = parent_frame


class FakeRequest:
    def __init__(self, url):
        self.url = url


class FakeLocator:
    def __init__(self, page, selector):
        self._page = page
        self.selector = selector

    async def aria_snapshot(self):
        if self._page.snapshot_error is not None:
            raise self._page.snapshot_error
        return self._page.aria


class FakePage:
    """Just enough of playwright.async_api.Page for tabs and tools."""

    def __init__(self, url="https://example.com/", title="Example Domain"):
        self.url = url
        self._title = title
        self.aria = '- heading "Example Domain" [level=1]'
        self.snapshot_error = None
        self.main_frame = FakeFrame()
        self.listeners = defaultdict(list)
        self.store = {}
        self.load_states = []
        self.timeouts = []
        self.closed = False

    def on(self, event, listener):
        self.listeners[event].append(listener)

    def remove_listener(self, event, listener):
        self.listeners[event].remove(listener)

    def emit(self, event, payload):
        for listener in list(self.listeners[event]):
            listener(payload)

    def listener_count(self):
        return sum(len(listeners) for listeners in self.listeners.values())

    async def title(self):
        return self._title

    def locator(self, selector):
        return FakeLocator(self, selector)

    async def goto(self, url):
        request = FakeRequest(url)
        self.emit("request", request)
        self.url = url
        self.emit("framenavigated", self.main_frame)
        self.emit("requestfinished", request)

    async def wait_for_timeout(self, timeout):
        self.timeouts.append(timeout)

    async def wait_for_load_state(self, state="load", timeout=None):
        self.load_states.append(state)

    def is_closed(self):
        return self.closed

    async def close(self):
        self.closed = True


class FakeContext:
    """Stands in for BrowserContext when binding tools."""

    def __init__(self, tab, config=None, started=True):
        self.tab = tab
        self.config = config or Config()
        self.is_started = started

    async def ensure_tab(self):
        return self.tab


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def tab(page):
    return Tab(page, completion_timeout_ms=1000, settle_timeout_ms=0)


@pytest.fixture
def context(tab):
    return FakeContext(tab)

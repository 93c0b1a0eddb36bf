from browser_runner.browser.context import BrowserContext
from browser_runner.browser.tab import PageSnapshot, Tab

__all__ = ["BrowserContext", "PageSnapshot", "Tab"]

"""Browser Runner - run Playwright code against a live browser page."""

__version__ = "0.1.0"

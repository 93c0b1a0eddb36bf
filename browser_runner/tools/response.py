"""Response accumulator for tab tools.

Tools add code, results and errors while they run; ``serialize`` renders
them into markdown sections:

    ### Result
    "..."

    ### Ran Playwright code
    ```python
    await page.goto(...)
    ```

    ### Page state
    - Page URL: ...
"""

from typing import TYPE_CHECKING, Optional

from browser_runner.utils.logger import setup_logger

if TYPE_CHECKING:
    from browser_runner.browser.tab import Tab

logger = setup_logger(__name__)


class Response:
    """Collects what a single tool call produced."""

    def __init__(self, codegen: str = "python") -> None:
        self._codegen = codegen
        self._code: list[str] = []
        self._results: list[str] = []
        self._errors: list[str] = []
        self._include_snapshot = False

    def add_code(self, code: str) -> None:
        self._code.append(code)

    def add_result(self, text: str) -> None:
        self._results.append(text)

    def add_error(self, text: str) -> None:
        self._errors.append(text)

    def set_include_snapshot(self) -> None:
        self._include_snapshot = True

    @property
    def code(self) -> list[str]:
        return list(self._code)

    @property
    def results(self) -> list[str]:
        return list(self._results)

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    @property
    def include_snapshot(self) -> bool:
        return self._include_snapshot

    async def serialize(self, tab: Optional["Tab"] = None) -> str:
        """
        Render the response as markdown.

        Args:
            tab: Tab to snapshot when a snapshot was requested

        Returns:
            Markdown text with Error/Result/Ran Playwright code/Page state sections
        """
        sections: list[str] = []

        if self._errors:
            sections.append("### Error\n" + "\n".join(self._errors))

        if self._results:
            sections.append("### Result\n" + "\n".join(self._results))

        if self._code and self._codegen != "none":
            code = "\n".join(self._code)
            sections.append(f"### Ran Playwright code\n```python\n{code}\n```")

        if self._include_snapshot and tab is not None:
            sections.append(await self._render_page_state(tab))

        return "\n\n".join(sections)

    async def _render_page_state(self, tab: "Tab") -> str:
        lines = ["### Page state"]
        try:
            snapshot = await tab.capture_snapshot()
        except Exception as e:
            # Page may be closed or navigating; the call itself already ran
            logger.warning(f"Failed to capture page snapshot: {e}", exc_info=True)
            lines.append(f"- Page snapshot unavailable: {e}")
            return "\n".join(lines)

        lines.append(f"- Page URL: {snapshot.url}")
        if snapshot.title:
            lines.append(f"- Page Title: {snapshot.title}")
        lines.append(f"- Page Snapshot:\n```yaml\n{snapshot.aria}\n```")
        return "\n".join(lines)

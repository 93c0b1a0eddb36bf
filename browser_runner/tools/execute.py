"""Tool for running Playwright code submitted by the agent."""

import json

from pydantic import BaseModel, Field

from browser_runner.browser.tab import Tab
from browser_runner.tools._executor import (
    CodeExecutor,
    ExecutionOutcome,
    Failure,
    NoValue,
    Value,
)
from browser_runner.tools._normalizer import normalize_code
from browser_runner.tools.response import Response
from browser_runner.tools.tool import ToolSchema, define_tab_tool
from browser_runner.utils.logger import setup_logger

logger = setup_logger(__name__)

SUCCESS_MARKER = "Code executed successfully"
ERROR_PREFIX = "Execution failed: "
NO_TRACE = "No stack trace available"


class ExecutePlaywrightCodeInput(BaseModel):
    """Input of browser_execute_playwright_code."""

    code: str = Field(
        ...,
        description=(
            "One or more lines of Playwright Python code to execute. "
            "Can include await statements. Examples: "
            "\"await page.goto('https://example.com')\" or "
            "\"await page.get_by_role('button', name='Submit').click()\" or "
            "multiple lines separated by line breaks or semicolons. "
            "Use `return` to get a value back."
        ),
    )


def format_failure(failure: Failure) -> str:
    """Error text shown to the caller for a failed run."""
    trace = failure.trace or NO_TRACE
    return f"{ERROR_PREFIX}{failure.message}\n\nStack trace:\n{trace}"


def report_outcome(response: Response, code: str, outcome: ExecutionOutcome) -> None:
    """
    Write the outcome of a run into the response.

    The submitted code is echoed as received, not as normalized.

    Args:
        response: Response of the current tool call
        code: Original code from the request
        outcome: Result of CodeExecutor.run
    """
    if isinstance(outcome, Value):
        try:
            serialized = json.dumps(
                outcome.payload, indent=2, ensure_ascii=False, default=str
            )
        except Exception as e:
            # Circular or too deeply nested values, or a __str__ that raises
            outcome = Failure.from_exception(e)
        else:
            response.add_code(code)
            response.add_result(serialized)
            return

    if isinstance(outcome, NoValue):
        response.add_code(code)
        response.add_result(SUCCESS_MARKER)
        return

    response.add_error(format_failure(outcome))
    response.add_code(code)


def make_handler(keep_indentation: bool = False):
    """
    Build the tool handler.

    Args:
        keep_indentation: Keep relative indentation of submitted lines

    Returns:
        Async handler (tab, params, response) -> None
    """

    async def handle(tab: Tab, params: ExecutePlaywrightCodeInput, response: Response) -> None:
        response.set_include_snapshot()

        body = normalize_code(params.code, keep_indentation=keep_indentation)
        logger.info(f"Executing Playwright code ({len(body.splitlines())} lines)")

        outcome = await CodeExecutor.run(
            body,
            {"page": tab.page},
            completion=tab.wait_for_completion,
        )
        report_outcome(response, params.code, outcome)

    return handle


def execute_playwright_code(keep_indentation: bool = False):
    """Tab tool definition for browser_execute_playwright_code."""
    return define_tab_tool(
        capability="core",
        schema=ToolSchema(
            name="browser_execute_playwright_code",
            title="Execute Playwright code",
            description=(
                "Execute Playwright API code directly on the current page. "
                "The code runs inside an async function with `page` "
                "(playwright.async_api.Page) as its only argument. Can execute "
                "multiple lines of code from test files like: "
                "await page.goto(url), await page.click(selector), "
                "await page.fill(selector, text), etc. Use this to execute "
                "code from test files line by line."
            ),
            input_schema=ExecutePlaywrightCodeInput,
            type="action",
        ),
        handle=make_handler(keep_indentation),
    )

"""Browser tools package.

This package provides browser tools that run against the current tab of a
BrowserContext and are exposed to agents as LangChain tools.

Usage:
    from browser_runner.browser import BrowserContext
    from browser_runner.tools import get_browser_tools

    # Start the browser (in main.py)
    context = BrowserContext(config)
    await context.start()

    # Get all browser tools
    tools = get_browser_tools(context)
"""

from langchain_core.tools import BaseTool

from browser_runner.browser.context import BrowserContext
from browser_runner.tools._executor import CodeExecutor
from browser_runner.tools.execute import execute_playwright_code
from browser_runner.tools.response import Response
from browser_runner.tools.tool import TabTool, ToolSchema, define_tab_tool

__all__ = [
    # Executor
    "CodeExecutor",
    # Definitions
    "Response",
    "TabTool",
    "ToolSchema",
    "define_tab_tool",
    # Tools
    "execute_playwright_code",
    # Factory
    "get_tab_tools",
    "get_browser_tools",
]


def get_tab_tools(keep_indentation: bool = False) -> list[TabTool]:
    """All tab tool definitions, not yet bound to a browser."""
    return [
        execute_playwright_code(keep_indentation=keep_indentation),
    ]


def get_browser_tools(context: BrowserContext) -> list[BaseTool]:
    """
    Get all browser tools for LLM.

    Args:
        context: Browser context the tools operate on

    Returns:
        List of LangChain tools bound to the context.

    Note:
        The context must be started before calling this function.
        Call await context.start() first in main.py.
    """
    if not context.is_started:
        raise RuntimeError(
            "Browser context not started. "
            "Call await context.start() before get_browser_tools()."
        )

    return [
        tool.to_langchain(context)
        for tool in get_tab_tools(keep_indentation=context.config.keep_indentation)
    ]

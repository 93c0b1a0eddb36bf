"""Tab tool definitions and their conversion to LangChain tools."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Literal

from langchain_core.tools import StructuredTool
from pydantic import BaseModel

from browser_runner.tools.response import Response
from browser_runner.utils.logger import setup_logger

if TYPE_CHECKING:
    from browser_runner.browser.context import BrowserContext
    from browser_runner.browser.tab import Tab

logger = setup_logger(__name__)

ToolType = Literal["readOnly", "action"]
ToolCapability = Literal["core", "tabs", "pdf", "vision"]

TabToolHandler = Callable[["Tab", BaseModel, Response], Awaitable[None]]


@dataclass(frozen=True)
class ToolSchema:
    """Name, description and input model of a tool."""

    name: str
    title: str
    description: str
    input_schema: type[BaseModel]
    type: ToolType


@dataclass(frozen=True)
class TabTool:
    """
    A tool that operates on the current tab.

    The handler receives the tab, validated params and a fresh Response;
    it reports through the response instead of returning a value.
    """

    capability: ToolCapability
    schema: ToolSchema
    handle: TabToolHandler

    def to_langchain(self, context: "BrowserContext") -> StructuredTool:
        """
        Bind the tool to a browser context as a LangChain StructuredTool.

        Args:
            context: Started browser context providing the current tab

        Returns:
            StructuredTool returning the serialized markdown response
        """
        tool_def = self

        async def _run(**kwargs) -> str:
            params = tool_def.schema.input_schema(**kwargs)
            tab = await context.ensure_tab()
            response = Response(codegen=context.config.codegen)

            logger.info(f"Running tool {tool_def.schema.name}")
            await tool_def.handle(tab, params, response)

            return await response.serialize(tab)

        return StructuredTool.from_function(
            coroutine=_run,
            name=self.schema.name,
            description=self.schema.description,
            args_schema=self.schema.input_schema,
            metadata={
                "title": self.schema.title,
                "type": self.schema.type,
                "capability": self.capability,
            },
        )


def define_tab_tool(
    capability: ToolCapability,
    schema: ToolSchema,
    handle: TabToolHandler,
) -> TabTool:
    """Declare a tab tool."""
    return TabTool(capability=capability, schema=schema, handle=handle)

"""CLI interface for Browser Runner."""

from langchain_core.tools import BaseTool
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt

from browser_runner.utils.logger import setup_logger

logger = setup_logger(__name__)
console = Console()

EXIT_COMMANDS = ["exit", "quit", "q"]


def read_code_block() -> str | None:
    """
    Read a block of code from the user.

    Lines are collected until an empty line. A single exit command on the
    first line ends the session (None is returned).

    Returns:
        Code as typed, "help", or None to exit
    """
    first = Prompt.ask("\n[bold green]Code[/bold green]")

    if first.strip().lower() in EXIT_COMMANDS:
        return None
    if first.strip().lower() == "help":
        return "help"

    lines = [first]
    while lines[-1].strip():
        lines.append(console.input("[dim]...[/dim] "))

    return "\n".join(lines)


async def run_once(tool: BaseTool, code: str) -> bool:
    """
    Run code through the tool and print the response.

    Args:
        tool: browser_execute_playwright_code tool
        code: Code to run

    Returns:
        False if the response reports an error
    """
    logger.info(f"Running code block ({len(code)} chars)")
    output = await tool.ainvoke({"code": code})

    failed = str(output).startswith("### Error")
    console.print(
        Panel(
            Markdown(str(output)),
            title="Error" if failed else "Result",
            border_style="red" if failed else "green",
        )
    )
    return not failed


async def run_cli(tool: BaseTool) -> None:
    """
    Start the interactive REPL.

    Args:
        tool: browser_execute_playwright_code tool

    Example:
        >>> tools = get_browser_tools(context)
        >>> await run_cli(tools[0])
    """
    console.print(
        Panel.fit(
            "[bold cyan]Browser Runner[/bold cyan]\n"
            "Run Playwright code against the current page\n\n"
            "Enter code, finish with an empty line.\n\n"
            "Commands:\n"
            "  [yellow]exit/quit[/yellow] - Exit\n"
            "  [yellow]help[/yellow] - Help",
            title="Welcome!",
        )
    )

    while True:
        try:
            code = read_code_block()

            if code is None:
                console.print("[yellow]Bye![/yellow]")
                break

            if code == "help":
                show_help()
                continue

            if not code.strip():
                continue

            try:
                await run_once(tool, code)
            except Exception as e:
                logger.error(f"Error during code execution: {e}", exc_info=True)
                console.print(
                    Panel(
                        f"[red]Error: {str(e)}[/red]",
                        title="Execution error",
                        border_style="red",
                    )
                )

        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted. Use 'exit' to quit.[/yellow]")
            continue
        except EOFError:
            console.print("\n[yellow]Bye![/yellow]")
            break


def show_help() -> None:
    """Show usage help."""
    help_text = """
[bold]Examples:[/bold]

[cyan]1. Navigation:[/cyan]
   await page.goto("https://example.com")

[cyan]2. Read a value:[/cyan]
   return await page.title()

[cyan]3. Several steps:[/cyan]
   await page.fill("#q", "playwright")
   await page.keyboard.press("Enter")
   return page.url

[bold]Tips:[/bold]
- `page` is the current tab (playwright.async_api.Page)
- Use `return` to get a value back, it is shown as JSON
- Every line is trimmed; set KEEP_INDENTATION=true for indented blocks
- After each run the page state (URL, title, ARIA snapshot) is shown
    """

    console.print(Panel(help_text, title="Help", border_style="blue"))

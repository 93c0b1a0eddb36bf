"""
Browser Runner - run Playwright code against a live browser page.

Entry point: starts the browser and either runs a code file once
(``python main.py script.py``) or opens the interactive CLI.
"""

import asyncio
import sys
from pathlib import Path

from rich.console import Console

from browser_runner.browser import BrowserContext
from browser_runner.tools import get_browser_tools
from browser_runner.ui.cli import run_cli, run_once
from browser_runner.utils.config import load_config
from browser_runner.utils.logger import set_log_level, setup_logger

console = Console()
logger = setup_logger("browser_runner.main")


async def main(argv: list[str] | None = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command line arguments without program name

    Returns:
        Exit code (0 = success, 1 = error)
    """
    argv = sys.argv[1:] if argv is None else argv

    try:
        console.print("[cyan]Loading configuration...[/cyan]")
        config = load_config()
        set_log_level(config.log_level)
        logger.info("Configuration loaded successfully")

        script = Path(argv[0]).read_text(encoding="utf-8") if argv else None

        context = BrowserContext(config)
        try:
            target = config.cdp_endpoint or config.browser_type
            console.print(f"[cyan]Starting browser ({target})...[/cyan]")
            try:
                await context.start()
            except Exception as e:
                logger.error(f"Failed to start browser: {e}", exc_info=True)
                console.print(f"[red]✗ Failed to start browser: {e}[/red]")
                console.print(
                    "\n[yellow]Make sure browsers are installed:[/yellow]"
                )
                console.print("[yellow]  playwright install chromium[/yellow]\n")
                return 1

            tools = get_browser_tools(context)
            logger.info(f"All tools: {[tool.name for tool in tools]}")
            console.print(f"[green]✓ Tools ready: {len(tools)}[/green]\n")

            execute_tool = next(
                tool for tool in tools if tool.name == "browser_execute_playwright_code"
            )

            if script is not None:
                ok = await run_once(execute_tool, script)
                return 0 if ok else 1

            try:
                await run_cli(execute_tool)
            except KeyboardInterrupt:
                console.print("\n[yellow]Interrupted by user[/yellow]")

            return 0
        finally:
            await context.close()

    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found: {e}[/red]")
        return 1

    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return 1

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        console.print(f"[red]Unexpected error: {e}[/red]")
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
